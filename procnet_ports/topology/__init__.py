from .correlate import correlate
from .snapshot import Report, build_report, take_snapshot

__all__ = ["Report", "build_report", "correlate", "take_snapshot"]
