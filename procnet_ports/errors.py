from __future__ import annotations


class ProcnetError(Exception):
    pass


class PlatformUnsupported(ProcnetError):
    """None of the kernel socket tables could be read."""


class ConfigError(ProcnetError, ValueError):
    pass


class MalformedRecord(ProcnetError, ValueError):
    """A socket table line that could not be decoded."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line.strip()!r}")
        self.line = line
        self.reason = reason
