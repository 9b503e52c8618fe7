from __future__ import annotations
import os
from pathlib import Path
from typing import Optional


def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """'~/ports.yaml' or 'ports.yaml' -> absolute path, relative ones taken from the CWD."""
    if not p:
        return None
    return Path(p).expanduser().resolve()
