from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models import Port

UNKNOWN = "-"


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    label: str


COLUMNS: List[Column] = [
    Column("port", "PORT", "Port"),
    Column("protocol", "PROTOCOL", "Protocol"),
    Column("state", "STATE", "State"),
    Column("pid", "PID", "PID"),
    Column("process", "PROCESS", "Process"),
    Column("command", "COMMAND", "Command"),
    Column("working_dir", "WORKING_DIR", "Working Dir"),
]


def _text(v: Optional[object]) -> str:
    return UNKNOWN if v is None else str(v)


def cells(port: Port) -> Dict[str, str]:
    """Display text per column key; unknown process values show as '-'."""
    s, p = port.sock, port.proc
    return {
        "port": str(s.port),
        "protocol": s.proto.value,
        "state": s.state,
        "pid": _text(port.pid),
        "process": _text(p.name if p else None),
        "command": _text(p.cmd if p else None),
        "working_dir": _text(p.cwd if p else None),
    }

