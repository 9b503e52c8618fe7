from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Proto(str, Enum):
    TCP = "TCP"
    UDP = "UDP"


@dataclass(frozen=True)
class Sock:
    proto: Proto
    table: str  # 'tcp', 'tcp6', 'udp', 'udp6'
    laddr: Tuple[str, int]
    raddr: Tuple[str, int]
    state: str  # 'LISTEN', 'ESTABLISHED', ... or 'OPEN' for UDP
    inode: int

    @property
    def family(self) -> int:
        return 6 if self.table.endswith("6") else 4

    @property
    def port(self) -> int:
        return self.laddr[1]


@dataclass(frozen=True)
class FdRef:
    pid: int
    fd: int
    inode: int


@dataclass(frozen=True)
class Proc:
    """Process metadata; None means the field could not be observed."""
    pid: int
    name: Optional[str] = None
    cmdline: Optional[Tuple[str, ...]] = None
    cwd: Optional[str] = None

    @property
    def cmd(self) -> Optional[str]:
        if self.cmdline is None:
            return None
        return " ".join(self.cmdline)


@dataclass(frozen=True)
class Port:
    sock: Sock
    proc: Optional[Proc] = None

    @property
    def pid(self) -> Optional[int]:
        return self.proc.pid if self.proc else None


@dataclass
class Diagnostics:
    tables_read: int = 0
    tables_missing: int = 0
    malformed_lines: int = 0
    pids_seen: int = 0
    pids_denied: int = 0
    pids_vanished: int = 0
    meta_fields_missing: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def summary(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.as_dict().items())


@dataclass
class Snapshot:
    ports: List[Port] = field(default_factory=list)
    diag: Diagnostics = field(default_factory=Diagnostics)
