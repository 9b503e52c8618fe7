from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from ..config import NET_TABLES, PROC_ROOT, TCP_STATES, UDP_STATE, UNKNOWN_STATE
from ..errors import MalformedRecord, PlatformUnsupported
from ..models import Diagnostics, Proto, Sock
from ..utils.net import HEX_RE, parse_hex_endpoint

log = logging.getLogger(__name__)

# sl local_address rem_address st tx_queue:rx_queue tr:tm->when retrnsmt uid timeout inode ...
F_LOCAL, F_REMOTE, F_STATE, F_INODE = 1, 2, 3, 9
MIN_FIELDS = 10


def _tcp_state(s: str) -> str:
    if len(s) != 2 or not HEX_RE.fullmatch(s):
        raise ValueError(f"state must be one hex byte, got {s!r}")
    return TCP_STATES.get(int(s, 16), UNKNOWN_STATE)


def parse_line(line: str, table: str) -> Sock:
    fields = line.split()
    if len(fields) < MIN_FIELDS:
        raise MalformedRecord(line, f"expected {MIN_FIELDS} fields, got {len(fields)}")
    family = 6 if table.endswith("6") else 4
    proto = Proto.TCP if table.startswith("tcp") else Proto.UDP
    try:
        laddr = parse_hex_endpoint(fields[F_LOCAL], family)
        raddr = parse_hex_endpoint(fields[F_REMOTE], family)
        state = _tcp_state(fields[F_STATE]) if proto is Proto.TCP else UDP_STATE
        if not fields[F_INODE].isdigit():
            raise ValueError(f"inode is not decimal: {fields[F_INODE]!r}")
        inode = int(fields[F_INODE])
    except ValueError as e:
        raise MalformedRecord(line, str(e)) from e
    return Sock(proto=proto, table=table, laddr=laddr, raddr=raddr, state=state, inode=inode)


def parse_table(text: str, table: str, diag: Optional[Diagnostics] = None) -> List[Sock]:
    socks: List[Sock] = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        try:
            socks.append(parse_line(line, table))
        except MalformedRecord as e:
            log.debug("skipping %s line: %s", table, e)
            if diag is not None:
                diag.malformed_lines += 1
    return socks


def read_tables(proc_root: Path = PROC_ROOT, diag: Optional[Diagnostics] = None) -> List[Sock]:
    """Reads net/tcp, net/tcp6, net/udp and net/udp6 below proc_root.

    A missing table (e.g. IPv6 disabled) contributes nothing; only when
    none of them can be read is the platform considered unsupported.
    """
    diag = diag if diag is not None else Diagnostics()
    socks: List[Sock] = []
    read = 0
    for table in NET_TABLES:
        path = Path(proc_root) / "net" / table
        try:
            text = path.read_text(encoding="ascii", errors="replace")
        except OSError as e:
            log.info("socket table %s unavailable: %s", path, e)
            diag.tables_missing += 1
            continue
        read += 1
        socks.extend(parse_table(text, table, diag))
    diag.tables_read += read
    if not read:
        raise PlatformUnsupported(f"no socket tables readable under {Path(proc_root) / 'net'}")
    return socks
