from __future__ import annotations
import ipaddress
from typing import Iterable, List

from .config import CFG
from .models import Port, Proto

PROTO_ORDER = {Proto.TCP: 0, Proto.UDP: 1}
IPV6_LOOPBACK = ipaddress.IPv6Address("::1")


def is_loopback(ip: str) -> bool:
    """127.0.0.0/8 or ::1. IPv4-mapped and wildcard addresses are not loopback."""
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    if addr.version == 6:
        return addr == IPV6_LOOPBACK
    return addr.is_loopback


def _haystack(port: Port) -> List[str]:
    p = port.proc
    if p is None:
        return []
    return [v for v in (p.name, p.cmd, p.cwd) if v]


def matches_text(port: Port, needle: str, ignore_case: bool = False) -> bool:
    """Substring match against process name, command line and working directory.

    Port number and protocol are deliberately not searched.
    """
    hay = _haystack(port)
    if ignore_case:
        needle = needle.lower()
        hay = [h.lower() for h in hay]
    return any(needle in h for h in hay)


def sort_key(port: Port):
    return (port.sock.port, PROTO_ORDER[port.sock.proto])


def apply_filters(ports: Iterable[Port], cfg: CFG) -> List[Port]:
    out = list(ports)
    if cfg.scope == "loopback":
        out = [p for p in out if is_loopback(p.sock.laddr[0])]
    if cfg.listen_only:
        out = [p for p in out if p.sock.proto is Proto.UDP or p.sock.state == "LISTEN"]
    if cfg.port is not None:
        out = [p for p in out if p.sock.port == cfg.port]
    if cfg.include:
        out = [p for p in out if matches_text(p, cfg.include, cfg.ignore_case)]
    if cfg.exclude:
        out = [p for p in out if not matches_text(p, cfg.exclude, cfg.ignore_case)]
    out.sort(key=sort_key)
    if cfg.limit is not None:
        out = out[:cfg.limit]
    return out
