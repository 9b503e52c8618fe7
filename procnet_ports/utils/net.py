from __future__ import annotations
import ipaddress, re, socket
from typing import Tuple

HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def _hex(h: str, digits: int, what: str) -> str:
    if len(h) != digits:
        raise ValueError(f"{what} needs {digits} hex digits, got {len(h)}")
    if not HEX_RE.fullmatch(h):
        raise ValueError(f"{what} is not plain hex: {h!r}")
    return h


def ipv4_from_hex(h: str) -> str:
    """'0100007F' -> '127.0.0.1' (kernel stores the 32-bit value little-endian)."""
    return socket.inet_ntoa(bytes.fromhex(_hex(h, 8, "IPv4 address"))[::-1])


def ipv6_from_hex(h: str) -> str:
    """32 hex digits: four 32-bit words, each in host (little-endian) byte order."""
    raw = bytes.fromhex(_hex(h, 32, "IPv6 address"))
    b = b"".join(raw[i:i + 4][::-1] for i in range(0, 16, 4))
    return str(ipaddress.IPv6Address(b))


def port_from_hex(h: str) -> int:
    return int(_hex(h, 4, "port"), 16)


def parse_hex_endpoint(s: str, family: int) -> Tuple[str, int]:
    """
    Decodes a socket table endpoint:
      - '0100007F:1F90' (family 4) -> ('127.0.0.1', 8080)
      - '00000000000000000000000001000000:0035' (family 6) -> ('::1', 53)
    """
    addr, sep, port = s.partition(":")
    if not sep:
        raise ValueError(f"missing ':' in endpoint {s!r}")
    ip = ipv6_from_hex(addr) if family == 6 else ipv4_from_hex(addr)
    return ip, port_from_hex(port)


def ipv4_to_hex(ip: str) -> str:
    return socket.inet_aton(ip)[::-1].hex().upper()


def ipv6_to_hex(ip: str) -> str:
    raw = ipaddress.IPv6Address(ip).packed
    return b"".join(raw[i:i + 4][::-1] for i in range(0, 16, 4)).hex().upper()


def port_to_hex(port: int) -> str:
    return f"{port:04X}"
