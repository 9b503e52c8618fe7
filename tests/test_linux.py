import pytest

from procnet_ports.collectors.linux import parse_line, parse_table, read_tables
from procnet_ports.errors import MalformedRecord, PlatformUnsupported
from procnet_ports.models import Diagnostics, Proto

from conftest import HEADER, table_line

LISTEN, ESTABLISHED = 0x0A, 0x01


def test_parse_tcp_listen_line():
    sock = parse_line(table_line(0, ("127.0.0.1", 8080), ("0.0.0.0", 0), LISTEN, 4242), "tcp")
    assert sock.proto is Proto.TCP
    assert sock.laddr == ("127.0.0.1", 8080)
    assert sock.raddr == ("0.0.0.0", 0)
    assert sock.state == "LISTEN"
    assert sock.inode == 4242
    assert sock.family == 4


def test_parse_real_kernel_line():
    line = ("   0: 0100007F:1F90 00000000:0000 0A 00000000:00000000 00:00000000 "
            "00000000  1000        0 28990 1 0000000000000000 100 0 0 10 0")
    sock = parse_line(line, "tcp")
    assert (sock.laddr, sock.state, sock.inode) == (("127.0.0.1", 8080), "LISTEN", 28990)


def test_udp_is_always_open():
    # 07 would be CLOSE for TCP; the udp state column carries no meaning here
    sock = parse_line(table_line(3, ("127.0.0.53", 53), ("0.0.0.0", 0), 0x07, 99), "udp")
    assert sock.proto is Proto.UDP
    assert sock.state == "OPEN"


def test_ipv6_line():
    sock = parse_line(table_line(0, ("::1", 5432), ("::", 0), LISTEN, 7, family=6), "tcp6")
    assert sock.laddr == ("::1", 5432)
    assert sock.table == "tcp6"
    assert sock.family == 6


def test_unmapped_tcp_state_is_unknown():
    sock = parse_line(table_line(0, ("127.0.0.1", 1), ("0.0.0.0", 0), 0x0C, 1), "tcp")
    assert sock.state == "UNKNOWN"


@pytest.mark.parametrize("line", [
    "   0: 0100007F:1F90 00000000:0000 0A",
    "   0: 0100007F:1F90 00000000:0000 ZZ 00000000:00000000 00:00000000 00000000 0 0 1 1",
    "   0: 0100007F:1F90 00000000:0000 0A 00000000:00000000 00:00000000 00000000 0 0 abc 1",
    "   0: XX00007F:1F90 00000000:0000 0A 00000000:00000000 00:00000000 00000000 0 0 12 1",
    "   0: 0100007F:-001 00000000:0000 0A 00000000:00000000 00:00000000 00000000 0 0 5 1",
    "   0: 0100007F:0x50 00000000:0000 0A 00000000:00000000 00:00000000 00000000 0 0 5 1",
    "   0: 0100007F:0050 00000000:0000 +A 00000000:00000000 00:00000000 00000000 0 0 5 1",
    "   0: 0100007F:0050 00000000:0000 -1 00000000:00000000 00:00000000 00000000 0 0 5 1",
])
def test_malformed_lines_raise(line):
    with pytest.raises(MalformedRecord):
        parse_line(line, "tcp")


def test_malformed_lines_are_skipped_not_fatal():
    good1 = table_line(0, ("127.0.0.1", 80), ("0.0.0.0", 0), LISTEN, 1)
    good2 = table_line(2, ("127.0.0.1", 81), ("10.0.0.2", 5555), ESTABLISHED, 2)
    text = "\n".join([HEADER, good1, "   1: garbage", "", good2])
    diag = Diagnostics()
    socks = parse_table(text, "tcp", diag)
    assert [s.port for s in socks] == [80, 81]
    assert diag.malformed_lines == 1


def test_header_is_discarded():
    assert parse_table(HEADER + "\n", "tcp") == []


def test_missing_tables_contribute_nothing(proc_root):
    proc_root.table("tcp", [table_line(0, ("127.0.0.1", 8080), ("0.0.0.0", 0), LISTEN, 10)])
    proc_root.table("udp", [table_line(0, ("127.0.0.1", 53), ("0.0.0.0", 0), 0x07, 11)])
    diag = Diagnostics()
    socks = read_tables(proc_root.root, diag)
    assert [(s.table, s.port) for s in socks] == [("tcp", 8080), ("udp", 53)]
    assert diag.tables_read == 2
    assert diag.tables_missing == 2


def test_no_tables_is_platform_unsupported(tmp_path):
    with pytest.raises(PlatformUnsupported):
        read_tables(tmp_path)
