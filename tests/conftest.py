from __future__ import annotations
import os
from pathlib import Path

import psutil
import pytest

from procnet_ports.models import Port, Proc, Proto, Sock
from procnet_ports.utils.net import ipv4_to_hex, ipv6_to_hex, port_to_hex

HEADER = ("  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt"
          "   uid  timeout inode")


def table_line(slot, laddr, raddr, state, inode, family=4):
    enc = ipv6_to_hex if family == 6 else ipv4_to_hex
    return (f"{slot:4d}: {enc(laddr[0])}:{port_to_hex(laddr[1])} "
            f"{enc(raddr[0])}:{port_to_hex(raddr[1])} {state:02X} "
            f"00000000:00000000 00:00000000 00000000  1000        0 {inode} 1 "
            f"0000000000000000 100 0 0 10 0")


class FakeProcRoot:
    """A procfs look-alike below tmp_path: net/* tables and <pid>/fd symlinks."""

    def __init__(self, root: Path):
        self.root = root
        (root / "net").mkdir()

    def table(self, name, lines):
        (self.root / "net" / name).write_text("\n".join([HEADER, *lines]) + "\n")

    def process(self, pid, inodes=(), others=(), name=None, cmdline=None, cwd=None):
        base = self.root / str(pid)
        fd_dir = base / "fd"
        fd_dir.mkdir(parents=True)
        if name is not None:
            (base / "comm").write_text(name + "\n")
        if cmdline is not None:
            (base / "cmdline").write_bytes(b"".join(a.encode() + b"\0" for a in cmdline))
        if cwd is not None:
            os.symlink(cwd, base / "cwd")
        fd = 0
        for inode in inodes:
            os.symlink(f"socket:[{inode}]", fd_dir / str(fd))
            fd += 1
        for target in others:
            os.symlink(target, fd_dir / str(fd))
            fd += 1
        return fd_dir


@pytest.fixture
def proc_root(tmp_path):
    return FakeProcRoot(tmp_path)


class FakeProcess:
    """Stands in for psutil.Process; values that are exceptions get raised."""
    table = {}

    def __init__(self, pid):
        if pid not in self.table:
            raise psutil.NoSuchProcess(pid)
        self.pid = pid
        self._info = self.table[pid]

    def _get(self, key):
        v = self._info.get(key)
        if isinstance(v, Exception):
            raise v
        return v

    def name(self):
        return self._get("name")

    def cmdline(self):
        return self._get("cmdline")

    def cwd(self):
        return self._get("cwd")


@pytest.fixture
def fake_psutil(monkeypatch):
    table = {}
    cls = type("FakeProcessForTest", (FakeProcess,), {"table": table})
    monkeypatch.setattr(psutil, "Process", cls)
    return table


def make_port(port, proto=Proto.TCP, ip="127.0.0.1", state=None, inode=1, proc=None):
    table = "tcp" if proto is Proto.TCP else "udp"
    if ":" in ip:
        table += "6"
    if state is None:
        state = "LISTEN" if proto is Proto.TCP else "OPEN"
    sock = Sock(proto=proto, table=table, laddr=(ip, port), raddr=("0.0.0.0", 0), state=state, inode=inode)
    return Port(sock=sock, proc=proc)


def make_proc(pid, name="app", cmd=("app",), cwd="/"):
    return Proc(pid=pid, name=name, cmdline=tuple(cmd) if cmd is not None else None, cwd=cwd)
