from __future__ import annotations
import logging
import os
import re
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import psutil

from ..config import PROC_ROOT
from ..errors import PlatformUnsupported
from ..models import Diagnostics, FdRef, Proc

log = logging.getLogger(__name__)

SOCKET_RE = re.compile(r"^socket:\[(?P<inode>\d+)\]$")


def _socket_inode(target: str) -> Optional[int]:
    m = SOCKET_RE.match(target)
    return int(m.group("inode")) if m else None


def _pid_fds(proc_root: Path, pid: int) -> List[FdRef]:
    fd_dir = proc_root / str(pid) / "fd"
    refs: List[FdRef] = []
    # listing fd/ may raise; callers decide what that means for the process
    for name in os.listdir(fd_dir):
        if not name.isdigit():
            continue
        try:
            target = os.readlink(fd_dir / name)
        except OSError:
            # descriptor closed between listdir and readlink
            continue
        inode = _socket_inode(target)
        if inode is not None:
            refs.append(FdRef(pid=pid, fd=int(name), inode=inode))
    return refs


def walk_fds(proc_root: Path = PROC_ROOT, diag: Optional[Diagnostics] = None) -> List[FdRef]:
    """Collects one FdRef per socket descriptor of every visible process.

    Processes we may not inspect, or that exit during the walk, simply
    contribute nothing.
    """
    diag = diag if diag is not None else Diagnostics()
    proc_root = Path(proc_root)
    try:
        entries = os.listdir(proc_root)
    except OSError as e:
        raise PlatformUnsupported(f"cannot list {proc_root}: {e}") from e

    refs: List[FdRef] = []
    for entry in entries:
        if not entry.isdigit():
            continue
        pid = int(entry)
        diag.pids_seen += 1
        try:
            refs.extend(_pid_fds(proc_root, pid))
        except PermissionError:
            log.debug("pid %d: fd listing denied", pid)
            diag.pids_denied += 1
        except (FileNotFoundError, ProcessLookupError, NotADirectoryError):
            log.debug("pid %d: vanished during walk", pid)
            diag.pids_vanished += 1
        except OSError as e:
            log.debug("pid %d: fd listing failed: %s", pid, e)
            diag.pids_vanished += 1
    return refs


class InodeIndex:
    """inode -> pids multi-map, built once per run from descriptor observations."""

    def __init__(self) -> None:
        self._pids: Dict[int, Set[int]] = defaultdict(set)

    @classmethod
    def from_refs(cls, refs: Iterable[FdRef]) -> "InodeIndex":
        index = cls()
        for ref in refs:
            if ref.inode:
                index._pids[ref.inode].add(ref.pid)
        return index

    def pids(self, inode: int) -> FrozenSet[int]:
        return frozenset(self._pids.get(inode, ()))

    def owner(self, inode: int) -> Optional[int]:
        """Canonical owner: the smallest pid holding the socket."""
        pids = self._pids.get(inode)
        return min(pids) if pids else None

    def __contains__(self, inode: object) -> bool:
        return inode in self._pids

    def __len__(self) -> int:
        return len(self._pids)


def _split_cmdline(raw: bytes) -> Tuple[str, ...]:
    raw = raw.rstrip(b"\0")
    if not raw:
        return ()
    return tuple(a.decode(errors="replace") for a in raw.split(b"\0"))


def fetch_proc(pid: int, diag: Optional[Diagnostics] = None, proc_root: Path = PROC_ROOT) -> Proc:
    """Name, cmdline and cwd of one pid, each field fetched on its own.

    Metadata comes from the same procfs the descriptors were read from:
    psutil for the live /proc, the pseudo-files themselves for any other root.
    """
    proc_root = Path(proc_root)
    if proc_root == PROC_ROOT:
        try:
            p = psutil.Process(pid)
        except psutil.Error as e:
            log.debug("pid %d: no metadata: %s", pid, e)
            if diag is not None:
                diag.meta_fields_missing += 3
            return Proc(pid=pid)
        getters: Dict[str, Callable] = {
            "name": p.name,
            "cmdline": lambda: tuple(p.cmdline()),
            "cwd": p.cwd,
        }
        errors = psutil.Error
    else:
        base = proc_root / str(pid)
        getters = {
            "name": lambda: (base / "comm").read_text(errors="replace").rstrip("\n"),
            "cmdline": lambda: _split_cmdline((base / "cmdline").read_bytes()),
            "cwd": lambda: os.readlink(base / "cwd"),
        }
        errors = OSError

    values: Dict[str, object] = {}
    for key, get in getters.items():
        try:
            values[key] = get()
        except errors as e:
            log.debug("pid %d: %s unavailable: %s", pid, key, e)
            values[key] = None
            if diag is not None:
                diag.meta_fields_missing += 1
    return Proc(pid=pid, **values)
