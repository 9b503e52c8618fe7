from __future__ import annotations
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import List

from ..collectors.linux import read_tables
from ..collectors.procfs import InodeIndex, fetch_proc, walk_fds
from ..config import CFG
from ..filters import apply_filters
from ..models import Diagnostics, Port, Snapshot
from ..render import get_renderer
from .correlate import correlate

log = logging.getLogger(__name__)


@dataclass
class Report:
    ports: List[Port] = field(default_factory=list)
    text: str = ""
    diag: Diagnostics = field(default_factory=Diagnostics)

    @property
    def empty(self) -> bool:
        return not self.ports


def take_snapshot(cfg: CFG) -> Snapshot:
    diag = Diagnostics()
    socks = read_tables(cfg.proc_root, diag)
    index = InodeIndex.from_refs(walk_fds(cfg.proc_root, diag))
    fetch = partial(fetch_proc, proc_root=cfg.proc_root)
    ports = correlate(socks, index, fetch=fetch, diag=diag)
    log.debug("snapshot: %d sockets, %d indexed inodes (%s)", len(ports), len(index), diag.summary())
    return Snapshot(ports=ports, diag=diag)


def build_report(cfg: CFG) -> Report:
    snap = take_snapshot(cfg)
    ports = apply_filters(snap.ports, cfg)
    text = get_renderer(cfg.layout, cfg).render(ports)
    return Report(ports=ports, text=text, diag=snap.diag)
