from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Optional

from ..collectors.procfs import InodeIndex, fetch_proc
from ..models import Diagnostics, Port, Proc, Sock

Fetch = Callable[..., Proc]


def correlate(socks: Iterable[Sock], index: InodeIndex, fetch: Fetch = fetch_proc,
              diag: Optional[Diagnostics] = None) -> List[Port]:
    """Attach the canonical owning process to every socket.

    Output has one Port per Sock, in input order. Metadata is fetched once
    per distinct owner pid; sockets with no owner keep proc=None.
    """
    procs: Dict[int, Proc] = {}
    ports: List[Port] = []
    for sock in socks:
        pid = index.owner(sock.inode) if sock.inode else None
        if pid is None:
            ports.append(Port(sock=sock))
            continue
        if pid not in procs:
            procs[pid] = fetch(pid, diag)
        ports.append(Port(sock=sock, proc=procs[pid]))
    return ports
