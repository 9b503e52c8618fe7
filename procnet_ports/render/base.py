from __future__ import annotations
from typing import Sequence

from ..config import CFG
from ..models import Port


class Renderer:
    name = ""

    @classmethod
    def from_cfg(cls, cfg: CFG) -> "Renderer":
        return cls()

    def render(self, ports: Sequence[Port]) -> str:
        raise NotImplementedError
