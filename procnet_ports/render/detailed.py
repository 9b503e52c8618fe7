from __future__ import annotations
from typing import Sequence

from ..models import Port
from .base import Renderer
from .columns import COLUMNS, cells


class DetailedRenderer(Renderer):
    name = "detailed"

    def render(self, ports: Sequence[Port]) -> str:
        blocks = []
        for port in ports:
            row = cells(port)
            blocks.append("\n".join(f"{col.label}: {row[col.key]}" for col in COLUMNS))
        return "\n\n".join(blocks) + ("\n" if blocks else "")
