from __future__ import annotations
import io
from typing import Dict, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..config import CFG, DEFAULT_TRUNCATE_WIDTH, DEFAULT_WRAP_WIDTH
from ..models import Port
from .base import Renderer
from .columns import COLUMNS, cells

# columns whose width is bounded; the rest size to their content
LONG_COLUMNS = ("command", "working_dir")
CONSOLE_WIDTH = 4096


def _to_text(table: Table) -> str:
    buf = io.StringIO()
    console = Console(file=buf, width=CONSOLE_WIDTH, color_system=None, force_terminal=False,
                      highlight=False, emoji=False, markup=False)
    console.print(table)
    return buf.getvalue()


class _TableRenderer(Renderer):
    border = box.ASCII
    show_lines = False

    def __init__(self, width: int):
        self.width = width

    def column_opts(self, key: str) -> Dict:
        raise NotImplementedError

    def render(self, ports: Sequence[Port]) -> str:
        table = Table(box=self.border, show_lines=self.show_lines, header_style="none")
        for col in COLUMNS:
            table.add_column(col.header, **self.column_opts(col.key))
        for port in ports:
            row = cells(port)
            table.add_row(*(Text(row[col.key]) for col in COLUMNS))
        return _to_text(table)


class StandardRenderer(_TableRenderer):
    """One line per record; long values are cut with a trailing ellipsis."""
    name = "standard"
    border = box.ASCII

    def __init__(self, width: int = DEFAULT_TRUNCATE_WIDTH):
        super().__init__(width)

    @classmethod
    def from_cfg(cls, cfg: CFG) -> "StandardRenderer":
        return cls(cfg.truncate_width)

    def column_opts(self, key: str) -> Dict:
        opts = {"no_wrap": True, "overflow": "ellipsis"}
        if key in LONG_COLUMNS:
            opts["max_width"] = self.width
        return opts


class CompactRenderer(_TableRenderer):
    """Box-drawing borders; long values wrap inside their cell and the row grows."""
    name = "compact"
    border = box.SQUARE
    show_lines = True

    def __init__(self, width: int = DEFAULT_WRAP_WIDTH):
        super().__init__(width)

    @classmethod
    def from_cfg(cls, cfg: CFG) -> "CompactRenderer":
        return cls(cfg.wrap_width)

    def column_opts(self, key: str) -> Dict:
        if key in LONG_COLUMNS:
            return {"max_width": self.width, "overflow": "fold"}
        return {"no_wrap": True}
