from __future__ import annotations
from typing import Dict, Optional, Type

from ..config import CFG
from ..errors import ConfigError
from .base import Renderer
from .columns import COLUMNS, Column, cells
from .detailed import DetailedRenderer
from .tables import CompactRenderer, StandardRenderer

RENDERERS: Dict[str, Type[Renderer]] = {
    cls.name: cls for cls in (StandardRenderer, CompactRenderer, DetailedRenderer)
}


def get_renderer(layout: str, cfg: Optional[CFG] = None) -> Renderer:
    try:
        cls = RENDERERS[layout]
    except KeyError:
        raise ConfigError(f"unknown layout: {layout!r}") from None
    return cls.from_cfg(cfg or CFG())


__all__ = ["COLUMNS", "Column", "CompactRenderer", "DetailedRenderer", "RENDERERS", "Renderer",
           "StandardRenderer", "cells", "get_renderer"]
