from __future__ import annotations
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .utils.path import to_abs_path

SCOPES = ("loopback", "all")
LAYOUTS = ("standard", "compact", "detailed")

PROC_ROOT = Path("/proc")
NET_TABLES = ("tcp", "tcp6", "udp", "udp6")

TCP_STATES = {
    0x01: "ESTABLISHED",
    0x02: "SYN_SENT",
    0x03: "SYN_RECV",
    0x04: "FIN_WAIT1",
    0x05: "FIN_WAIT2",
    0x06: "TIME_WAIT",
    0x07: "CLOSE",
    0x08: "CLOSE_WAIT",
    0x09: "LAST_ACK",
    0x0A: "LISTEN",
    0x0B: "CLOSING",
}
UNKNOWN_STATE = "UNKNOWN"
UDP_STATE = "OPEN"

DEFAULT_TRUNCATE_WIDTH = 30
DEFAULT_WRAP_WIDTH = 50


@dataclass
class CFG:
    scope: str = "loopback"
    port: Optional[int] = None
    include: Optional[str] = None
    exclude: Optional[str] = None
    limit: Optional[int] = None
    layout: str = "standard"
    ignore_case: bool = False
    listen_only: bool = False
    proc_root: Path = field(default_factory=lambda: PROC_ROOT)
    truncate_width: int = DEFAULT_TRUNCATE_WIDTH
    wrap_width: int = DEFAULT_WRAP_WIDTH

    def validate(self) -> "CFG":
        if self.scope not in SCOPES:
            raise ConfigError(f"scope must be one of {', '.join(SCOPES)}, got {self.scope!r}")
        if self.layout not in LAYOUTS:
            raise ConfigError(f"layout must be one of {', '.join(LAYOUTS)}, got {self.layout!r}")
        if self.port is not None and not 0 <= self.port <= 0xFFFF:
            raise ConfigError(f"port out of range: {self.port}")
        if self.limit is not None and self.limit < 0:
            raise ConfigError(f"limit must not be negative: {self.limit}")
        for name in ("truncate_width", "wrap_width"):
            if getattr(self, name) < 4:
                raise ConfigError(f"{name} must be at least 4")
        return self


INT_KEYS = ("port", "limit", "truncate_width", "wrap_width")
BOOL_KEYS = ("ignore_case", "listen_only")
TEXT_KEYS = ("scope", "layout", "include", "exclude")


def cfg_from_mapping(data: Dict[str, Any], base: Optional[CFG] = None) -> CFG:
    cfg = base or CFG()
    known = {f.name for f in fields(CFG)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
    for k, v in data.items():
        if k == "proc_root":
            if not isinstance(v, str) or not v:
                raise ConfigError(f"proc_root must be a path, got {v!r}")
            v = Path(v)
        elif k in INT_KEYS and v is not None:
            if isinstance(v, bool):
                raise ConfigError(f"{k} must be an integer, got {v!r}")
            try:
                v = int(v)
            except (TypeError, ValueError):
                raise ConfigError(f"{k} must be an integer, got {v!r}") from None
        elif k in BOOL_KEYS and not isinstance(v, bool):
            raise ConfigError(f"{k} must be true or false, got {v!r}")
        elif k in TEXT_KEYS and v is not None:
            if isinstance(v, (dict, list)):
                raise ConfigError(f"{k} must be text, got {v!r}")
            v = str(v)
        setattr(cfg, k, v)
    return cfg


def load_cfg_file(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    p = to_abs_path(path)
    if not p or not p.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        txt = p.read_text(encoding="utf-8")
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config {p}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {p} must contain a mapping")
    return data


def init_cfg_from_args(args) -> CFG:
    cfg = cfg_from_mapping(load_cfg_file(getattr(args, "config", None)))
    if getattr(args, "all", False):
        cfg.scope = "all"
    elif getattr(args, "localhost", False):
        cfg.scope = "loopback"
    if getattr(args, "port", None) is not None:
        cfg.port = args.port
    if getattr(args, "filter", None):
        cfg.include = args.filter
    if getattr(args, "exclude", None):
        cfg.exclude = args.exclude
    if getattr(args, "limit", None) is not None:
        cfg.limit = args.limit
    if getattr(args, "detailed", False):
        cfg.layout = "detailed"
    elif getattr(args, "compact", False):
        cfg.layout = "compact"
    cfg.ignore_case = cfg.ignore_case or bool(getattr(args, "ignore_case", False))
    cfg.listen_only = cfg.listen_only or bool(getattr(args, "listen_only", False))
    if getattr(args, "proc_root", None):
        cfg.proc_root = to_abs_path(args.proc_root)
    return cfg.validate()
