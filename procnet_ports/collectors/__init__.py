from .linux import parse_line, parse_table, read_tables
from .procfs import InodeIndex, fetch_proc, walk_fds

__all__ = ["InodeIndex", "fetch_proc", "parse_line", "parse_table", "read_tables", "walk_fds"]
