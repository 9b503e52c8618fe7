from __future__ import annotations
import argparse, logging, sys

from .config import init_cfg_from_args
from .errors import ConfigError, PlatformUnsupported
from .topology import build_report

EXIT_OK = 0
EXIT_EMPTY = 0
EXIT_UNSUPPORTED = 2
EXIT_CONFIG = 3


def parse_args(argv=None):
    ap = argparse.ArgumentParser(prog="procnet-ports", description='Shows open ports with process information')
    ap.add_argument('-l', '--localhost', action='store_true', help='show only loopback ports (default)')
    ap.add_argument('-a', '--all', action='store_true', help='show all ports, including non-loopback')
    ap.add_argument('-p', '--port', type=int, default=None, help='check a specific local port')
    ap.add_argument('-d', '--detailed', action='store_true', help='detailed output with full paths and commands')
    ap.add_argument('-c', '--compact', action='store_true', help='compact table, long values wrap')
    ap.add_argument('-f', '--filter', type=str, default=None, help='keep results whose process name, command or working directory contain TEXT')
    ap.add_argument('-x', '--exclude', type=str, default=None, help='drop results whose process name, command or working directory contain TEXT')
    ap.add_argument('-n', '--limit', type=int, default=None, help='show at most N results')
    ap.add_argument('-i', '--ignore-case', action='store_true', help='case-insensitive --filter/--exclude')
    ap.add_argument('--listen-only', action='store_true', help='only TCP sockets in LISTEN state (UDP is kept)')
    ap.add_argument('--proc-root', type=str, default=None, help='procfs mount point (default /proc)')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON file with default options')
    ap.add_argument('-v', '--verbose', action='store_true')
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        cfg = init_cfg_from_args(args)
    except ConfigError as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        report = build_report(cfg)
    except PlatformUnsupported as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_UNSUPPORTED

    if args.verbose:
        print(f"[*] {report.diag.summary()}", file=sys.stderr)
    if report.diag.pids_denied:
        print(f"[warn] {report.diag.pids_denied} processes could not be inspected; run as root for full results",
              file=sys.stderr)
    sys.stdout.write(report.text)
    if report.empty:
        print("No open ports found.")
        return EXIT_EMPTY
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
