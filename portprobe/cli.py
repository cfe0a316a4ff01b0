from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from .errors import ConfigError
from .models import DEFAULT_CONNECT_TIMEOUT, DEFAULT_THREADS, Protocol, ScanConfig
from .output import ConsoleSink
from .ports import resolve
from .scanner import run_scan
from .targets import resolve_host

logger = logging.getLogger("portprobe")

PORTS_FLAGS = ("-ports", "--ports")

BANNER = r"""
                   _                 _
 _ __   ___  _ __| |_ _ __  _ __ ___ | |__   ___
| '_ \ / _ \| '__| __| '_ \| '__/ _ \| '_ \ / _ \
| |_) | (_) | |  | |_| |_) | | | (_) | |_) |  __/
| .__/ \___/|_|   \__| .__/|_|  \___/|_.__/ \___|
|_|                  |_|
"""


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="portprobe",
        description="TCP/UDP port reachability probe",
        allow_abbrev=False,
    )
    p.add_argument("-host", "--host", dest="host", default="localhost", help="Host to scan (default: localhost)")
    p.add_argument("-ports", "--ports", dest="ports", default="1-1024", help="Port range to scan, e.g. 20-80 (default: 1-1024)")
    p.add_argument("-udp", "--udp", dest="udp", action="store_true", help="Use UDP instead of TCP")
    p.add_argument("-banners", "--banners", dest="banners", action="store_true", help="Try to grab service banners on open TCP ports")
    p.add_argument("-threads", "--threads", dest="threads", type=int, default=DEFAULT_THREADS, help=f"Number of concurrent probes (default: {DEFAULT_THREADS})")
    p.add_argument("-timeout", "--timeout", dest="timeout", type=float, default=DEFAULT_CONNECT_TIMEOUT, help=f"Connect timeout seconds (default: {DEFAULT_CONNECT_TIMEOUT})")
    p.add_argument("-read-timeout", "--read-timeout", dest="read_timeout", type=float, default=None, help="Banner/response read timeout seconds (default: 2.0 TCP, 1.0 UDP)")
    p.add_argument("-progress-every", "--progress-every", dest="progress_every", type=int, default=0, help="Log progress every N ports (default: off)")
    p.add_argument("-no-color", "--no-color", dest="no_color", action="store_true", help="Disable colored output")
    p.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Debug logging")
    return p


def print_usage(parser: argparse.ArgumentParser) -> None:
    print(BANNER, file=sys.stderr)
    parser.print_help(sys.stderr)


def glue_port_values(argv: List[str]) -> List[str]:
    """
    "-ports -5-10" -> "-ports=-5-10", so a dash-leading range reaches
    resolve() and gets reported instead of tripping argparse.
    """
    out: List[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in PORTS_FLAGS and i + 1 < len(argv):
            out.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        out.append(arg)
        i += 1
    return out


def main(argv=None) -> int:
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        print_usage(parser)
        return 1

    args = parser.parse_args(glue_port_values(list(argv)))
    setup_logging(args.verbose)

    protocol = Protocol.UDP if args.udp else Protocol.TCP
    try:
        ports = resolve(args.ports)
        host = resolve_host(args.host)
        config = ScanConfig(
            protocol=protocol,
            concurrency_limit=args.threads,
            connect_timeout=args.timeout,
            read_timeout=args.read_timeout,
            capture_banner=args.banners and not args.udp,
            progress_every=args.progress_every,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.banners and args.udp:
        logger.warning("-banners only applies to TCP scans; ignoring it")

    print(f"Starting {protocol.value} scan on {args.host} ({len(ports)} ports) with {args.threads} threads...")
    sink = ConsoleSink(color=not args.no_color and sys.stdout.isatty())
    run_scan(host, ports, config, sink)
    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
