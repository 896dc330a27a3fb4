"""
=============================================================================
COMMAND-LINE ENTRY POINT
=============================================================================

    python -m labserver                       # port 3000, files in cwd
    python -m labserver --port 8000
    python -m labserver --base-dir /tmp/lab   # where file.txt lives
    python -m labserver --prefix /COMP4537/labs/3
    labserver --log-level DEBUG               # installed console script

Flags override environment variables (PORT, LAB_*), which override the
defaults in ServerConfig.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .server import APIServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labserver",
        description="Greeting, date and append-only text file endpoints over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  labserver                          # http://localhost:3000/labs/3/...
  labserver -H 127.0.0.1 -p 8000     # this machine only, port 8000
  labserver -d /var/lib/lab          # store files under /var/lib/lab
  labserver --prefix /COMP4537/labs/3
        """
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0, all interfaces, or $LAB_HOST)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 3000, or $PORT)"
    )
    parser.add_argument(
        "--base-dir", "-d",
        default=None,
        help="Directory for stored files (default: current directory, or $LAB_BASE_DIR)"
    )
    parser.add_argument(
        "--prefix",
        default=None,
        help="URL prefix of the endpoints (default: /labs/3, or $LAB_ROUTE_PREFIX)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Maximum worker threads (default: 16, or $LAB_WORKERS)"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO, or $LAB_LOG_LEVEL)"
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"labserver {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-derived config with any given flags applied on top."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.base_dir is not None:
        config.base_dir = args.base_dir
    if args.prefix is not None:
        config.route_prefix = args.prefix
    if args.workers is not None:
        config.max_workers = args.workers
        config.min_workers = min(config.min_workers, args.workers)
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = APIServer(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
