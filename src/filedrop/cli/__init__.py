"""filedrop CLI — start the front-door server.

Entry point registered as ``filedrop`` in ``pyproject.toml``::

    [project.scripts]
    filedrop = "filedrop.cli:main"
"""

import argparse
import sys

from filedrop.config import LOG_LEVELS


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``filedrop`` command."""
    parser = argparse.ArgumentParser(
        prog="filedrop",
        description="filedrop — HTTP front door for peer-to-peer file sharing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- filedrop run ------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Start the server",
        description="Start the server. Flags override environment variables.",
    )
    run_parser.add_argument("--port", type=int, default=None, help="Listen port (PORT)")
    run_parser.add_argument(
        "--localhost-only",
        action="store_true",
        default=None,
        help="Bind to 127.0.0.1 only (LOCALHOST_ONLY)",
    )
    run_parser.add_argument(
        "--rate-limit",
        default=None,
        metavar="HOPS",
        help="Enable rate limiting, trusting HOPS reverse proxies; 'false' disables (RATE_LIMIT)",
    )
    run_parser.add_argument(
        "--debug-mode",
        action="store_true",
        default=None,
        help="Expose /ip and verbose logging (DEBUG_MODE)",
    )
    run_parser.add_argument(
        "--signaling-server",
        default=None,
        metavar="URL",
        help="Signaling server announced to clients (WS_SERVER)",
    )
    run_parser.add_argument(
        "--buttons",
        default=None,
        metavar="JSON",
        help="UI button options as a JSON object (BUTTONS)",
    )
    run_parser.add_argument(
        "--public-dir",
        default=None,
        help="Directory of the client bundle (PUBLIC_DIR)",
    )
    run_parser.add_argument(
        "--log-level",
        default=None,
        type=str.lower,
        choices=LOG_LEVELS,
        help="Log level (LOG_LEVEL)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from filedrop.cli._run import run_server

        run_server(args)
