"""``filedrop run`` — resolve configuration and start the server."""

import argparse
import dataclasses
import logging
import sys
from typing import Any

from filedrop.config import FileDropConfig, parse_buttons, parse_rate_limit
from filedrop.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def resolve_config(args: argparse.Namespace, environ: dict[str, str] | None = None) -> FileDropConfig:
    """Environment first, then any CLI flags that were given."""
    config = FileDropConfig.from_env(environ)

    overrides: dict[str, Any] = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.localhost_only:
        overrides["localhost_only"] = True
    if args.rate_limit is not None:
        overrides["rate_limit"] = parse_rate_limit(args.rate_limit)
    if args.debug_mode:
        overrides["debug_mode"] = True
    if args.signaling_server is not None:
        overrides["signaling_server"] = args.signaling_server
    if args.buttons is not None:
        overrides["buttons"] = parse_buttons(args.buttons)
    if args.public_dir is not None:
        overrides["public_dir"] = args.public_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level

    return dataclasses.replace(config, **overrides) if overrides else config


def configure_logging(config: FileDropConfig) -> None:
    level = logging.DEBUG if config.debug_mode else config.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def run_server(args: argparse.Namespace) -> None:
    """Build the app from the resolved configuration and serve it.

    Exits with status 1 on invalid configuration or when the port cannot
    be bound.
    """
    from filedrop.app import App

    try:
        config = resolve_config(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    configure_logging(config)

    try:
        app = App(config)
    except ConfigurationError as exc:
        logging.getLogger("filedrop.server").error("%s", exc)
        raise SystemExit(1) from exc

    try:
        app.run()
    except KeyboardInterrupt:
        logging.getLogger("filedrop.server").info("Server stopped manually via KeyboardInterrupt.")
