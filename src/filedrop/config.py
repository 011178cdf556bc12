"""Application configuration.

FileDropConfig is a frozen dataclass: immutable after creation, passed
explicitly to every component that needs it. No ambient lookups.
"""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from filedrop.errors import ConfigurationError

# The client bundle shipped inside the package
DEFAULT_PUBLIC_DIR = Path(__file__).parent / "public"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})

# Names understood by both logging and uvicorn
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True, slots=True)
class FileDropConfig:
    """Startup configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = FileDropConfig(port=8080, rate_limit=1, debug_mode=True)
    """

    # Server
    port: int = 3000
    localhost_only: bool = False

    # Rate limiting: None disables it, a positive int is the number of
    # reverse-proxy hops to trust when deriving the client address.
    rate_limit: int | None = None
    debug_mode: bool = False

    # Passed through verbatim to clients via /config
    signaling_server: Any = False
    buttons: Mapping[str, Any] = field(default_factory=dict)

    # Client bundle
    public_dir: str | Path = DEFAULT_PUBLIC_DIR

    # Logging
    log_level: str = "info"

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ConfigurationError(msg)
        if self.rate_limit is not None and (
            isinstance(self.rate_limit, bool) or self.rate_limit < 1
        ):
            msg = f"rate_limit must be a positive number of proxy hops, got {self.rate_limit!r}"
            raise ConfigurationError(msg)
        if self.log_level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            raise ConfigurationError(msg)

    @property
    def host(self) -> str | None:
        """Bind address: loopback when localhost_only, else all interfaces."""
        return "127.0.0.1" if self.localhost_only else None

    @property
    def rate_limit_enabled(self) -> bool:
        return self.rate_limit is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FileDropConfig":
        """Build a configuration from environment variables.

        Recognised variables: ``PORT``, ``LOCALHOST_ONLY``, ``RATE_LIMIT``,
        ``DEBUG_MODE``, ``WS_SERVER``, ``BUTTONS``, ``PUBLIC_DIR`` and
        ``LOG_LEVEL``. Missing variables keep the field default.

        Raises:
            ConfigurationError: If a variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        if "PORT" in env:
            kwargs["port"] = parse_port(env["PORT"])
        if "LOCALHOST_ONLY" in env:
            kwargs["localhost_only"] = parse_bool("LOCALHOST_ONLY", env["LOCALHOST_ONLY"])
        if "RATE_LIMIT" in env:
            kwargs["rate_limit"] = parse_rate_limit(env["RATE_LIMIT"])
        if "DEBUG_MODE" in env:
            kwargs["debug_mode"] = parse_bool("DEBUG_MODE", env["DEBUG_MODE"])
        if env.get("WS_SERVER"):
            kwargs["signaling_server"] = env["WS_SERVER"]
        if "BUTTONS" in env:
            kwargs["buttons"] = parse_buttons(env["BUTTONS"])
        if env.get("PUBLIC_DIR"):
            kwargs["public_dir"] = env["PUBLIC_DIR"]
        if env.get("LOG_LEVEL"):
            kwargs["log_level"] = env["LOG_LEVEL"].lower()

        return cls(**kwargs)


# ----------------------------------------------------------------------
# Value parsers (shared by from_env and the CLI)
# ----------------------------------------------------------------------


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = f"{name} must be true or false, got {raw!r}"
    raise ConfigurationError(msg)


def parse_port(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        msg = f"PORT must be an integer, got {raw!r}"
        raise ConfigurationError(msg) from None


def parse_rate_limit(raw: str) -> int | None:
    """Parse a rate limit setting into a trusted hop count.

    ``false``/``0``/empty disables rate limiting, ``true`` trusts a single
    proxy hop, any positive integer is used as the hop count.
    """
    value = raw.strip().lower()
    if value in _FALSE_VALUES:
        return None
    if value in _TRUE_VALUES - {"1"}:
        return 1
    try:
        hops = int(value)
    except ValueError:
        msg = f"RATE_LIMIT must be true, false or a number of proxy hops, got {raw!r}"
        raise ConfigurationError(msg) from None
    if hops < 1:
        msg = f"RATE_LIMIT must not be negative, got {raw!r}"
        raise ConfigurationError(msg)
    return hops


def parse_buttons(raw: str) -> dict[str, Any]:
    """Parse the BUTTONS JSON object. An empty string means no buttons."""
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"BUTTONS must be a JSON object: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(value, dict):
        msg = f"BUTTONS must be a JSON object, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return value
