"""Server lifecycle — bind the listening socket and run uvicorn on it.

The socket is bound here rather than inside uvicorn so that bind failures
surface before the event loop starts and are handled in one place: the
process logs the error and exits with status 1. There is no retry and no
fallback to another port; the operator has to free the port.
"""

from __future__ import annotations

import errno
import logging
import socket
from typing import TYPE_CHECKING

from filedrop.config import FileDropConfig

if TYPE_CHECKING:
    from filedrop.app import App

logger = logging.getLogger("filedrop.lifecycle")

EXIT_BIND_FAILURE = 1


def bind_socket(config: FileDropConfig) -> socket.socket:
    """Bind and listen on ``config.port``.

    Binds loopback only when ``config.localhost_only`` is set, otherwise
    every interface (IPv4 and IPv6 when the platform supports a
    dual-stack socket).

    Raises:
        SystemExit: With status 1 when the socket cannot be bound.
    """
    try:
        if config.host is not None:
            return socket.create_server((config.host, config.port))
        if socket.has_dualstack_ipv6():
            return socket.create_server(
                ("::", config.port),
                family=socket.AF_INET6,
                dualstack_ipv6=True,
            )
        return socket.create_server(("0.0.0.0", config.port))
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            logger.error("Port %d is already in use: %s", config.port, exc)
            logger.info("Error EADDRINUSE received, exiting process without restarting process...")
        else:
            logger.error("Could not bind port %d: %s", config.port, exc)
        raise SystemExit(EXIT_BIND_FAILURE) from exc


def serve(app: App, config: FileDropConfig | None = None) -> None:
    """Bind the socket and serve *app* until the process is stopped.

    Runs a single uvicorn worker: the rate limiter keeps its counters in
    process memory. Per-connection transport errors are handled (and
    logged) by uvicorn without stopping the server.
    """
    import uvicorn

    config = config or app.config
    sock = bind_socket(config)
    host, port = sock.getsockname()[:2]
    logger.info("filedrop listening on %s port %d", host, port)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            log_config=None,
            log_level=config.log_level,
            # Client addresses are derived by the rate limiter from the
            # configured hop count; uvicorn must not rewrite them.
            proxy_headers=False,
            lifespan="on",
        )
    )
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()
