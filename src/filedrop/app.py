"""filedrop application.

Built once from an immutable FileDropConfig: middleware, route table and
request pipeline are all fixed at construction. The instance is an ASGI
3.0 callable.
"""

import logging
from pathlib import Path

from filedrop._internal.asgi import Receive, Scope, Send
from filedrop.config import FileDropConfig
from filedrop.errors import ConfigurationError
from filedrop.handlers import (
    LANDING_PAGE,
    SHARING_PAGE,
    config_handler,
    document_handler,
    ip_handler,
    redirect_home,
)
from filedrop.middleware.protocol import Middleware
from filedrop.middleware.rate_limit import RateLimitMiddleware
from filedrop.middleware.static import StaticFiles
from filedrop.routing.route import Route
from filedrop.routing.router import Router
from filedrop.server.handler import build_pipeline, handle_request

logger = logging.getLogger("filedrop.server")


class App:
    """The filedrop front door.

    Request flow::

        rate limit (optional) -> static files -> route table -> redirect to /

    Usage::

        app = App(FileDropConfig(port=8080, rate_limit=1))
        app.run()
    """

    __slots__ = ("_middleware", "_pipeline", "_rate_limit", "_router", "config")

    def __init__(self, config: FileDropConfig | None = None) -> None:
        self.config: FileDropConfig = config or FileDropConfig()

        public_dir = Path(self.config.public_dir).resolve()
        if not public_dir.is_dir():
            msg = f"Public directory {public_dir} does not exist."
            raise ConfigurationError(msg)

        self._rate_limit: RateLimitMiddleware | None = None
        middleware: list[Middleware] = []
        if self.config.rate_limit is not None:
            self._rate_limit = RateLimitMiddleware(self.config.rate_limit)
            middleware.append(self._rate_limit)
        middleware.append(StaticFiles(public_dir))
        self._middleware = tuple(middleware)

        self._router = self._build_router(public_dir)
        self._pipeline = build_pipeline(self._router, self._middleware)

        self._announce()

    @property
    def router(self) -> Router:
        return self._router

    @property
    def rate_limit(self) -> RateLimitMiddleware | None:
        return self._rate_limit

    def _build_router(self, public_dir: Path) -> Router:
        router = Router(fallback=redirect_home)
        if self._rate_limit is not None and self.config.debug_mode:
            router.add(Route(("/ip",), ip_handler(self._rate_limit), name="ip"))
        router.add(Route(("/config",), config_handler(self.config), name="config"))
        router.add(
            Route(
                ("/", "/home", "/root"),
                document_handler(public_dir, LANDING_PAGE),
                name="landing",
            )
        )
        router.add(
            Route(("/sharing",), document_handler(public_dir, SHARING_PAGE), name="sharing")
        )
        router.compile()
        return router

    def _announce(self) -> None:
        """Startup notes about the rate limiter's trusted hop count."""
        if self._rate_limit is None:
            return
        if not self.config.debug_mode:
            logger.warning("Use DEBUG_MODE=true to find correct number for RATE_LIMIT.")
            return
        logger.debug("----DEBUG RATE_LIMIT----")
        logger.debug(
            "To find out the correct value for RATE_LIMIT go to '/ip' and ensure "
            "the returned IP-address is the IP-address of your client."
        )

    # -- Serving --

    def run(self) -> None:
        """Bind the configured port and serve until stopped."""
        from filedrop.server.lifecycle import serve

        serve(self)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            pipeline=self._pipeline,
            debug=self.config.debug_mode,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol; nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("filedrop ready, serving %s", Path(self.config.public_dir).resolve())
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
