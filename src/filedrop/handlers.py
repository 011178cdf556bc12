"""Route handlers for the filedrop front door.

Each handler is a plain function of the request. None of them read or
write cookies or sessions.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from filedrop.config import FileDropConfig
from filedrop.http.request import Request
from filedrop.http.response import Redirect, Response
from filedrop.middleware.rate_limit import RateLimitMiddleware
from filedrop.middleware.static import file_response

LANDING_PAGE = "landing-page.html"
SHARING_PAGE = "sharing.html"


def config_handler(config: FileDropConfig) -> Callable[[Request], dict[str, Any]]:
    """``GET /config`` — the signaling server and UI buttons, verbatim."""

    def get_config(request: Request) -> dict[str, Any]:
        return {
            "signalingServer": config.signaling_server,
            "buttons": config.buttons,
        }

    return get_config


def document_handler(public_dir: Path, name: str) -> Callable[[Request], Response]:
    """Serve one document from the client bundle, uncached."""
    document = public_dir / name

    def send_document(request: Request) -> Response:
        return file_response(document)

    send_document.__name__ = f"send_{Path(name).stem.replace('-', '_')}"
    return send_document


def ip_handler(rate_limit: RateLimitMiddleware) -> Callable[[Request], Response]:
    """``GET /ip`` — the client address as the rate limiter sees it.

    Lets an operator check the trusted hop count: the body must be the
    address of the browser making the request, not of a proxy.
    """

    def show_ip(request: Request) -> Response:
        return Response(
            body=rate_limit.identify(request),
            content_type="text/plain; charset=utf-8",
        )

    return show_ip


def redirect_home(request: Request) -> Redirect:
    """Anything unmatched goes back to the home page."""
    return Redirect("/", status=301)
