"""ASGI handler — translates ASGI scope/messages to filedrop types.

The only component that touches raw ASGI for HTTP requests. Converts the
scope to a typed Request, dispatches through middleware and the route
table, and sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from filedrop._internal.asgi import Receive, Scope, Send
from filedrop._internal.invoke import invoke
from filedrop.errors import HTTPError
from filedrop.http.request import Request
from filedrop.http.response import Response
from filedrop.middleware.protocol import Next
from filedrop.routing.router import Router
from filedrop.server.errors import handle_http_error, handle_internal_error
from filedrop.server.negotiation import negotiate
from filedrop.server.sender import send_response


def build_pipeline(router: Router, middleware: tuple[Callable[..., Any], ...]) -> Next:
    """Wrap *middleware* (outermost first) around route dispatch."""

    async def dispatch(req: Request) -> Response:
        match = router.match(req.method, req.path)
        result = await invoke(match.route.handler, req)
        return negotiate(result)

    handler: Next = dispatch
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await pipeline(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug=debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug=debug)

    await send_response(response, send, head=request.method == "HEAD")
