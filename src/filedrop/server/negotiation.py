"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from filedrop.http.response import Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``  -> pass through
    2. ``Redirect``  -> 3xx with Location header
    3. ``dict``      -> 200, application/json
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="", content_type="text/plain; charset=utf-8")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case dict():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json; charset=utf-8",
            )
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return a dict, Response, or Redirect."
            )
            raise TypeError(msg)
