"""Async test client for filedrop applications.

Drives the ASGI interface directly (no sockets, no HTTP parsing) and
returns the same Response type used in production.
"""

from typing import Any

from filedrop.app import App
from filedrop.http.response import Response

DEFAULT_CLIENT = ("127.0.0.1", 50000)


class TestClient:
    """Async test client.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/config")
            assert response.status == 200

    ``client`` sets the socket peer address the app sees, per client or
    per request, so rate limiting can be exercised from several
    addresses.
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("app", "client")

    def __init__(self, app: App, *, client: tuple[str, int] = DEFAULT_CLIENT) -> None:
        self.app = app
        self.client = client

    async def __aenter__(self) -> "TestClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        client: tuple[str, int] | None = None,
    ) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers, client=client)

    async def head(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        client: tuple[str, int] | None = None,
    ) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers, client=client)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        client: tuple[str, int] | None = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body, client=client)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        client: tuple[str, int] | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        raw_headers: list[tuple[bytes, bytes]] = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": client or self.client,
        }

        request_body = body or b""
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        # content-type moves into its own field; everything else,
        # content-length included, stays in headers.
        content_type = "text/html; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            else:
                extra_headers.append((name_str, value_str))

        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )
