"""Immutable HTTP request.

Frozen metadata only: none of the filedrop handlers read a request body,
so the body is never buffered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from filedrop.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request, built once per ASGI ``http`` scope."""

    method: str
    path: str
    headers: Headers
    query_string: bytes
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    @property
    def remote_addr(self) -> str | None:
        """Address of the peer on the other end of the TCP connection."""
        if self.client:
            return self.client[0]
        return None

    @property
    def forwarded_for(self) -> list[str]:
        """The ``X-Forwarded-For`` chain, leftmost (original client) first.

        Repeated headers are joined in arrival order, as proxies do when
        they append instead of rewriting.
        """
        chain: list[str] = []
        for value in self.headers.get_list("x-forwarded-for"):
            chain.extend(part.strip() for part in value.split(",") if part.strip())
        return chain

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI http scope."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
