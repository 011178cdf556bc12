"""Static file serving middleware for the client bundle.

Serves files from a single root directory with HTTP caching disabled, so
a redeployed client is picked up on the next page load. Falls through to
the next handler for anything that is not a file under the root.
"""

import mimetypes
from pathlib import Path

from filedrop.http.request import Request
from filedrop.http.response import Response
from filedrop.middleware.protocol import Next

NO_CACHE = "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0"


def file_response(file_path: Path, *, status: int = 200) -> Response:
    """Read a file and build an uncached response for it.

    Never sets ``ETag`` or ``Last-Modified``: with caching disabled there
    is nothing for a client to revalidate against.
    """
    content_type, _ = mimetypes.guess_type(str(file_path))
    if content_type is None:
        content_type = "application/octet-stream"
    elif content_type.startswith("text/") or content_type in (
        "application/javascript",
        "application/json",
    ):
        content_type = f"{content_type}; charset=utf-8"

    return (
        Response(body=file_path.read_bytes(), content_type=content_type, status=status)
        .with_header("Cache-Control", NO_CACHE)
    )


class StaticFiles:
    """Middleware that serves the public directory at the site root.

    Security: resolves symlinks and verifies the final path is within the
    configured directory. Paths that escape it, or that the filesystem
    cannot represent, fall through like any other miss.

    Usage::

        pipeline = build_pipeline(router, (StaticFiles("./public"),))
    """

    __slots__ = ("_directory", "_index")

    def __init__(self, directory: str | Path, *, index: str = "index.html") -> None:
        self._directory = Path(directory).resolve()
        self._index = index

    def resolve(self, relative: str) -> Path | None:
        """Resolve *relative* under the root, or None if it lies outside it."""
        if not relative:
            return self._directory
        try:
            file_path = (self._directory / relative).resolve()
        except (OSError, ValueError):
            # Embedded NUL bytes, symlink loops
            return None
        if not file_path.is_relative_to(self._directory):
            return None
        return file_path

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path
        file_path = self.resolve(path.lstrip("/"))
        if file_path is None:
            return await next(request)

        # Directory: serve its index, redirecting to the trailing-slash
        # form first so relative links inside the index resolve.
        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return await next(request)
            if not path.endswith("/"):
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            return await next(request)

        return file_response(file_path)
