"""filedrop exception hierarchy.

Shared across the router, middleware, request pipeline and lifecycle so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class FileDropError(Exception):
    """Base for all filedrop-specific errors."""


class ConfigurationError(FileDropError):
    """Raised when the startup configuration is invalid.

    Typically raised by ``FileDropConfig`` construction or by
    ``FileDropConfig.from_env()``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(FileDropError):
    """An error that maps directly to an HTTP status code.

    Raised by middleware or handlers. The ASGI handler catches these and
    turns them into a plain-text response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

