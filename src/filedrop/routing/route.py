"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition: exact paths, handler, allowed methods.

    ``methods=None`` matches every method (used for the fallback).
    A route that accepts ``GET`` also accepts ``HEAD``.
    """

    paths: tuple[str, ...]
    handler: Callable[..., Any]
    methods: frozenset[str] | None = frozenset({"GET"})
    name: str | None = None

    def matches(self, method: str, path: str) -> bool:
        if path not in self.paths:
            return False
        if self.methods is None:
            return True
        return method in self.methods or (method == "HEAD" and "GET" in self.methods)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of dispatching a request to a route."""

    route: Route
    fallback: bool = False
