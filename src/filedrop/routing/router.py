"""Ordered route table.

Routes are evaluated top to bottom and the first match wins. A request
no route accepts, whatever its method or path, goes to the fallback
handler instead of raising a 404: the dispatcher never "misses".
"""

from collections.abc import Callable
from typing import Any

from filedrop.routing.route import Route, RouteMatch


class Router:
    """Compiled, ordered router.

    Usage::

        router = Router(fallback=redirect_home)
        router.add(Route(("/config",), get_config))
        router.add(Route(("/", "/home", "/root"), landing_page))
        router.compile()
        match = router.match("GET", "/home")
    """

    __slots__ = ("_compiled", "_fallback", "_routes")

    def __init__(self, fallback: Callable[..., Any]) -> None:
        self._routes: tuple[Route, ...] = ()
        self._fallback = Route(paths=(), handler=fallback, methods=None, name="fallback")
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes = (*self._routes, route)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in evaluation order (fallback excluded)."""
        return self._routes

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first route accepting *method* and *path*, else the fallback."""
        for route in self._routes:
            if route.matches(method, path):
                return RouteMatch(route=route)
        return RouteMatch(route=self._fallback, fallback=True)
