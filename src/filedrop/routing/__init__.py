"""Routing — an explicit, ordered route table with a fallback handler.

Routes are registered during setup and frozen when the app compiles.
"""

from filedrop.routing.route import Route, RouteMatch
from filedrop.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
