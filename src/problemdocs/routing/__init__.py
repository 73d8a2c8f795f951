"""Routing: exact-path route table for documentation pages.

Routes are installed one at a time as problem titles are registered.
"""

from problemdocs.routing.route import Route, RouteMatch
from problemdocs.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
