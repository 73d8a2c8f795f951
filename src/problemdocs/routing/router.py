"""Exact-path router for documentation pages.

Unlike a parameterized router there is nothing to compile: every
route is a literal path. Adding a route for a path that is already
present replaces it.
"""

from problemdocs.errors import MethodNotAllowed, NotFound
from problemdocs.routing.route import Route, RouteMatch


class Router:
    """Exact-path router keyed by escaped path, then HTTP method.

    Usage::

        router = Router()
        router.add(Route("/Not%20Found.html", handler, frozenset({"GET"})))
        match = router.match("GET", "/Not%20Found.html")

    The table is replaced wholesale on every ``add()``, so a concurrent
    ``match()`` sees either the old or the new table, never a partial one.
    """

    __slots__ = ("_table",)

    def __init__(self) -> None:
        self._table: dict[str, dict[str, Route]] = {}

    def add(self, route: Route) -> Route | None:
        """Install *route*, returning the route it replaced (if any)."""
        previous = self._table.get(route.path, {})
        replaced = next(iter(previous.values()), None)
        self._table = {
            **self._table,
            route.path: {method: route for method in route.methods},
        }
        return replaced

    @property
    def routes(self) -> list[Route]:
        """Return all installed routes, one per path, sorted by path."""
        result: list[Route] = []
        for path in sorted(self._table):
            by_method = self._table[path]
            seen: set[int] = set()
            for route in by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def __contains__(self, path: object) -> bool:
        return path in self._table

    def __len__(self) -> int:
        return len(self._table)

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against installed routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route exists at the path.
        Raises ``MethodNotAllowed`` if the path exists but not for the method.
        """
        by_method = self._table.get(path)
        if by_method is None:
            raise NotFound(f"No route matches {method} {path!r}")

        route = by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(by_method))

        return RouteMatch(route=route, method=method)
