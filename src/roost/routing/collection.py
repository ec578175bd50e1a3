"""Ordered, per-method route storage with nested groups.

Registration order is the only precedence rule: the router tries routes
in the order ``routes_for()`` returns them and the first match wins.
A literal ``/users/new`` therefore has to be registered before a
templated ``/users/{id}`` to take priority over it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roost.http.methods import normalize_method
from roost.routing.route import Route

if TYPE_CHECKING:
    from roost.routing.registrar import RouteGroup

logger = logging.getLogger("roost.routing")


class RouteCollection:
    """Routes keyed by HTTP method, plus nested route groups.

    Mutable during setup only. ``freeze()`` locks this collection and
    every nested group; after that it is safe to read from any number of
    threads without locking.
    """

    __slots__ = ("_frozen", "_groups", "_routes_by_method")

    def __init__(self) -> None:
        self._routes_by_method: dict[str, list[Route]] = {}
        self._groups: list[RouteGroup] = []
        self._frozen = False

    def add_route(self, route: Route, method: str) -> None:
        """Append *route* to the sequence for *method*. No deduplication."""
        self._check_not_frozen()
        method = normalize_method(method)
        self._routes_by_method.setdefault(method, []).append(route)
        logger.debug("Registered %s %s -> %s", method, route.path, route.target.describe())

    def add_group(self, group: RouteGroup) -> None:
        """Record a nested group; its routes follow this collection's own."""
        self._check_not_frozen()
        self._groups.append(group)

    @property
    def groups(self) -> tuple[RouteGroup, ...]:
        return tuple(self._groups)

    def routes_for(self, method: str) -> list[Route]:
        """Routes for *method*, in lookup order.

        This collection's direct routes in registration order, followed
        by each nested group's routes (recursively, in the order the
        groups were registered). Returns a fresh list on every call.
        """
        method = normalize_method(method)
        result = list(self._routes_by_method.get(method, ()))
        for group in self._groups:
            result.extend(group.collection.routes_for(method))
        return result

    def methods(self) -> frozenset[str]:
        """Every method with at least one route, including nested groups."""
        found = {m for m, routes in self._routes_by_method.items() if routes}
        for group in self._groups:
            found |= group.collection.methods()
        return frozenset(found)

    def routes(self) -> list[Route]:
        """Every unique Route object (by identity).

        Direct routes come first, grouped by the method they were first
        registered under, then each nested group's routes.
        """
        seen: set[int] = set()
        result: list[Route] = []
        for routes in self._routes_by_method.values():
            for route in routes:
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        for group in self._groups:
            for route in group.collection.routes():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
        return result

    def __len__(self) -> int:
        return len(self.routes())

    # -- Freezing --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Lock this collection and all nested groups."""
        self._frozen = True
        for group in self._groups:
            group.collection.freeze()

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register routes after the router has been frozen. "
                "Build the route table before serving requests."
            )
            raise RuntimeError(msg)
