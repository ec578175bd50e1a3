"""Route registration — ``map``/``get``/``post``/.../``any``/``group``.

A ``RouteRegistrar`` pairs a path prefix with a ``RouteCollection``.
The router owns the root registrar (empty prefix); ``group()`` hands out
``RouteGroup`` registrars whose routes are prefixed at registration time.

Usage::

    router.get("/", "home.html")
    router.get("/users/{id}", (UsersController, "show"))
    api = router.group("/api")
    api.post("/users", create_user)     # registered as /api/users
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from roost.errors import ConfigurationError, InvalidCallbackKind
from roost.http.methods import (
    DELETE,
    GET,
    OPTIONS,
    PATCH,
    POST,
    PUT,
    STANDARD_METHODS,
    normalize_method,
)
from roost.routing.collection import RouteCollection
from roost.routing.route import (
    TARGET_TYPES,
    ControllerTarget,
    FunctionTarget,
    Route,
    RouteTarget,
    TemplateTarget,
)


def classify_target(callback: Any) -> RouteTarget:
    """Turn a registration callback into an explicit route target.

    - an existing ``TemplateTarget``/``ControllerTarget``/``FunctionTarget``
      is returned unchanged
    - a non-empty ``str`` names a template
    - a ``(controller, action)`` pair names a controller action; the
      controller is a class or a ``"module:Class"`` string
    - any other callable is a function

    Raises ``InvalidCallbackKind`` for anything else.
    """
    if isinstance(callback, TARGET_TYPES):
        return callback
    if isinstance(callback, str):
        if not callback:
            raise InvalidCallbackKind(callback)
        return TemplateTarget(callback)
    if isinstance(callback, (tuple, list)):
        if (
            len(callback) == 2
            and isinstance(callback[0], (type, str))
            and isinstance(callback[1], str)
            and callback[0]
            and callback[1]
        ):
            return ControllerTarget(callback[0], callback[1])
        raise InvalidCallbackKind(callback)
    if callable(callback):
        return FunctionTarget(callback)
    raise InvalidCallbackKind(callback)


def _normalize_methods(methods: str | Iterable[str]) -> frozenset[str]:
    if isinstance(methods, str):
        methods = (methods,)
    normalized = frozenset(normalize_method(m) for m in methods)
    if not normalized:
        msg = "A route needs at least one HTTP method."
        raise ConfigurationError(msg)
    unknown = normalized.difference(STANDARD_METHODS)
    if unknown:
        msg = (
            f"Unsupported HTTP method(s): {', '.join(sorted(unknown))}. "
            f"Expected any of {', '.join(STANDARD_METHODS)}."
        )
        raise ConfigurationError(msg)
    return normalized


class RouteRegistrar:
    """Registers routes under a path prefix into a collection.

    Used as-is by the router (empty prefix) and by every ``RouteGroup``.
    """

    __slots__ = ("collection", "prefix")

    def __init__(self, prefix: str = "", collection: RouteCollection | None = None) -> None:
        self.prefix = prefix
        self.collection = collection if collection is not None else RouteCollection()

    def full_path(self, path: str) -> str:
        """Prefix *path* with this registrar's prefix."""
        return f"{self.prefix}{path}"

    # -- Registration --

    def map(
        self,
        methods: str | Iterable[str],
        path: str,
        target: Any,
        *,
        name: str | None = None,
    ) -> Route:
        """Register one Route under every method in *methods*.

        The same Route object is stored under each method key.
        """
        route = Route(
            path=self.full_path(path),
            target=classify_target(target),
            methods=_normalize_methods(methods),
            name=name,
        )
        for method in STANDARD_METHODS:
            if method in route.methods:
                self.collection.add_route(route, method)
        return route

    def get(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((GET,), path, target, name=name)

    def post(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((POST,), path, target, name=name)

    def put(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((PUT,), path, target, name=name)

    def delete(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((DELETE,), path, target, name=name)

    def options(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((OPTIONS,), path, target, name=name)

    def patch(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.map((PATCH,), path, target, name=name)

    def any(self, path: str, target: Any, *, name: str | None = None) -> Route:
        """Register under GET, POST, PUT, DELETE, OPTIONS and PATCH."""
        return self.map(STANDARD_METHODS, path, target, name=name)

    def group(self, path: str) -> RouteGroup:
        """Create a nested group whose routes are prefixed with *path*."""
        group = RouteGroup(self.full_path(path))
        self.collection.add_group(group)
        return group

    def route(
        self,
        path: str,
        *,
        methods: str | Iterable[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a function via decorator. Methods default to GET.

        Usage::

            @router.route("/users/{id}", methods=["GET", "PUT"])
            def user(id: str):
                ...
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.map(methods or (GET,), path, FunctionTarget(func), name=name)
            return func

        return decorator

    # -- Lookup --

    def routes_for(self, method: str) -> list[Route]:
        """Routes registered here for *method*, in lookup order."""
        return self.collection.routes_for(method)


class RouteGroup(RouteRegistrar):
    """A prefix-scoped registrar with its own private collection.

    Created through ``group()``; owned by the collection it was
    registered into.
    """

    __slots__ = ()

    def __init__(self, prefix: str) -> None:
        super().__init__(prefix, RouteCollection())

    def __repr__(self) -> str:
        return f"RouteGroup(prefix={self.prefix!r}, routes={len(self.collection)})"
