"""Route resolution — ordered first-match lookup and target dispatch.

Routes are registered during setup through the router's registrar and
frozen before the first request. Resolution never mutates the route
table, so one frozen router can serve any number of concurrent requests.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode

from roost._internal.invoke import invoke
from roost.controller import instantiate_controller, resolve_controller
from roost.errors import ConfigurationError, MethodNotAllowed, NotFound
from roost.http.methods import STANDARD_METHODS, normalize_method
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.collection import RouteCollection
from roost.routing.params import CONVERTERS, convert_param, match_segments, split_path
from roost.routing.registrar import RouteGroup, RouteRegistrar
from roost.routing.route import (
    ControllerTarget,
    FunctionTarget,
    Route,
    RouteMatch,
    TemplateTarget,
)

if TYPE_CHECKING:
    from roost.templating.integration import TemplateRenderer

logger = logging.getLogger("roost.routing")


class Router:
    """Ordered route table with first-match resolution.

    Usage::

        router = Router(renderer=renderer)
        router.get("/", "home.html")
        router.get("/users/{id}", show_user)
        router.freeze()
        body = await router.resolve(Request("GET", "/users/42"))

    Registration methods delegate to a root ``RouteRegistrar`` (empty
    prefix); groups created from it share the same implementation.
    """

    __slots__ = ("_table", "registrar", "renderer")

    def __init__(self, *, renderer: TemplateRenderer | None = None) -> None:
        self.registrar = RouteRegistrar()
        self.renderer = renderer
        # Per-method lookup order, snapshotted by freeze()
        self._table: dict[str, tuple[Route, ...]] | None = None

    # -- Registration (delegated to the root registrar) --

    def map(
        self,
        methods: str | Iterable[str],
        path: str,
        target: Any,
        *,
        name: str | None = None,
    ) -> Route:
        return self.registrar.map(methods, path, target, name=name)

    def get(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.get(path, target, name=name)

    def post(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.post(path, target, name=name)

    def put(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.put(path, target, name=name)

    def delete(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.delete(path, target, name=name)

    def options(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.options(path, target, name=name)

    def patch(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.patch(path, target, name=name)

    def any(self, path: str, target: Any, *, name: str | None = None) -> Route:
        return self.registrar.any(path, target, name=name)

    def group(self, path: str) -> RouteGroup:
        return self.registrar.group(path)

    def route(
        self,
        path: str,
        *,
        methods: str | Iterable[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self.registrar.route(path, methods=methods, name=name)

    # -- Introspection --

    @property
    def collection(self) -> RouteCollection:
        return self.registrar.collection

    @property
    def routes(self) -> list[Route]:
        """Every registered Route object, each listed once."""
        return self.collection.routes()

    def routes_for(self, method: str) -> list[Route]:
        """Candidate routes for *method*, in the order they are tried."""
        method = normalize_method(method)
        if self._table is not None:
            return list(self._table.get(method, ()))
        return self.collection.routes_for(method)

    # -- Freezing --

    @property
    def frozen(self) -> bool:
        return self._table is not None

    def freeze(self) -> None:
        """Validate targets and lock the route table.

        Controller references are resolved here so a bad import string
        or a missing action fails at startup, not on the first request.
        Further registration raises ``RuntimeError``.
        """
        if self._table is not None:
            return
        for route in self.routes:
            self._validate_target(route)
        self.collection.freeze()
        self._table = {
            method: tuple(self.collection.routes_for(method)) for method in STANDARD_METHODS
        }
        logger.debug("Router frozen with %d routes", len(self.routes))

    def _validate_target(self, route: Route) -> None:
        target = route.target
        if isinstance(target, TemplateTarget) and self.renderer is None:
            raise _missing_renderer(route, target)
        if isinstance(target, ControllerTarget):
            cls = resolve_controller(target.controller)
            if not callable(getattr(cls, target.action, None)):
                msg = f"Route {route.path!r}: {cls.__name__} has no action {target.action!r}."
                raise ConfigurationError(msg)

    # -- Matching --

    def allowed_methods(self, path: str) -> frozenset[str]:
        """Methods with at least one route matching *path*."""
        parts = split_path(path)
        allowed: set[str] = set()
        for method in STANDARD_METHODS:
            for route in self.routes_for(method):
                if match_segments(route.segments, parts) is not None:
                    allowed.add(method)
                    break
        return frozenset(allowed)

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the first route registered for *method* that matches *path*.

        Returns a ``RouteMatch`` on success.
        Raises ``MethodNotAllowed`` if *method* has no routes at all, or if
        only other methods match *path*.
        Raises ``NotFound`` if no route matches the path.
        """
        method = normalize_method(method)
        candidates = self.routes_for(method) if method in STANDARD_METHODS else []

        if not candidates:
            allowed = self.allowed_methods(path) or self.collection.methods()
            raise MethodNotAllowed(allowed)

        parts = split_path(path)
        for route in candidates:
            params = match_segments(route.segments, parts)
            if params is not None:
                return RouteMatch(route=route, path_params=params)

        allowed = self.allowed_methods(path)
        if allowed:
            raise MethodNotAllowed(allowed)
        raise NotFound(f"No route matches {method} {path!r}")

    # -- Resolution --

    async def resolve(self, request: Request) -> str | Response:
        """Match *request*, dispatch to the route target, return the body.

        Extracted path parameters are written into ``request.path_params``
        before the target runs. A target returning a ``Response`` passes
        it through unchanged; ``None`` becomes an empty body.
        """
        match = self.match(request.method, request.path)
        request.path_params.update(match.path_params)
        result = await self._dispatch(match, request)

        if isinstance(result, Response):
            return result
        if result is None:
            return ""
        if isinstance(result, bytes):
            return result.decode("utf-8")
        return str(result)

    async def _dispatch(self, match: RouteMatch, request: Request) -> Any:
        target = match.route.target

        if isinstance(target, TemplateTarget):
            if self.renderer is None:
                raise _missing_renderer(match.route, target)
            context = {**request.context, **request.path_params, "request": request}
            return self.renderer.render(target.name, context)

        if isinstance(target, ControllerTarget):
            cls = resolve_controller(target.controller)
            controller = instantiate_controller(cls, request, self.renderer)
            action = getattr(controller, target.action)
            kwargs = build_callback_kwargs(action, request, match)
            return await invoke(action, **kwargs)

        if isinstance(target, FunctionTarget):
            kwargs = build_callback_kwargs(target.func, request, match)
            return await invoke(target.func, **kwargs)

        msg = f"Unknown route target {target!r}"
        raise ConfigurationError(msg)

    # -- URL building --

    def url_for(self, name: str, /, **params: Any) -> str:
        """Build a path for the route registered with *name*.

        Values are percent-encoded so the result matches the route again;
        ``{name:path}`` values keep their slashes. Parameters not used by
        the pattern are appended as a query string.
        """
        route = next((r for r in self.routes if r.name == name), None)
        if route is None:
            msg = f"No route named {name!r}."
            raise ConfigurationError(msg)

        parts: list[str] = []
        remaining = dict(params)
        for seg in route.segments:
            if not seg.is_param:
                parts.append(seg.value)
                continue
            param_name = seg.param_name or ""
            if param_name not in remaining:
                msg = f"Route {name!r} needs a value for {param_name!r}."
                raise ConfigurationError(msg)
            safe = "/" if seg.param_type == "path" else ""
            parts.append(quote(str(remaining.pop(param_name)), safe=safe))

        path = "/" + "/".join(parts)
        if remaining:
            path = f"{path}?{urlencode({k: str(v) for k, v in remaining.items()})}"
        return path


def build_callback_kwargs(
    callback: Callable[..., Any],
    request: Request,
    match: RouteMatch,
) -> dict[str, Any]:
    """Inspect a callback's signature and build its keyword arguments.

    1. parameters named after a path param get its value, converted by
       the pattern's converter (``{id:int}``) and then by the annotation
    2. otherwise ``request`` (by name or ``Request`` annotation) gets the
       request, so a ``{request}`` path param still reaches the callback
    3. a ``**kwargs`` parameter collects the remaining path params
    """
    params = match.path_params
    converters = {
        seg.param_name: seg.param_type for seg in match.route.segments if seg.is_param
    }

    def _value(name: str) -> Any:
        value: Any = params[name]
        param_type = converters.get(name, "str")
        if param_type in CONVERTERS:
            value = convert_param(value, param_type)
        return value

    try:
        sig = inspect.signature(callback, eval_str=True)
    except (TypeError, ValueError, NameError):
        return {name: _value(name) for name in params}

    kwargs: dict[str, Any] = {}
    accepts_var_kw = False
    for name, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            accepts_var_kw = True
            continue
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            continue
        if name in params:
            kwargs[name] = coerce_param(_value(name), param.annotation)
        elif name == "request" or param.annotation is Request:
            kwargs[name] = request

    if accepts_var_kw:
        for name in params:
            if name not in kwargs:
                kwargs[name] = _value(name)

    return kwargs


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def coerce_param(value: Any, annotation: Any) -> Any:
    """Apply a callback's annotation to a converted path param.

    Only ``str``, ``int``, ``float`` and ``bool`` are applied. ``bool``
    accepts ``1/true/yes/on`` and ``0/false/no/off`` (any case). A value
    that does not fit the annotation, or any other annotation, leaves
    the value unchanged.
    """
    if annotation is bool:
        text = str(value).lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        return value
    if annotation in (str, int, float):
        try:
            return annotation(value)
        except ValueError:
            return value
    return value


def _missing_renderer(route: Route, target: TemplateTarget) -> ConfigurationError:
    return ConfigurationError(
        f"Route {route.path!r} renders {target.name!r} but no template renderer is configured."
    )
