"""Route, route targets and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


# -- Targets --


@dataclass(frozen=True, slots=True)
class TemplateTarget:
    """Render the named template with the request context."""

    name: str

    def describe(self) -> str:
        return f"template:{self.name}"


@dataclass(frozen=True, slots=True)
class ControllerTarget:
    """Instantiate a controller and call one of its actions.

    ``controller`` is a class or a ``"module:Class"`` import string,
    resolved when the route is dispatched.
    """

    controller: type | str
    action: str

    def describe(self) -> str:
        name = self.controller if isinstance(self.controller, str) else self.controller.__name__
        return f"{name}.{self.action}"


@dataclass(frozen=True, slots=True)
class FunctionTarget:
    """Call a plain function (sync or async)."""

    func: Callable[..., Any]

    def describe(self) -> str:
        return getattr(self.func, "__qualname__", repr(self.func))


type RouteTarget = TemplateTarget | ControllerTarget | FunctionTarget

# For isinstance() checks; a type alias can't be used there
TARGET_TYPES: tuple[type, ...] = (TemplateTarget, ControllerTarget, FunctionTarget)


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    One Route is built per ``map()`` call and appended to the collection
    under every method in ``methods``, so all of them share this object.
    """

    path: str
    target: RouteTarget
    methods: frozenset[str]
    name: str | None = None
    segments: tuple[PathSegment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        from roost.routing.params import parse_path

        object.__setattr__(self, "segments", tuple(parse_path(self.path)))

    @property
    def param_names(self) -> tuple[str, ...]:
        """Names of the path parameters, in pattern order."""
        return tuple(seg.param_name or "" for seg in self.segments if seg.is_param)

    def match(self, path: str) -> dict[str, str] | None:
        """Match a request path. Returns captured params or ``None``."""
        from roost.routing.params import match_segments, split_path

        return match_segments(self.segments, split_path(path))


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
