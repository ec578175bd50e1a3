"""Routing — ordered route table with first-match resolution.

Routes are registered during setup through ``map``/``get``/.../``group``
and frozen before the first request is served.
"""

from roost.routing.collection import RouteCollection
from roost.routing.registrar import RouteGroup, RouteRegistrar, classify_target
from roost.routing.route import (
    ControllerTarget,
    FunctionTarget,
    Route,
    RouteMatch,
    RouteTarget,
    TemplateTarget,
)
from roost.routing.router import Router

__all__ = [
    "ControllerTarget",
    "FunctionTarget",
    "Route",
    "RouteCollection",
    "RouteGroup",
    "RouteMatch",
    "RouteRegistrar",
    "RouteTarget",
    "Router",
    "TemplateTarget",
    "classify_target",
]
