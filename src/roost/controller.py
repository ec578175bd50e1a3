"""Controller base class and controller resolution.

A controller route names a class and one of its methods::

    class UsersController(Controller):
        def show(self, id: int):
            return self.render("users/show.html", user=find_user(id))

    router.get("/users/{id:int}", (UsersController, "show"))

The router builds one controller instance per request.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from roost.errors import ConfigurationError

if TYPE_CHECKING:
    from roost.http.request import Request
    from roost.templating.integration import TemplateRenderer


class Controller:
    """Base class for controllers.

    Holds the current request and the app's template renderer.
    """

    def __init__(self, request: Request, renderer: TemplateRenderer | None = None) -> None:
        self.request = request
        self.renderer = renderer

    def render(self, template: str, /, **context: Any) -> str:
        """Render *template* with the request context, path params and *context*."""
        if self.renderer is None:
            msg = f"{type(self).__name__}.render() needs a template renderer; none is configured."
            raise ConfigurationError(msg)
        merged = {
            **self.request.context,
            **self.request.path_params,
            "request": self.request,
            **context,
        }
        return self.renderer.render(template, merged)


def resolve_controller(ref: type | str) -> type:
    """Resolve a controller reference to a class.

    Accepts a class, or an import string in ``"module:Class"`` or
    ``"module.Class"`` form.
    """
    if isinstance(ref, type):
        return ref

    module_path, sep, attr_name = ref.partition(":")
    if not sep:
        module_path, _, attr_name = ref.rpartition(".")
    if not module_path or not attr_name:
        msg = f"Controller reference {ref!r} must look like 'module:Class'."
        raise ConfigurationError(msg)

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import controller module {module_path!r}: {exc}"
        raise ConfigurationError(msg) from exc

    obj = getattr(module, attr_name, None)
    if not isinstance(obj, type):
        msg = f"Controller reference {ref!r} does not name a class."
        raise ConfigurationError(msg)
    return obj


def instantiate_controller(
    cls: type,
    request: Request,
    renderer: TemplateRenderer | None,
) -> Any:
    """Build a controller for one request.

    ``Controller`` subclasses receive the request and renderer; other
    classes are built without arguments.
    """
    if issubclass(cls, Controller):
        return cls(request, renderer)
    return cls()
