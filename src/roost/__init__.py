"""Roost — route registration, resolution and rendering for web apps.

Routes map a method and a path pattern to a template, a controller
action or a plain function. Basic usage::

    from roost import App

    app = App()
    app.router.get("/", "home.html")
    app.router.get("/users/{id:int}", (UsersController, "show"))

    @app.router.route("/health")
    def health():
        return "ok"

Serve ``app`` with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Controller",
    "HTTPError",
    "InvalidCallbackKind",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "RoostError",
    "Router",
    "TestClient",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name == "App":
        from roost.app import App

        return App

    if name == "AppConfig":
        from roost.config import AppConfig

        return AppConfig

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name == "Response":
        from roost.http.response import Response

        return Response

    if name == "Router":
        from roost.routing.router import Router

        return Router

    if name == "Controller":
        from roost.controller import Controller

        return Controller

    if name == "TestClient":
        from roost.testing import TestClient

        return TestClient

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidCallbackKind",
        "MethodNotAllowed",
        "NotFound",
        "RoostError",
    ):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
