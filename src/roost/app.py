"""Roost application class.

Owns the configuration, the router and the template renderer. Mutable
during setup (route registration, filters, error handlers); frozen the
first time it handles a request.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from roost._internal.asgi import Receive, Scope, Send, read_body
from roost._internal.invoke import invoke
from roost.config import AppConfig
from roost.http.request import Request
from roost.http.response import Response
from roost.routing.router import Router
from roost.server.errors import ErrorHandler, ErrorHandlers
from roost.templating.integration import TemplateRenderer

logger = logging.getLogger("roost.server")


class App:
    """The roost application.

    Register routes on ``app.router``::

        app = App(AppConfig(root_path=Path(__file__).parent))
        app.router.get("/", "home.html")
        app.router.get("/users/{id:int}", (UsersController, "show"))

        api = app.router.group("/api")
        api.post("/users", create_user)

    The app is an ASGI 3.0 callable; serve it with any ASGI server.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread builds the renderer and
        freezes the router, even when several workers receive their
        first request at once.
    """

    __slots__ = (
        "_custom_renderer",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_renderer",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
        "router",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = Router()
        self._custom_renderer: TemplateRenderer | None = renderer
        self._renderer: TemplateRenderer | None = None
        self._error_handlers = ErrorHandlers()
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        Handlers receive ``()``, ``(request)`` or ``(request, exc)`` and
        return a body or a ``Response``::

            @app.error(404)
            def not_found(request):
                return f"Nothing at {request.path}"
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers.register(code_or_exception, func)
            return func

        return decorator

    # -- Template integration --

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template filter."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return decorator

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template global."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    @property
    def renderer(self) -> TemplateRenderer:
        """The template renderer. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._renderer is not None
        return self._renderer

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Request handling --

    async def handle(self, request: Request) -> Response:
        """Resolve *request* and turn the outcome into a Response.

        ``NotFound`` becomes 404 and ``MethodNotAllowed`` 405 (with an
        ``Allow`` header); any other exception is logged and becomes 500.
        """
        self._ensure_frozen()
        try:
            result = await self.router.resolve(request)
        except Exception as exc:
            return await self._error_handlers.respond(exc, request, debug=self.config.debug)

        if isinstance(result, Response):
            return result
        return Response(body=result)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point for ``http`` and ``lifespan`` scopes."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
        elif scope["type"] == "http":
            request = Request.from_asgi(scope, await read_body(receive))
            response = await self.handle(request)
            for message in response.asgi_messages():
                await send(message)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze and run startup hooks, then wait for shutdown.

        A startup failure (including an invalid route table) is reported
        as ``lifespan.startup.failed`` and ends the lifespan.
        """
        message = await receive()
        if message["type"] == "lifespan.startup":
            try:
                self._ensure_frozen()
                await _run_hooks(self._startup_hooks)
            except Exception as exc:
                logger.exception("Startup failed")
                await send({"type": "lifespan.startup.failed", "message": str(exc)})
                return
            await send({"type": "lifespan.startup.complete"})
            message = await receive()

        if message["type"] == "lifespan.shutdown":
            await _run_hooks(self._shutdown_hooks)
            await send({"type": "lifespan.shutdown.complete"})

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the renderer and freeze the router.

        MUST only be called while holding _freeze_lock.
        """
        self._template_globals.setdefault("url_for", self.router.url_for)
        if self._custom_renderer is not None:
            renderer = self._custom_renderer
            if self._template_filters:
                renderer.env.update_filters(self._template_filters)
            for name, value in self._template_globals.items():
                renderer.env.add_global(name, value)
        else:
            renderer = TemplateRenderer.from_config(
                self.config,
                self._template_filters,
                self._template_globals,
            )
        self._renderer = renderer
        self.router.renderer = renderer
        self.router.freeze()
        self._frozen = True
        logger.debug(
            "App frozen: %d routes, templates from %s",
            len(self.router.routes),
            self.config.template_path,
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, filters and error handlers first."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        await invoke(hook)
