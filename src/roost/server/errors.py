"""Error responses for failed resolution.

``ErrorHandlers`` holds the handlers registered with ``App.error`` and
turns any exception raised while resolving a request into a Response:
``HTTPError`` keeps its status and headers, anything else is a logged 500.
"""

import html
import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from roost._internal.invoke import invoke
from roost.errors import HTTPError
from roost.http.request import Request
from roost.http.response import Response

logger = logging.getLogger("roost.server")

type ErrorHandler = Callable[..., Any]


def error_body(status: int, detail: str) -> str:
    """The default error snippet."""
    return f'<div class="roost-error" data-status="{status}">{html.escape(detail)}</div>'


class ErrorHandlers:
    """Handlers keyed by status code or exception class.

    A handler takes ``()``, ``(request)`` or ``(request, exc)``, may be
    async, and returns a body or a ``Response``. Exception classes are
    matched along the raised exception's MRO before its status code, so
    a handler for ``HTTPError`` also catches ``NotFound``.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: dict[int | type, ErrorHandler] = {}

    def register(self, key: int | type[Exception], handler: ErrorHandler) -> None:
        self._handlers[key] = handler

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def find(self, exc: Exception) -> ErrorHandler | None:
        for klass in type(exc).__mro__:
            if klass in self._handlers:
                return self._handlers[klass]
        return self._handlers.get(_status_of(exc))

    async def respond(self, exc: Exception, request: Request, *, debug: bool) -> Response:
        """Build the Response for *exc* raised while resolving *request*."""
        status = _status_of(exc)
        if isinstance(exc, HTTPError):
            logger.debug("%d %s %s: %s", status, request.method, request.path, exc.detail)
        else:
            logger.exception("500 %s %s", request.method, request.path)

        handler = self.find(exc)
        if handler is not None:
            response = await self._call(handler, request, exc)
            if response.status == 200:
                response = response.with_status(status)
        else:
            response = Response(body=_default_body(exc, status, debug), status=status)

        if isinstance(exc, HTTPError):
            for name, value in exc.headers:
                if response.header(name) is None:
                    response = response.with_header(name, value)
        return response

    @staticmethod
    async def _call(handler: ErrorHandler, request: Request, exc: Exception) -> Response:
        arity = len(inspect.signature(handler).parameters)
        result = await invoke(handler, *(request, exc)[: min(arity, 2)])
        if isinstance(result, Response):
            return result
        return Response(body="" if result is None else str(result))


def _status_of(exc: Exception) -> int:
    return exc.status if isinstance(exc, HTTPError) else 500


def _default_body(exc: Exception, status: int, debug: bool) -> str:
    if isinstance(exc, HTTPError):
        return error_body(status, exc.detail or f"Error {status}")
    if debug:
        return f"<pre>{html.escape(''.join(traceback.format_exception(exc)))}</pre>"
    return error_body(500, "Internal Server Error")
