"""Roost exception hierarchy.

Shared across registrar, Router and App so every module raises and
catches the same types.
"""

from dataclasses import dataclass


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when route registration or app configuration is invalid.

    Surfaces at startup, while the route table is being built. Never
    caught internally.
    """


class InvalidCallbackKind(ConfigurationError):  # noqa: N818
    """A route callback is neither a template name, a controller pair, nor a callable."""

    def __init__(self, callback: object) -> None:
        self.callback = callback
        super().__init__(
            "Route callback must be a template name (str), a "
            "(controller, action) pair, or a callable; got "
            f"{type(callback).__name__}: {callback!r}"
        )


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code.

    Raised by the router during resolution. ``App.handle`` catches these
    and turns them into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 - conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 - conventional name in web frameworks
    """405 — the request method has no route for this path.

    Includes an ``Allow`` header listing the valid methods and embeds
    them in the detail string.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )

    @property
    def allowed(self) -> frozenset[str]:
        """The methods listed in the ``Allow`` header."""
        value = dict(self.headers)["Allow"]
        return frozenset(m.strip() for m in value.split(",") if m.strip())
