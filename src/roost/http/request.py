"""HTTP request.

Frozen metadata plus two mutable stores: ``path_params`` (written by the
router when a route matches) and ``context`` (shared with templates and
controllers).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

from roost._internal.asgi import Scope
from roost.http.methods import normalize_method


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request as seen by the router.

    ``path`` has no query string, scheme or host and may still be
    percent-encoded; the router decodes it one segment at a time.
    The field references are frozen; the dict contents of ``path_params``
    and ``context`` are the per-request stores the router writes into.
    """

    method: str
    path: str
    query: dict[str, list[str]] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", normalize_method(self.method))

    @classmethod
    def from_asgi(cls, scope: Scope, body: bytes = b"") -> Request:
        """Build a Request from an ASGI ``http`` scope."""
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        raw_query = scope.get("query_string", b"").decode("latin-1")
        # raw_path keeps %2F inside a segment; the router decodes per segment
        raw_path = scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else scope["path"]
        return cls(
            method=scope["method"],
            path=path,
            query=parse_qs(raw_query, keep_blank_values=True),
            headers=headers,
            body=body,
        )

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def form(self) -> dict[str, str]:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Repeated keys keep their first value.
        """
        parsed = parse_qs(self.text(), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}
