"""Test client for roost applications.

Drives the app through its ASGI interface and rebuilds the ``Response``
it sent, so assertions see the same type a route returns. Also carries
assertions for the router's 404 and 405 outcomes::

    async with TestClient(app) as client:
        response = await client.get(client.url_for("user", id=42))
        assert response.status == 200
        await client.assert_method_not_allowed("PATCH", "/users/42", {"GET", "DELETE"})
"""

from __future__ import annotations

import json as json_module
from collections.abc import Iterable
from typing import Any
from urllib.parse import urlencode

from roost.app import App
from roost.http.response import Response


class TestClient:
    """Async ASGI client bound to one app."""

    __test__ = False  # not a pytest test class
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    def url_for(self, name: str, /, **params: Any) -> str:
        return self.app.router.url_for(name, **params)

    # -- Requests --

    async def get(self, path: str, **kwargs: Any) -> Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Response:
        return await self.request("DELETE", path, **kwargs)

    async def options(self, path: str, **kwargs: Any) -> Response:
        return await self.request("OPTIONS", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        data: dict[str, str] | None = None,
        json: object = None,
    ) -> Response:
        """Send one request through the ASGI app.

        ``data`` is sent url-encoded and ``json`` as a JSON document;
        either sets the matching content type unless *headers* has one.
        *path* may carry a query string and percent-escapes, as produced
        by ``url_for``.
        """
        merged: dict[str, str] = {}
        if data is not None:
            body = urlencode(data).encode("utf-8")
            merged["content-type"] = "application/x-www-form-urlencoded"
        elif json is not None:
            body = json_module.dumps(json).encode("utf-8")
            merged["content-type"] = "application/json"
        merged.update({k.lower(): v for k, v in (headers or {}).items()})

        scope = _http_scope(method, path, merged)
        sent: list[dict[str, Any]] = []
        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if body_sent:
                return {"type": "http.disconnect"}
            body_sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await self.app(scope, receive, send)
        return _response_from(sent)

    # -- Routing assertions --

    async def assert_not_found(self, path: str, method: str = "GET") -> Response:
        """Assert *method* *path* matches no route at all (404)."""
        response = await self.request(method, path)
        assert response.status == 404, f"{method} {path}: expected 404, got {response.status}"
        assert response.header("allow") is None
        return response

    async def assert_method_not_allowed(
        self,
        method: str,
        path: str,
        allowed: Iterable[str],
    ) -> Response:
        """Assert a 405 whose ``Allow`` header lists exactly *allowed*."""
        response = await self.request(method, path)
        assert response.status == 405, f"{method} {path}: expected 405, got {response.status}"
        header = response.header("allow") or ""
        got = {m.strip() for m in header.split(",") if m.strip()}
        assert got == {m.upper() for m in allowed}, f"Allow: {header!r}"
        return response


def _http_scope(method: str, path: str, headers: dict[str, str]) -> dict[str, Any]:
    path_part, _, query_string = path.partition("?")
    raw_path = path_part.encode("latin-1")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path_part,
        "raw_path": raw_path,
        "query_string": query_string.encode("latin-1"),
        "root_path": "",
        "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


def _response_from(messages: list[dict[str, Any]]) -> Response:
    start = next(m for m in messages if m["type"] == "http.response.start")
    content_type = "text/html; charset=utf-8"
    headers: list[tuple[str, str]] = []
    for name_b, value_b in start.get("headers", []):
        name, value = name_b.decode("latin-1"), value_b.decode("latin-1")
        if name == "content-type":
            content_type = value
        elif name != "content-length":
            headers.append((name, value))
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")
    return Response(
        body=body,
        status=start["status"],
        content_type=content_type,
        headers=tuple(headers),
    )
