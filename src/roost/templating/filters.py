"""Template filters for roost form models.

Registered on every environment built by ``create_environment``::

    {% for msg in model | field_errors("email") %}
      <p class="help is-danger">{{ msg }}</p>
    {% end %}
    <div class="field{{ model | error_class('email') }}">
"""

from typing import Any


def _errors_of(source: Any) -> dict[str, list[str]]:
    if isinstance(source, dict):
        return source
    errors = getattr(source, "errors", None)
    return errors if isinstance(errors, dict) else {}


def field_errors(source: Any, field: str) -> list[str]:
    """Messages for *field* from a ``Model`` or an ``{field: [messages]}`` dict."""
    return list(_errors_of(source).get(field) or [])


def error_class(source: Any, field: str, css: str = " is-danger") -> str:
    """*css* when *field* has errors, else an empty string."""
    return css if _errors_of(source).get(field) else ""


BUILTIN_FILTERS: dict[str, Any] = {
    "error_class": error_class,
    "field_errors": field_errors,
}
