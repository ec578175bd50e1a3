"""Path pattern parsing, parameter converters and segment matching.

Patterns are made of literal segments and named parameters::

    /users                 literal
    /users/{id}            one segment, any text
    /users/{id:int}        one segment, digits only
    /files/{rest:path}     the remaining segments (must be last)
"""

import re
from urllib.parse import unquote

from roost.errors import ConfigurationError
from roost.routing.route import PathSegment

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}

_COMPILED: dict[str, re.Pattern[str]] = {
    name: re.compile(pattern) for name, (pattern, _) in CONVERTERS.items()
}

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def convert_param(value: str, param_type: str) -> str | int | float:
    """Convert a captured path parameter string to the target type.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    return target_type(value)


def split_path(path: str) -> list[str]:
    """Split a request path into non-empty segments.

    Leading, trailing and doubled slashes are ignored. Each segment is
    percent-decoded after splitting, so an encoded ``%2F`` stays inside
    its segment.
    """
    return [unquote(part) for part in path.strip("/").split("/") if part]


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]

    Raises ``ConfigurationError`` for ``<param>`` syntax, unknown
    converters, invalid or duplicate names, and a ``path`` parameter
    that is not the last segment.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    parts = split_path(path)
    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax; "
                "roost expects {param} (e.g. /users/{id})."
            )
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue

        inner = part[1:-1]
        param_name, _, param_type = inner.partition(":")
        param_type = param_type or "str"
        if not _NAME_RE.match(param_name):
            msg = f"Route {path!r} has an invalid parameter name {param_name!r}."
            raise ConfigurationError(msg)
        if param_type not in CONVERTERS:
            known = ", ".join(sorted(CONVERTERS))
            msg = f"Route {path!r} uses unknown converter {param_type!r} (known: {known})."
            raise ConfigurationError(msg)
        if param_name in seen:
            msg = f"Route {path!r} declares parameter {param_name!r} twice."
            raise ConfigurationError(msg)
        if param_type == "path" and index != len(parts) - 1:
            msg = f"Route {path!r}: a {{name:path}} parameter must be the last segment."
            raise ConfigurationError(msg)
        seen.add(param_name)
        segments.append(
            PathSegment(
                value=part,
                is_param=True,
                param_name=param_name,
                param_type=param_type,
            )
        )
    return segments


def match_segments(
    segments: tuple[PathSegment, ...],
    parts: list[str],
) -> dict[str, str] | None:
    """Match request path parts against parsed segments.

    Returns the captured parameters, or ``None`` when the path does not
    match. Captured values are always strings.
    """
    params: dict[str, str] = {}
    for index, seg in enumerate(segments):
        if seg.is_param and seg.param_type == "path":
            remaining = parts[index:]
            if not remaining:
                return None
            params[seg.param_name or "path"] = "/".join(remaining)
            return params

        if index >= len(parts):
            return None
        part = parts[index]

        if not seg.is_param:
            if part != seg.value:
                return None
            continue

        if not _COMPILED[seg.param_type].fullmatch(part):
            return None
        params[seg.param_name or ""] = part

    if len(parts) != len(segments):
        return None
    return params
