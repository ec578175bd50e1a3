"""``roost routes`` — list registered routes.

Rows follow lookup order, which is also match precedence.
"""

import argparse
import importlib
import sys

from roost.app import App
from roost.errors import ConfigurationError
from roost.routing.route import Route


def load_app(ref: str) -> App:
    """Import the App named by ``"module:attribute"`` (attribute defaults to ``app``)."""
    module_path, _, attr_name = ref.partition(":")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import app module {module_path!r}: {exc}"
        raise ConfigurationError(msg) from exc

    obj = getattr(module, attr_name or "app", None)
    if not isinstance(obj, App):
        msg = f"{ref!r} resolved to {type(obj).__name__}, not a roost App."
        raise ConfigurationError(msg)
    return obj


def format_routes(routes: list[Route]) -> str:
    """Render routes as a METHOD / PATH / TARGET table."""
    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods))
        target = route.target.describe()
        if route.name:
            target = f"{target} ({route.name})"
        rows.append((methods_str, route.path or "/", target))

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    lines = [fmt.format("METHOD", "PATH", "TARGET")]
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def run_routes(args: argparse.Namespace) -> None:
    """Load ``args.app``, freeze it and print its route table.

    A bad import string or an invalid route table exits with status 1.
    """
    try:
        app = load_app(args.app)
        app._ensure_frozen()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.router.routes
    if not routes:
        print("No routes registered.")
        return

    print(format_routes(routes))
