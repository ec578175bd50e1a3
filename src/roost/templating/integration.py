"""Kida environment setup and the template renderer.

Creates a kida Environment from roost's AppConfig and binds
user-registered filters and globals. The environment is created once
when the App freezes and shared by the router and every controller.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from roost.config import AppConfig
from roost.templating.filters import BUILTIN_FILTERS


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment from app configuration.

    Templates load from ``config.template_path`` (``template_dir``
    resolved against ``root_path``).
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_path)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    env.update_filters(BUILTIN_FILTERS)

    # User filters may override built-ins
    if filters:
        env.update_filters(filters)

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


class TemplateRenderer:
    """Renders named templates to strings.

    The collaborator behind template routes and ``Controller.render``.
    """

    __slots__ = ("env",)

    def __init__(self, env: Environment) -> None:
        self.env = env

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        filters: dict[str, Callable[..., Any]] | None = None,
        globals_: dict[str, Any] | None = None,
    ) -> TemplateRenderer:
        return cls(create_environment(config, filters, globals_))

    def render(self, name: str, context: Mapping[str, Any] | None = None) -> str:
        """Render a full template to string."""
        template = self.env.get_template(name)
        return template.render(dict(context or {}))

    def render_string(self, source: str, context: Mapping[str, Any] | None = None) -> str:
        """Render a template from source. For prototyping and tests."""
        template = self.env.from_string(source)
        return template.render(dict(context or {}))
