"""Tests for roost.templating — kida environment setup and built-in filters."""

from pathlib import Path

from kida import DictLoader, Environment

from roost.config import AppConfig
from roost.forms import Model
from roost.http.request import Request
from roost.templating.filters import BUILTIN_FILTERS, error_class, field_errors
from roost.templating.integration import TemplateRenderer, create_environment

TEMPLATES_DIR = Path(__file__).parent / "templates"


class TestCreateEnvironment:
    def test_loads_from_template_path(self) -> None:
        env = create_environment(AppConfig(template_dir=TEMPLATES_DIR))
        request = Request("GET", "/users/1")
        html = env.get_template("users/show.html").render({"id": 1, "request": request})
        assert "User 1" in html

    def test_template_dir_relative_to_root(self) -> None:
        cfg = AppConfig(root_path=Path(__file__).parent, template_dir="templates")
        renderer = TemplateRenderer.from_config(cfg)
        assert "<h1>" in renderer.render("page.html", {"title": "T", "items": []})

    def test_builtin_filters_registered(self) -> None:
        env = create_environment(AppConfig(template_dir=TEMPLATES_DIR))
        template = env.from_string('<div class="field{{ errors | error_class("email") }}">')
        html = template.render({"errors": {"email": ["bad"]}})
        assert html == '<div class="field is-danger">'

    def test_user_filters_and_globals(self) -> None:
        env = create_environment(
            AppConfig(template_dir=TEMPLATES_DIR),
            filters={"double": lambda v: v * 2},
            globals_={"brand": "Roost"},
        )
        assert env.from_string("{{ 3 | double }} {{ brand }}").render({}) == "6 Roost"

    def test_autoescape(self) -> None:
        env = create_environment(AppConfig(template_dir=TEMPLATES_DIR))
        html = env.from_string("{{ value }}").render({"value": "<b>"})
        assert "<b>" not in html
        assert "&lt;b&gt;" in html


class TestTemplateRenderer:
    def test_render(self) -> None:
        renderer = TemplateRenderer(Environment(loader=DictLoader({"a.html": "A {{ x }}"})))
        assert renderer.render("a.html", {"x": 1}) == "A 1"

    def test_render_string(self) -> None:
        renderer = TemplateRenderer(Environment(loader=DictLoader({})))
        assert renderer.render_string("{{ a }}-{{ b }}", {"a": 1, "b": 2}) == "1-2"


class TestFieldErrorsFilter:
    def test_dict(self) -> None:
        assert field_errors({"email": ["bad"]}, "email") == ["bad"]

    def test_missing_field(self) -> None:
        assert field_errors({"email": ["bad"]}, "name") == []

    def test_none(self) -> None:
        assert field_errors(None, "email") == []

    def test_model(self) -> None:
        model = Model()
        model.add_error("email", "taken")
        assert field_errors(model, "email") == ["taken"]

    def test_unrelated_object(self) -> None:
        assert field_errors(42, "email") == []


class TestErrorClassFilter:
    def test_with_errors(self) -> None:
        assert error_class({"email": ["bad"]}, "email") == " is-danger"

    def test_without_errors(self) -> None:
        assert error_class({"email": []}, "email") == ""
        assert error_class(Model(), "email") == ""

    def test_custom_class(self) -> None:
        model = Model()
        model.add_error("name", "required")
        assert error_class(model, "name", " has-error") == " has-error"


def test_builtin_filter_names() -> None:
    assert set(BUILTIN_FILTERS) == {"error_class", "field_errors"}
