"""Tests for roost.controller — Controller base and controller resolution."""

import sys
import types

import pytest
from kida import DictLoader, Environment

from roost.controller import Controller, instantiate_controller, resolve_controller
from roost.errors import ConfigurationError
from roost.http.request import Request
from roost.templating.integration import TemplateRenderer


def _renderer() -> TemplateRenderer:
    env = Environment(
        loader=DictLoader({"show.html": "{{ title }}|{{ id }}|{{ user }}|{{ request.path }}"}),
        autoescape=True,
    )
    return TemplateRenderer(env)


class ArticlesController(Controller):
    def show(self) -> str:
        return self.render("show.html", title="Article")


class Plain:
    pass


@pytest.fixture
def _fake_controller_module(monkeypatch: pytest.MonkeyPatch) -> None:
    mod = types.ModuleType("_fake_roost_ctrl")
    mod.Articles = ArticlesController  # type: ignore[attr-defined]
    mod.not_a_class = "nope"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_roost_ctrl", mod)


class TestControllerRender:
    def test_merges_request_context_and_params(self) -> None:
        request = Request("GET", "/articles/3", context={"user": "ann"})
        request.path_params["id"] = "3"
        controller = ArticlesController(request, _renderer())
        assert controller.show() == "Article|3|ann|/articles/3"

    def test_explicit_context_wins(self) -> None:
        request = Request("GET", "/a", context={"title": "from context"})
        request.path_params["id"] = "1"
        controller = Controller(request, _renderer())
        rendered = controller.render("show.html", title="explicit", user="bob")
        assert rendered.startswith("explicit|1|bob")

    def test_without_renderer(self) -> None:
        controller = ArticlesController(Request("GET", "/"))
        with pytest.raises(ConfigurationError, match="needs a template renderer"):
            controller.show()


@pytest.mark.usefixtures("_fake_controller_module")
class TestResolveController:
    def test_class_passes_through(self) -> None:
        assert resolve_controller(ArticlesController) is ArticlesController

    def test_colon_import_string(self) -> None:
        assert resolve_controller("_fake_roost_ctrl:Articles") is ArticlesController

    def test_dotted_import_string(self) -> None:
        assert resolve_controller("_fake_roost_ctrl.Articles") is ArticlesController

    def test_missing_module(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot import"):
            resolve_controller("nonexistent_module_xyz:Users")

    def test_missing_attribute(self) -> None:
        with pytest.raises(ConfigurationError, match="does not name a class"):
            resolve_controller("_fake_roost_ctrl:Missing")

    def test_not_a_class(self) -> None:
        with pytest.raises(ConfigurationError, match="does not name a class"):
            resolve_controller("_fake_roost_ctrl:not_a_class")

    def test_malformed(self) -> None:
        with pytest.raises(ConfigurationError, match="module:Class"):
            resolve_controller("Articles")


class TestInstantiateController:
    def test_controller_subclass_gets_request(self) -> None:
        request = Request("GET", "/")
        renderer = _renderer()
        controller = instantiate_controller(ArticlesController, request, renderer)
        assert controller.request is request
        assert controller.renderer is renderer

    def test_plain_class_built_without_args(self) -> None:
        assert isinstance(instantiate_controller(Plain, Request("GET", "/"), None), Plain)
