"""HTML form fields bound to a model attribute.

Fields render to ``Markup`` so kida templates output them unescaped::

    {{ form.begin("/signup") }}
      {{ form.field(model, "name") }}
      {{ form.field(model, "email").email_field() }}
      {{ form.field(model, "password").password_field() }}
    {{ form.end() }}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from html import escape

from kida.template import Markup

from roost.forms.model import Model
from roost.validation import Rule


class BaseField(ABC):
    """A labelled field showing the model's first error for its attribute.

    Subclasses supply the control markup through ``render_input()``.
    """

    def __init__(self, model: Model, attribute: str) -> None:
        self.model = model
        self.attribute = attribute

    @abstractmethod
    def render_input(self) -> str: ...

    def constraint_attrs(self) -> str:
        """HTML attributes contributed by the model's rules for this field."""
        rendered: list[str] = []
        for rule in self.model.rules().get(self.attribute, []):
            if not isinstance(rule, Rule):
                continue
            for name, value in rule.attrs:
                rendered.append(f" {name}" if not value else f' {name}="{escape(value)}"')
        return "".join(rendered)

    def value(self) -> str:
        value = getattr(self.model, self.attribute, None)
        return "" if value is None else str(value)

    def render(self) -> Markup:
        error = self.model.first_error(self.attribute) or ""
        return Markup(
            '<div class="field">'
            f'<label class="label">{escape(self.model.label(self.attribute))}</label>'
            f'<div class="control">{self.render_input()}</div>'
            f'<p class="help is-danger">{escape(error)}</p>'
            "</div>"
        )

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())


class InputField(BaseField):
    """An ``<input>`` field. Text by default; switch type with the ``*_field()`` methods."""

    TYPE_TEXT = "text"
    TYPE_EMAIL = "email"
    TYPE_PASSWORD = "password"
    TYPE_NUMBER = "number"

    def __init__(self, model: Model, attribute: str) -> None:
        super().__init__(model, attribute)
        self.type = self.TYPE_TEXT

    def email_field(self) -> InputField:
        self.type = self.TYPE_EMAIL
        return self

    def password_field(self) -> InputField:
        self.type = self.TYPE_PASSWORD
        return self

    def number_field(self) -> InputField:
        self.type = self.TYPE_NUMBER
        return self

    def render_input(self) -> str:
        css = "input is-danger" if self.model.has_error(self.attribute) else "input"
        # Passwords are never echoed back into the page
        value = "" if self.type == self.TYPE_PASSWORD else self.value()
        return (
            f'<input type="{self.type}" name="{escape(self.attribute)}" '
            f'value="{escape(value)}" class="{css}"{self.constraint_attrs()}>'
        )


class Form:
    """Opening/closing tags and field construction for templates."""

    @staticmethod
    def begin(action: str, method: str = "post") -> Markup:
        return Markup(f'<form action="{escape(action)}" method="{escape(method)}">')

    @staticmethod
    def end() -> Markup:
        return Markup("</form>")

    @staticmethod
    def field(model: Model, attribute: str) -> InputField:
        return InputField(model, attribute)
