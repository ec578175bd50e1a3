"""Form-bound data models.

A model declares its fields as class annotations, loads submitted
values, validates them with ``roost.validation`` rules and keeps the
resulting errors for the form fields to display::

    class SignupForm(Model):
        name: str = ""
        email: str = ""

        def rules(self):
            return {"name": [required], "email": [required, email]}

    form = SignupForm()
    form.load(request.form())
    if not form.validate():
        return render("signup.html", form=form)
"""

import inspect
from collections.abc import Mapping
from typing import Any

from roost.validation import Validator, validate


class Model:
    """Base class for models rendered through form fields."""

    def __init__(self, **values: Any) -> None:
        self.errors: dict[str, list[str]] = {}
        for name in self.field_names():
            setattr(self, name, getattr(type(self), name, ""))
        self.load(values)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Annotated attribute names, base classes first."""
        names: list[str] = []
        for klass in reversed(cls.__mro__):
            for name in inspect.get_annotations(klass):
                if name.startswith("_") or name == "errors" or name in names:
                    continue
                names.append(name)
        return tuple(names)

    def load(self, data: Mapping[str, Any]) -> bool:
        """Assign values for declared fields found in *data*.

        Unknown keys are ignored. Returns True if anything was loaded.
        """
        loaded = False
        for name in self.field_names():
            if name in data:
                setattr(self, name, data[name])
                loaded = True
        return loaded

    # -- Validation --

    def rules(self) -> dict[str, list[Validator]]:
        """Validation rules per field. Override in subclasses."""
        return {}

    def validate(self) -> bool:
        """Run ``rules()`` against the current values, replacing ``errors``."""
        values = {name: getattr(self, name, None) for name in self.field_names()}
        result = validate(values, self.rules())
        self.errors = {name: list(messages) for name, messages in result.errors.items()}
        return result.is_valid

    def add_error(self, attribute: str, message: str) -> None:
        self.errors.setdefault(attribute, []).append(message)

    def has_error(self, attribute: str) -> bool:
        return bool(self.errors.get(attribute))

    def first_error(self, attribute: str) -> str | None:
        messages = self.errors.get(attribute)
        return messages[0] if messages else None

    # -- Labels --

    def labels(self) -> dict[str, str]:
        """Human-readable field labels. Override in subclasses."""
        return {}

    def label(self, attribute: str) -> str:
        return self.labels().get(attribute) or attribute.replace("_", " ").capitalize()
