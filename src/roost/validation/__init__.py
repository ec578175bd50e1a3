"""Form validation for roost models.

``Model.validate()`` runs its ``rules()`` through ``validate()``; the same
rules feed HTML constraint attributes to the model's input fields::

    result = validate(request.form(), {
        "name": [required, max_length(200)],
        "email": [required, email],
    })
    if not result:
        result.first_error("email")  # "Must be a valid email address"
"""

from collections.abc import Mapping
from dataclasses import dataclass

from roost.validation.rules import (
    Rule,
    Validator,
    email,
    matches,
    max_length,
    min_length,
    number,
    required,
)

__all__ = [
    "Rule",
    "ValidationResult",
    "Validator",
    "email",
    "matches",
    "max_length",
    "min_length",
    "number",
    "required",
    "validate",
]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Messages per failing field and the string values that passed.

    Falsy when any field failed.
    """

    errors: dict[str, list[str]]
    cleaned: dict[str, str]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def first_error(self, field: str) -> str | None:
        messages = self.errors.get(field)
        return messages[0] if messages else None


def validate(
    data: Mapping[str, object],
    rules: Mapping[str, list[Validator]],
) -> ValidationResult:
    """Check each ruled field of *data*; unruled keys are ignored.

    Values are compared as strings and a missing or ``None`` value counts
    as empty. A failing ``required`` skips the field's remaining rules.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, str] = {}

    for field, validators in rules.items():
        raw = data.get(field)
        value = "" if raw is None else str(raw)
        messages: list[str] = []
        for validator in validators:
            message = validator(value)
            if message is None:
                continue
            messages.append(message)
            if validator is required:
                break
        if messages:
            errors[field] = messages
        else:
            cleaned[field] = value

    return ValidationResult(errors=errors, cleaned=cleaned)
