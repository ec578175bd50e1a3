"""Validation rules shared by ``validate()`` and form fields.

A rule is called with the submitted string and returns an error message,
or ``None`` when the value passes. Rules also carry the HTML attributes
that let the browser enforce the same constraint, so an ``InputField``
bound to a model renders ``required`` or ``maxlength="20"`` from the
model's own ``rules()``.

Any callable with the same signature works as a rule; only ``Rule``
instances contribute HTML attributes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

type Validator = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class Rule:
    """A predicate, its failure message and its HTML attributes."""

    test: Callable[[str], bool]
    message: str
    attrs: tuple[tuple[str, str], ...] = ()

    def __call__(self, value: str) -> str | None:
        return None if self.test(value) else self.message


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


# Structure only, not deliverability
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[A-Za-z]{2,}")

required = Rule(lambda v: bool(v.strip()), "This field is required", (("required", ""),))
email = Rule(lambda v: _EMAIL_RE.fullmatch(v) is not None, "Must be a valid email address")
number = Rule(_is_number, "Must be a number")


def max_length(n: int) -> Rule:
    return Rule(
        lambda v: len(v) <= n,
        f"Must be at most {n} characters",
        (("maxlength", str(n)),),
    )


def min_length(n: int) -> Rule:
    return Rule(
        lambda v: len(v) >= n,
        f"Must be at least {n} characters",
        (("minlength", str(n)),),
    )


def matches(pattern: str, message: str | None = None) -> Rule:
    """Value must match *pattern* from its first character."""
    compiled = re.compile(pattern)
    return Rule(
        lambda v: compiled.match(v) is not None,
        message or f"Must match pattern: {pattern}",
    )
