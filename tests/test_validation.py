"""Tests for roost.validation — composable rules and validate()."""

from roost.validation import (
    Rule,
    ValidationResult,
    email,
    matches,
    max_length,
    min_length,
    number,
    required,
    validate,
)

# ---------------------------------------------------------------------------
# Individual rule tests
# ---------------------------------------------------------------------------


class TestRequired:
    def test_empty_string(self) -> None:
        assert required("") is not None

    def test_whitespace_only(self) -> None:
        assert required("   ") is not None

    def test_valid(self) -> None:
        assert required("hello") is None


class TestMaxLength:
    def test_within_limit(self) -> None:
        assert max_length(5)("hello") is None

    def test_exceeds_limit(self) -> None:
        assert max_length(5)("123456") == "Must be at most 5 characters"


class TestMinLength:
    def test_at_minimum(self) -> None:
        assert min_length(3)("abc") is None

    def test_below_minimum(self) -> None:
        assert min_length(3)("ab") == "Must be at least 3 characters"


class TestEmail:
    def test_valid(self) -> None:
        assert email("user@example.com") is None

    def test_valid_with_dots(self) -> None:
        assert email("first.last@sub.domain.org") is None

    def test_missing_at(self) -> None:
        assert email("userexample.com") is not None

    def test_missing_tld(self) -> None:
        assert email("user@example") is not None


class TestMatches:
    def test_match(self) -> None:
        assert matches(r"^[a-z]+$")("abc") is None

    def test_no_match_default_message(self) -> None:
        assert matches(r"^[a-z]+$")("ABC") == "Must match pattern: ^[a-z]+$"

    def test_custom_message(self) -> None:
        assert matches(r"^\d+$", "Digits only")("x") == "Digits only"


class TestNumber:
    def test_number(self) -> None:
        assert number("4.2") is None
        assert number("abc") is not None


# ---------------------------------------------------------------------------
# validate()
# ---------------------------------------------------------------------------


class TestValidate:
    def test_valid(self) -> None:
        result = validate({"name": "Ann"}, {"name": [required]})
        assert isinstance(result, ValidationResult)
        assert result.is_valid
        assert result
        assert result.cleaned == {"name": "Ann"}

    def test_invalid(self) -> None:
        result = validate({"name": ""}, {"name": [required]})
        assert not result
        assert result.errors == {"name": ["This field is required"]}

    def test_missing_key_is_empty(self) -> None:
        result = validate({}, {"name": [required]})
        assert "name" in result.errors

    def test_none_is_empty(self) -> None:
        result = validate({"name": None}, {"name": [required]})
        assert "name" in result.errors

    def test_required_stops_chain(self) -> None:
        result = validate({"name": ""}, {"name": [required, min_length(3)]})
        assert result.errors == {"name": ["This field is required"]}

    def test_collects_multiple_errors(self) -> None:
        result = validate({"code": "ab"}, {"code": [min_length(3), matches(r"^\d+$")]})
        assert len(result.errors["code"]) == 2

    def test_values_stringified(self) -> None:
        result = validate({"age": 30}, {"age": [number]})
        assert result.cleaned == {"age": "30"}

    def test_unruled_fields_ignored(self) -> None:
        result = validate({"name": "Ann", "extra": "x"}, {"name": [required]})
        assert result.cleaned == {"name": "Ann"}

    def test_failed_field_not_cleaned(self) -> None:
        result = validate({"name": "Ann", "email": "nope"}, {"name": [required], "email": [email]})
        assert result.cleaned == {"name": "Ann"}

    def test_first_error(self) -> None:
        result = validate({"code": "ab"}, {"code": [min_length(3), matches(r"^\d+$")]})
        assert result.first_error("code") == "Must be at least 3 characters"
        assert result.first_error("other") is None

    def test_plain_callable_rule(self) -> None:
        def no_spaces(value: str) -> str | None:
            return "No spaces" if " " in value else None

        result = validate({"slug": "a b"}, {"slug": [no_spaces]})
        assert result.errors == {"slug": ["No spaces"]}


# ---------------------------------------------------------------------------
# HTML constraint attributes
# ---------------------------------------------------------------------------


class TestRuleAttrs:
    def test_required(self) -> None:
        assert required.attrs == (("required", ""),)

    def test_lengths(self) -> None:
        assert max_length(20).attrs == (("maxlength", "20"),)
        assert min_length(8).attrs == (("minlength", "8"),)

    def test_no_browser_equivalent(self) -> None:
        assert email.attrs == ()
        assert matches(r"\d+").attrs == ()

    def test_custom_rule(self) -> None:
        even = Rule(lambda v: len(v) % 2 == 0, "Even length only")
        assert even("ab") is None
        assert even("abc") == "Even length only"
