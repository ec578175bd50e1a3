"""Tests for roost.forms — models, validation and input field rendering."""

from pathlib import Path

import pytest

from roost.config import AppConfig
from roost.forms import BaseField, Form, InputField, Model
from roost.templating.integration import TemplateRenderer
from roost.validation import email, max_length, min_length, required

TEMPLATES_DIR = Path(__file__).parent / "templates"


class SignupForm(Model):
    name: str = ""
    email: str = ""
    password: str = ""
    age: str = ""

    def rules(self):
        return {
            "name": [required, max_length(20)],
            "email": [required, email],
            "password": [min_length(8)],
        }

    def labels(self):
        return {"email": "Email address"}


class AdminSignupForm(SignupForm):
    role: str = "staff"


class TestModel:
    def test_field_names(self) -> None:
        assert SignupForm.field_names() == ("name", "email", "password", "age")

    def test_field_names_inherited(self) -> None:
        assert AdminSignupForm.field_names()[-1] == "role"

    def test_defaults(self) -> None:
        form = AdminSignupForm()
        assert form.name == ""
        assert form.role == "staff"
        assert form.errors == {}

    def test_init_values(self) -> None:
        form = SignupForm(name="Ann")
        assert form.name == "Ann"

    def test_load_only_declared(self) -> None:
        form = SignupForm()
        assert form.load({"name": "Ann", "is_admin": "1"}) is True
        assert form.name == "Ann"
        assert not hasattr(form, "is_admin")

    def test_load_nothing(self) -> None:
        assert SignupForm().load({"other": "x"}) is False

    def test_validate_success(self) -> None:
        form = SignupForm(name="Ann", email="ann@example.com", password="longenough")
        assert form.validate() is True
        assert form.errors == {}

    def test_validate_failure(self) -> None:
        form = SignupForm(name="", email="nope", password="short")
        assert form.validate() is False
        assert form.has_error("name")
        assert form.first_error("email") == "Must be a valid email address"
        assert form.first_error("password") == "Must be at least 8 characters"
        assert not form.has_error("age")

    def test_validate_replaces_errors(self) -> None:
        form = SignupForm(name="", email="ann@example.com", password="longenough")
        form.validate()
        form.load({"name": "Ann"})
        assert form.validate() is True
        assert form.errors == {}

    def test_add_error(self) -> None:
        form = SignupForm()
        form.add_error("email", "taken")
        form.add_error("email", "again")
        assert form.errors == {"email": ["taken", "again"]}
        assert form.first_error("email") == "taken"

    def test_first_error_none(self) -> None:
        assert SignupForm().first_error("email") is None

    def test_labels(self) -> None:
        form = SignupForm()
        assert form.label("email") == "Email address"
        assert form.label("password") == "Password"

    def test_default_rules_empty(self) -> None:
        assert Model().validate() is True


class TestInputField:
    def test_text_by_default(self) -> None:
        html = InputField(SignupForm(name="Ann"), "name").render_input()
        assert html == (
            '<input type="text" name="name" value="Ann" class="input" required maxlength="20">'
        )

    def test_value_escaped(self) -> None:
        html = InputField(SignupForm(name='<b>"x"</b>'), "name").render_input()
        assert "&lt;b&gt;&quot;x&quot;&lt;/b&gt;" in html
        assert "<b>" not in html

    def test_email_field(self) -> None:
        field = InputField(SignupForm(), "email")
        assert field.email_field() is field
        assert 'type="email"' in field.render_input()

    def test_number_field(self) -> None:
        html = InputField(SignupForm(age="30"), "age").number_field().render_input()
        assert 'type="number"' in html
        assert 'value="30"' in html

    def test_password_not_echoed(self) -> None:
        html = InputField(SignupForm(password="secret"), "password").password_field().render_input()
        assert 'type="password"' in html
        assert "secret" not in html

    def test_error_class(self) -> None:
        form = SignupForm()
        form.add_error("name", "This field is required")
        html = InputField(form, "name").render_input()
        assert 'class="input is-danger"' in html

    def test_full_render(self) -> None:
        form = SignupForm(email="bad")
        form.add_error("email", "Must be a valid email address")
        html = str(InputField(form, "email").email_field())
        assert html.startswith('<div class="field">')
        assert '<label class="label">Email address</label>' in html
        assert '<div class="control"><input type="email"' in html
        assert '<p class="help is-danger">Must be a valid email address</p>' in html

    def test_html_protocol(self) -> None:
        field = InputField(SignupForm(), "name")
        assert field.__html__() == str(field.render())

    def test_constraint_attrs_from_rules(self) -> None:
        assert InputField(SignupForm(), "name").constraint_attrs() == ' required maxlength="20"'
        assert InputField(SignupForm(), "password").constraint_attrs() == ' minlength="8"'

    def test_unruled_field_has_no_constraints(self) -> None:
        html = InputField(SignupForm(age="30"), "age").render_input()
        assert html.endswith('class="input">')

    def test_plain_callable_rule_adds_nothing(self) -> None:
        class SlugForm(Model):
            slug: str = ""

            def rules(self):
                return {"slug": [lambda v: None]}

        assert InputField(SlugForm(), "slug").constraint_attrs() == ""


class TestBaseField:
    def test_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            BaseField(SignupForm(), "name")  # type: ignore[abstract]

    def test_subclass_supplies_input(self) -> None:
        class TextareaField(BaseField):
            def render_input(self) -> str:
                return f'<textarea name="{self.attribute}">{self.value()}</textarea>'

        html = str(TextareaField(SignupForm(name="Ann"), "name"))
        assert '<div class="control"><textarea name="name">Ann</textarea></div>' in html


class TestForm:
    def test_begin_end(self) -> None:
        assert Form.begin("/signup") == '<form action="/signup" method="post">'
        assert Form.begin("/q", method="get") == '<form action="/q" method="get">'
        assert Form.end() == "</form>"

    def test_field(self) -> None:
        field = Form.field(SignupForm(), "name")
        assert isinstance(field, InputField)
        assert field.attribute == "name"

    def test_renders_in_template(self) -> None:
        renderer = TemplateRenderer.from_config(AppConfig(template_dir=TEMPLATES_DIR))
        model = SignupForm(name="", email="ann@example.com")
        model.validate()
        html = renderer.render("signup.html", {"form": Form(), "model": model})
        assert '<form action="/signup" method="post">' in html
        assert 'class="input is-danger"' in html
        assert 'type="email" name="email" value="ann@example.com"' in html
        assert '<span class="error">This field is required</span>' in html
        assert "</form>" in html
