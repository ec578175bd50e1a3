"""Form rendering — models with validation and HTML input fields."""

from roost.forms.fields import BaseField, Form, InputField
from roost.forms.model import Model

__all__ = ["BaseField", "Form", "InputField", "Model"]
