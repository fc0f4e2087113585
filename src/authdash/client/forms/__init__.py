from authdash.client.forms.base import FormController, FormField
from authdash.client.forms.forgot_password import ForgotPasswordForm
from authdash.client.forms.login import LoginForm
from authdash.client.forms.signup import SignupForm

__all__ = [
    "ForgotPasswordForm",
    "FormController",
    "FormField",
    "LoginForm",
    "SignupForm",
]
