"""The /auth page: switches between the login, signup and reset forms."""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from authdash.client.forms import ForgotPasswordForm, FormController, LoginForm, SignupForm
from authdash.core.logging import get_logger

logger = get_logger(__name__)

Navigate = Callable[[str], Awaitable[None]]

HOME_PATH = "/"


class AuthView(StrEnum):
    LOGIN = "login"
    SIGNUP = "signup"
    FORGOT_PASSWORD = "forgot-password"


class AuthPage:
    """Holds the active AuthView and the form built for it.

    Each switch discards the previous form and builds a fresh one, so no
    field values carry over between views.
    """

    def __init__(self, auth_client: Any, navigate: Navigate):
        self.auth_client = auth_client
        self.navigate = navigate
        self.current_view: AuthView | str = AuthView.LOGIN
        self.form: FormController | None = self._build_form(self.current_view)

    def switch_to(self, view: AuthView | str) -> None:
        if self.form is not None:
            self.form.close()
        try:
            self.current_view = AuthView(view)
        except ValueError:
            logger.warning("unknown_auth_view", view=view)
            self.current_view = view
        self.form = self._build_form(self.current_view)

    async def handle_success(self) -> None:
        await self.navigate(HOME_PATH)

    def _build_form(self, view: AuthView | str) -> FormController | None:
        match view:
            case AuthView.LOGIN:
                return LoginForm(
                    self.auth_client,
                    on_success=self.handle_success,
                    on_switch_to_signup=lambda: self.switch_to(AuthView.SIGNUP),
                    on_forgot_password=lambda: self.switch_to(AuthView.FORGOT_PASSWORD),
                )
            case AuthView.SIGNUP:
                return SignupForm(
                    self.auth_client,
                    on_success=self.handle_success,
                    on_switch_to_login=lambda: self.switch_to(AuthView.LOGIN),
                )
            case AuthView.FORGOT_PASSWORD:
                return ForgotPasswordForm(
                    self.auth_client,
                    on_success=self.handle_success,
                    on_back_to_login=lambda: self.switch_to(AuthView.LOGIN),
                )
            case _:
                return None

    def render(self) -> FormController | None:
        return self.form

    def mount(self) -> None:
        pass

    def unmount(self) -> None:
        if self.form is not None:
            self.form.close()
