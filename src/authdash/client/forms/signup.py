from typing import Any

from authdash.client.auth_client import AuthResult
from authdash.client.forms.base import Callback, FormController, invoke_callback
from authdash.client.forms.schemas import SignupSchema


class SignupForm(FormController):
    """Account creation form. A blank username is sent as no username."""

    schema = SignupSchema
    fallback_error = "Signup failed"

    def __init__(
        self,
        auth_client: Any,
        *,
        on_success: Callback | None = None,
        on_switch_to_login: Callback | None = None,
    ):
        super().__init__(auth_client, on_success=on_success)
        self.on_switch_to_login = on_switch_to_login

    async def _call(self, data: Any) -> AuthResult:
        return await self.auth_client.sign_up_email(
            email=data.email,
            password=data.password,
            name=data.name,
            username=data.username or None,
        )

    async def switch_to_login(self) -> None:
        await invoke_callback(self.on_switch_to_login)
