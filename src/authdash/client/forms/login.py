from typing import Any

from authdash.client.auth_client import AuthResult
from authdash.client.forms.base import Callback, FormController, invoke_callback
from authdash.client.forms.schemas import EmailLoginSchema, LoginSchema


class LoginForm(FormController):
    """Sign-in form.

    When the auth client can sign in by username the form has a single
    `email_or_username` field; an identifier containing "@" goes to email
    sign-in, anything else to username sign-in. Otherwise the form has a
    plain `email` field and always uses email sign-in.
    """

    schema = LoginSchema
    fallback_error = "Login failed"

    def __init__(
        self,
        auth_client: Any,
        *,
        on_success: Callback | None = None,
        on_switch_to_signup: Callback | None = None,
        on_forgot_password: Callback | None = None,
        callback_url: str = "/",
    ):
        self.accepts_username = bool(getattr(auth_client, "supports_username", False))
        super().__init__(
            auth_client,
            schema=LoginSchema if self.accepts_username else EmailLoginSchema,
            on_success=on_success,
        )
        self.on_switch_to_signup = on_switch_to_signup
        self.on_forgot_password = on_forgot_password
        self.callback_url = callback_url

    async def _call(self, data: Any) -> AuthResult:
        if not self.accepts_username:
            return await self.auth_client.sign_in_email(
                email=data.email, password=data.password, callback_url=self.callback_url
            )

        identifier = data.email_or_username
        if "@" in identifier:
            return await self.auth_client.sign_in_email(
                email=identifier, password=data.password, callback_url=self.callback_url
            )
        return await self.auth_client.sign_in_username(
            username=identifier, password=data.password, callback_url=self.callback_url
        )

    async def switch_to_signup(self) -> None:
        await invoke_callback(self.on_switch_to_signup)

    async def forgot_password(self) -> None:
        await invoke_callback(self.on_forgot_password)
