import asyncio
from typing import Any

from authdash.client.auth_client import AuthResult
from authdash.client.config import get_client_settings
from authdash.client.forms.base import Callback, FormController, invoke_callback
from authdash.client.forms.schemas import ForgotPasswordSchema
from authdash.core.logging import get_logger

logger = get_logger(__name__)


class ForgotPasswordForm(FormController):
    """Request a password reset email.

    `error` and `success` are independent flags: a new submit clears both,
    then exactly one of them is set by the outcome. While `success` is set
    the form renders its confirmation panel, and `on_success` fires after
    `success_delay` seconds unless the form is closed first. The delay and
    the reset redirect come from the auth client's settings.
    """

    schema = ForgotPasswordSchema
    fallback_error = "Failed to send reset email"

    def __init__(
        self,
        auth_client: Any,
        *,
        on_success: Callback | None = None,
        on_back_to_login: Callback | None = None,
        redirect_to: str | None = None,
        success_delay: float | None = None,
    ):
        super().__init__(auth_client, on_success=on_success)
        settings = getattr(auth_client, "settings", None) or get_client_settings()
        self.on_back_to_login = on_back_to_login
        self.redirect_to = redirect_to or settings.RESET_PASSWORD_REDIRECT
        self.success_delay = (
            settings.SUCCESS_REDIRECT_DELAY_SECONDS
            if success_delay is None
            else success_delay
        )
        self.success = False
        self._success_task: asyncio.Task[None] | None = None

    @property
    def show_confirmation(self) -> bool:
        return self.success

    async def _call(self, data: Any) -> AuthResult:
        return await self.auth_client.forget_password(
            email=data.email, redirect_to=self.redirect_to
        )

    def _reset_outcome(self) -> None:
        self.close()
        self.success = False

    async def _handle_success(self) -> None:
        self.success = True
        self.error = None
        self._success_task = asyncio.create_task(self._delayed_success())

    async def _delayed_success(self) -> None:
        await asyncio.sleep(self.success_delay)
        # Past the delay the redirect is committed; close() must not cancel it
        self._success_task = None
        await invoke_callback(self.on_success)

    async def back_to_login(self) -> None:
        self.close()
        await invoke_callback(self.on_back_to_login)

    def close(self) -> None:
        if self._success_task is not None and not self._success_task.done():
            logger.debug("reset_redirect_cancelled")
            self._success_task.cancel()
        self._success_task = None
