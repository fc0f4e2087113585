"""HTTP client for the auth service.

Every call returns an `AuthResult`: `data` on a 2xx response, `error` on
any other status. Transport failures and timeouts are raised as
`ExternalServiceError` / `TimeoutError` by `authdash.core.http`.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from authdash.client.config import ClientSettings, get_client_settings
from authdash.client.session import SIGNED_OUT, SessionData, SessionStore, SessionView
from authdash.core.exceptions import AppException
from authdash.core.http import build_timeout, create_http_client, send_request
from authdash.core.logging import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "auth service"


@dataclass(frozen=True)
class AuthErrorPayload:
    """A non-2xx reply from the auth service."""

    message: str | None
    status: int
    code: str | None = None


@dataclass(frozen=True)
class AuthResult:
    data: Any = None
    error: AuthErrorPayload | None = None


def _error_from_response(response: httpx.Response) -> AuthErrorPayload:
    """Pull a human readable message out of an error body.

    Understands the service's own `{"error_code", "message"}` bodies,
    FastAPI's `{"detail": ...}` validation bodies and slowapi's
    `{"error": ...}` rate limit bodies.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return AuthErrorPayload(message=None, status=response.status_code)

    message = body.get("message")
    if not message:
        detail = body.get("detail")
        if isinstance(detail, str):
            message = detail
        elif isinstance(detail, list) and detail and isinstance(detail[0], dict):
            message = detail[0].get("msg")
    if not message:
        message = body.get("error")

    return AuthErrorPayload(
        message=message,
        status=response.status_code,
        code=body.get("error_code"),
    )


class AuthClient:
    """Async client for the auth service with a shared session store.

    The underlying httpx cookie jar carries the session cookie between
    calls, so one AuthClient corresponds to one signed-in browser.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        settings: ClientSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        session_store: SessionStore | None = None,
    ):
        self.settings = settings or get_client_settings()
        self._owns_http_client = http_client is None
        self._http = http_client or create_http_client(
            base_url or self.settings.AUTH_BASE_URL,
            timeout=build_timeout(self.settings.REQUEST_TIMEOUT_SECONDS),
        )
        self.session = session_store or SessionStore()

    @property
    def supports_username(self) -> bool:
        return self.settings.USERNAME_SIGN_IN

    def _url(self, path: str) -> str:
        return f"{self.settings.API_PREFIX.rstrip('/')}{path}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> AuthResult:
        response = await send_request(
            self._http, method, self._url(path), service_name=SERVICE_NAME, **kwargs
        )
        if response.is_success:
            return AuthResult(data=response.json() if response.content else None)
        error = _error_from_response(response)
        logger.info(
            "auth_request_rejected",
            path=path,
            status=error.status,
            error_code=error.code,
        )
        return AuthResult(error=error)

    async def sign_in_email(
        self, email: str, password: str, callback_url: str = "/"
    ) -> AuthResult:
        result = await self._request(
            "POST",
            "/sign-in/email",
            json={"email": email, "password": password, "callback_url": callback_url},
        )
        if result.error is None:
            await self.refresh_session()
        return result

    async def sign_in_username(
        self, username: str, password: str, callback_url: str = "/"
    ) -> AuthResult:
        result = await self._request(
            "POST",
            "/sign-in/username",
            json={
                "username": username,
                "password": password,
                "callback_url": callback_url,
            },
        )
        if result.error is None:
            await self.refresh_session()
        return result

    async def sign_up_email(
        self,
        email: str,
        password: str,
        name: str,
        username: str | None = None,
    ) -> AuthResult:
        payload = {"email": email, "password": password, "name": name}
        if username:
            payload["username"] = username
        result = await self._request("POST", "/sign-up/email", json=payload)
        if result.error is None:
            await self.refresh_session()
        return result

    async def forget_password(self, email: str, redirect_to: str) -> AuthResult:
        return await self._request(
            "POST",
            "/forget-password",
            json={"email": email, "redirect_to": redirect_to},
        )

    async def reset_password(self, new_password: str, token: str) -> AuthResult:
        return await self._request(
            "POST",
            "/reset-password",
            json={"new_password": new_password, "token": token},
        )

    async def sign_out(self) -> None:
        """End the current session.

        The local session is cleared even if the service rejects the call,
        since the cookie is gone either way.
        """
        result = await self._request("POST", "/sign-out")
        if result.error is not None:
            logger.warning("sign_out_rejected", status=result.error.status)
        self.session.set(SIGNED_OUT)

    async def get_session(self) -> AuthResult:
        result = await self._request("GET", "/get-session")
        if result.error is not None or result.data is None:
            return result
        return AuthResult(data=SessionData.model_validate(result.data))

    async def refresh_session(self) -> SessionView:
        """Reload the session from the service and publish it to the store.

        An unreachable service leaves the dashboard signed out rather than
        stuck in the pending state.
        """
        try:
            result = await self.get_session()
        except AppException as e:
            logger.warning("session_refresh_failed", error_code=e.error_code, error=e.message)
            view = SIGNED_OUT
        else:
            data = result.data if result.error is None else None
            view = SessionView(pending=False, data=data)
        self.session.set(view)
        return view

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()
