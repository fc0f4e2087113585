import httpx
import pytest

from authdash.client.auth_client import AuthClient
from authdash.client.config import ClientSettings
from authdash.client.session import SessionData
from authdash.core.exceptions import ExternalServiceError, TimeoutError
from tests.conftest import TEST_PASSWORD


async def test_sign_in_email_updates_session_store(auth_client: AuthClient, make_user):
    make_user()

    result = await auth_client.sign_in_email("ada@example.com", TEST_PASSWORD)

    assert result.error is None
    assert result.data["user"]["email"] == "ada@example.com"
    assert auth_client.session.value.pending is False
    assert auth_client.session.value.user.email == "ada@example.com"


async def test_sign_in_username(auth_client: AuthClient, make_user):
    make_user()

    result = await auth_client.sign_in_username("ada", TEST_PASSWORD)

    assert result.error is None
    assert auth_client.session.value.user.username == "ada"


async def test_bad_credentials_become_error_payload(auth_client: AuthClient, make_user):
    make_user()

    result = await auth_client.sign_in_email("ada@example.com", "wrong-password")

    assert result.data is None
    assert result.error.status == 401
    assert result.error.message == "Invalid email or password"
    assert result.error.code == "INVALID_EMAIL_OR_PASSWORD"


async def test_request_validation_error_message(auth_client: AuthClient):
    result = await auth_client.sign_up_email("not-an-email", "secret1", "Ada")

    assert result.error.status == 422
    assert result.error.message


async def test_sign_up_then_sign_out(auth_client: AuthClient):
    result = await auth_client.sign_up_email(
        "grace@example.com", "secret1", "Grace", username="grace"
    )
    assert result.error is None
    assert auth_client.session.value.user.name == "Grace"

    await auth_client.sign_out()

    assert auth_client.session.value.data is None
    session = await auth_client.get_session()
    assert session.data is None


async def test_get_session_returns_typed_data(auth_client: AuthClient, make_user):
    make_user()
    await auth_client.sign_in_email("ada@example.com", TEST_PASSWORD)

    result = await auth_client.get_session()

    assert isinstance(result.data, SessionData)
    assert result.data.user.username == "ada"


async def test_forget_password_always_succeeds(auth_client: AuthClient):
    result = await auth_client.forget_password("nobody@example.com", "/reset-password")

    assert result.error is None
    assert result.data == {"status": True}


async def test_reset_password_with_bad_token(auth_client: AuthClient):
    result = await auth_client.reset_password("new-password", "bogus")

    assert result.error.status == 400
    assert result.error.message == "Invalid token"


def _client_with(handler, settings: ClientSettings) -> AuthClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://auth.test"
    )
    return AuthClient(settings=settings, http_client=http_client)


async def test_transport_failure_raises(client_settings: ClientSettings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client_with(handler, client_settings)

    with pytest.raises(ExternalServiceError):
        await client.sign_in_email("ada@example.com", TEST_PASSWORD)


async def test_timeout_raises(client_settings: ClientSettings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = _client_with(handler, client_settings)

    with pytest.raises(TimeoutError):
        await client.forget_password("ada@example.com", "/reset-password")


async def test_refresh_session_when_service_is_down(client_settings: ClientSettings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client_with(handler, client_settings)

    view = await client.refresh_session()

    assert view.pending is False
    assert view.data is None
    assert client.session.value is view


async def test_non_json_error_body(client_settings: ClientSettings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = _client_with(handler, client_settings)

    result = await client.sign_in_email("ada@example.com", TEST_PASSWORD)

    assert result.error.status == 502
    assert result.error.message is None


async def test_rate_limit_body_message(client_settings: ClientSettings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "Rate limit exceeded: 5 per 1 minute"})

    client = _client_with(handler, client_settings)

    result = await client.sign_in_email("ada@example.com", TEST_PASSWORD)

    assert result.error.message == "Rate limit exceeded: 5 per 1 minute"


def test_supports_username_follows_settings():
    settings = ClientSettings(USERNAME_SIGN_IN=False)

    assert AuthClient(settings=settings).supports_username is False
