import os

# Must be set before authdash.core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "local"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ.pop("SMTP_HOST", None)

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from authdash.auth import User, UserCreate, create_user  # noqa: E402
from authdash.client.auth_client import AuthClient, AuthResult  # noqa: E402
from authdash.client.config import ClientSettings  # noqa: E402
from authdash.client.session import SessionStore  # noqa: E402
from authdash.core.db import engine, init_db  # noqa: E402
from authdash.main import app  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def database() -> Generator[None, None, None]:
    init_db()
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db: Session):
    def _make_user(
        email: str = "ada@example.com",
        password: str = TEST_PASSWORD,
        name: str = "Ada Lovelace",
        username: str | None = "ada",
    ) -> User:
        return create_user(
            session=db,
            user_create=UserCreate(
                email=email, password=password, name=name, username=username
            ),
        )

    return _make_user


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(
        AUTH_BASE_URL="http://testserver",
        SUCCESS_REDIRECT_DELAY_SECONDS=0.05,
    )


@pytest.fixture
async def auth_client(client_settings: ClientSettings) -> AsyncGenerator[AuthClient, None]:
    """AuthClient talking to the app in-process."""
    http_client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    )
    async with http_client:
        yield AuthClient(settings=client_settings, http_client=http_client)


class StubAuthClient:
    """Records every call and answers with a canned result.

    Set `results[method]` to an AuthResult, or to an exception to raise.
    Set `gate` to an asyncio.Event to hold calls until it is set.
    """

    def __init__(self, supports_username: bool = True):
        self.supports_username = supports_username
        self.session = SessionStore()
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.results: dict[str, Any] = {}
        self.gate: asyncio.Event | None = None

    async def _record(self, method: str, **kwargs: Any) -> Any:
        self.calls.append((method, kwargs))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.results.get(method, AuthResult(data={}))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    async def sign_in_email(self, **kwargs: Any) -> AuthResult:
        return await self._record("sign_in_email", **kwargs)

    async def sign_in_username(self, **kwargs: Any) -> AuthResult:
        return await self._record("sign_in_username", **kwargs)

    async def sign_up_email(self, **kwargs: Any) -> AuthResult:
        return await self._record("sign_up_email", **kwargs)

    async def forget_password(self, **kwargs: Any) -> AuthResult:
        return await self._record("forget_password", **kwargs)

    async def sign_out(self) -> None:
        await self._record("sign_out")


@pytest.fixture
def stub_client() -> StubAuthClient:
    return StubAuthClient()
