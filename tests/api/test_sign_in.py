from fastapi.testclient import TestClient

from authdash.core.config import settings
from tests.conftest import TEST_PASSWORD


def test_sign_in_email_sets_session_cookie(client: TestClient, make_user):
    make_user()

    res = client.post(
        "/api/auth/sign-in/email",
        json={"email": "ada@example.com", "password": TEST_PASSWORD, "callback_url": "/"},
    )

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["user"]["email"] == "ada@example.com"
    assert body["redirect"] is True
    assert body["url"] == "/"
    assert "hashed_password" not in body["user"]
    assert client.cookies.get(settings.SESSION_COOKIE_NAME) == body["token"]
    assert "httponly" in res.headers["set-cookie"].lower()


def test_sign_in_email_is_case_insensitive(client: TestClient, make_user):
    make_user()

    res = client.post(
        "/api/auth/sign-in/email",
        json={"email": "ADA@Example.com", "password": TEST_PASSWORD},
    )

    assert res.status_code == 200, res.text
    assert res.json()["redirect"] is False


def test_sign_in_email_wrong_password(client: TestClient, make_user):
    make_user()

    res = client.post(
        "/api/auth/sign-in/email",
        json={"email": "ada@example.com", "password": "not-the-password"},
    )

    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"
    assert res.json()["error_code"] == "INVALID_EMAIL_OR_PASSWORD"
    assert settings.SESSION_COOKIE_NAME not in client.cookies


def test_sign_in_email_unknown_user_gets_same_error(client: TestClient):
    res = client.post(
        "/api/auth/sign-in/email",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD},
    )

    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"


def test_sign_in_inactive_user_rejected(client: TestClient, make_user, db):
    user = make_user()
    user.is_active = False
    db.add(user)
    db.commit()

    res = client.post(
        "/api/auth/sign-in/email",
        json={"email": "ada@example.com", "password": TEST_PASSWORD},
    )

    assert res.status_code == 401


def test_sign_in_username(client: TestClient, make_user):
    make_user(username="Ada_L")

    res = client.post(
        "/api/auth/sign-in/username",
        json={"username": "ada_l", "password": TEST_PASSWORD},
    )

    assert res.status_code == 200, res.text
    assert res.json()["user"]["username"] == "ada_l"
    assert res.json()["user"]["display_username"] == "Ada_L"


def test_sign_in_username_wrong_password(client: TestClient, make_user):
    make_user()

    res = client.post(
        "/api/auth/sign-in/username",
        json={"username": "ada", "password": "wrong-password"},
    )

    assert res.status_code == 401
    assert res.json()["message"] == "Invalid username or password"


def test_sign_in_without_remember_me_sets_browser_session_cookie(
    client: TestClient, make_user
):
    make_user()

    res = client.post(
        "/api/auth/sign-in/email",
        json={
            "email": "ada@example.com",
            "password": TEST_PASSWORD,
            "remember_me": False,
        },
    )

    assert res.status_code == 200
    assert "max-age" not in res.headers["set-cookie"].lower()


def test_sign_in_rejects_malformed_body(client: TestClient):
    res = client.post("/api/auth/sign-in/email", json={"email": "not-an-email"})

    assert res.status_code == 422
