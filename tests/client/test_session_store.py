from datetime import UTC, datetime

from authdash.client.session import (
    SIGNED_OUT,
    SessionData,
    SessionInfo,
    SessionStore,
    SessionUser,
    SessionView,
)


def make_session_data(**user_overrides) -> SessionData:
    user = {
        "id": "u-1",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "username": "ada",
        "email_verified": False,
        "created_at": datetime(2025, 3, 7, tzinfo=UTC),
    }
    user.update(user_overrides)
    return SessionData(
        session=SessionInfo(id="s-1", expires_at=datetime(2030, 1, 1, tzinfo=UTC)),
        user=SessionUser(**user),
    )


def test_starts_pending():
    store = SessionStore()

    assert store.value.pending is True
    assert store.value.user is None


def test_subscribe_delivers_current_value_immediately():
    store = SessionStore()
    seen: list[SessionView] = []

    store.subscribe(seen.append)

    assert seen == [store.value]


def test_set_notifies_until_unsubscribed():
    store = SessionStore()
    seen: list[SessionView] = []
    unsubscribe = store.subscribe(seen.append)
    signed_in = SessionView(data=make_session_data())

    store.set(signed_in)
    unsubscribe()
    store.set(SIGNED_OUT)

    assert seen[1:] == [signed_in]
    assert store.value is SIGNED_OUT


def test_unsubscribe_twice_is_harmless():
    store = SessionStore()
    unsubscribe = store.subscribe(lambda view: None)

    unsubscribe()
    unsubscribe()


def test_listener_may_unsubscribe_during_notification():
    store = SessionStore()
    calls = []
    unsubscribe = None

    def once(view):
        calls.append(view)
        if unsubscribe is not None:
            unsubscribe()

    unsubscribe = store.subscribe(once)
    store.set(SIGNED_OUT)
    store.set(SIGNED_OUT)

    assert len(calls) == 2


def test_session_data_parses_service_payload():
    payload = {
        "session": {
            "id": "0b6f",
            "user_id": "9c1e",
            "expires_at": "2030-01-01T00:00:00",
            "ip_address": "127.0.0.1",
        },
        "user": {
            "id": "9c1e",
            "name": "Ada",
            "email": "ada@example.com",
            "username": None,
            "email_verified": True,
            "created_at": "2025-03-07T10:00:00",
            "updated_at": "2025-03-07T10:00:00",
        },
    }

    data = SessionData.model_validate(payload)

    assert data.user.email_verified is True
    assert data.session.id == "0b6f"
    assert SessionView(data=data).user == data.user
