"""Process-wide session state shared by every page of the dashboard.

The store holds one `SessionView` at a time. Pages subscribe on mount and
unsubscribe on unmount; the auth client is the only writer.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
import itertools

from pydantic import BaseModel, ConfigDict

from authdash.core.logging import get_logger

logger = get_logger(__name__)


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    email: str
    username: str | None = None
    display_username: str | None = None
    email_verified: bool = False
    image: str | None = None
    created_at: datetime


class SessionInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    expires_at: datetime


class SessionData(BaseModel):
    """Body of a successful get-session call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    session: SessionInfo
    user: SessionUser


@dataclass(frozen=True)
class SessionView:
    """What a page sees: still loading, signed out, or signed in."""

    pending: bool = False
    data: SessionData | None = None

    @property
    def user(self) -> SessionUser | None:
        return self.data.user if self.data else None


PENDING = SessionView(pending=True)
SIGNED_OUT = SessionView(pending=False, data=None)

Listener = Callable[[SessionView], None]


class SessionStore:
    """Single observable SessionView value.

    Usage:
        unsubscribe = store.subscribe(page.on_session)
        ...
        unsubscribe()
    """

    def __init__(self, initial: SessionView = PENDING):
        self._value = initial
        self._listeners: dict[int, Listener] = {}
        self._ids = itertools.count()

    @property
    def value(self) -> SessionView:
        return self._value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener and call it with the current value right away."""
        listener_id = next(self._ids)
        self._listeners[listener_id] = listener
        listener(self._value)

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    def set(self, view: SessionView) -> None:
        self._value = view
        logger.debug(
            "session_changed",
            pending=view.pending,
            signed_in=view.data is not None,
            listeners=len(self._listeners),
        )
        # Listeners may unsubscribe while being notified
        for listener in list(self._listeners.values()):
            listener(view)
