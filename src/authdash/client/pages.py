"""Pages and widgets that render from the shared session.

Every consumer subscribes to the `SessionStore` on mount, unsubscribes on
unmount and renders from the store's live value into one of the frozen
view models below: loading, signed out, or the signed-in content.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from authdash.client.session import SessionData, SessionStore, SessionUser, SessionView

AUTH_PATH = "/auth"
SETTINGS_PATH = "/settings"
PROFILE_PATH = "/profile"


@dataclass(frozen=True)
class LoadingView:
    message: str = "Loading..."


@dataclass(frozen=True)
class SignInPromptView:
    title: str
    description: str
    href: str = AUTH_PATH
    link_label: str = "Sign In"


@dataclass(frozen=True)
class DashboardView:
    heading: str
    name: str
    email: str
    email_verified: bool
    session_id: str
    status: str = "Authenticated"
    settings_href: str = SETTINGS_PATH


@dataclass(frozen=True)
class SettingsView:
    name: str
    username: str | None  # "@handle", or None when the account has none
    email: str
    email_verified: str
    account_status: str
    member_since: str


@dataclass(frozen=True)
class MenuLink:
    label: str
    href: str


@dataclass(frozen=True)
class UserMenuView:
    initial: str
    name: str
    username: str | None
    image: str | None
    links: tuple[MenuLink, ...]
    sign_out_label: str = "Log out"


def format_username(user: SessionUser) -> str | None:
    handle = user.display_username or user.username
    return f"@{handle}" if handle else None


def format_member_since(created_at: datetime) -> str:
    """Short US-style date, e.g. 3/7/2025."""
    return f"{created_at.month}/{created_at.day}/{created_at.year}"


class SessionConsumer(ABC):
    """Base for anything that renders from the session store."""

    def __init__(self, store: SessionStore):
        self.store = store
        self.rendered: Any = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_session_change)

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_session_change(self, view: SessionView) -> None:
        self.rendered = self.render()

    def render(self) -> Any:
        view = self.store.value
        if view.pending:
            return LoadingView()
        if view.data is None:
            return self.render_signed_out()
        return self.render_signed_in(view.data)

    @abstractmethod
    def render_signed_out(self) -> Any: ...

    @abstractmethod
    def render_signed_in(self, data: SessionData) -> Any: ...


class DashboardPage(SessionConsumer):
    def render_signed_out(self) -> SignInPromptView:
        return SignInPromptView(
            title="Welcome",
            description="Please sign in to access your dashboard",
        )

    def render_signed_in(self, data: SessionData) -> DashboardView:
        user = data.user
        return DashboardView(
            heading=f"Welcome back, {user.name}!",
            name=user.name,
            email=user.email,
            email_verified=user.email_verified,
            session_id=data.session.id,
        )


class SettingsPage(SessionConsumer):
    def render_signed_out(self) -> SignInPromptView:
        return SignInPromptView(
            title="Access Denied",
            description="Please sign in to access settings",
        )

    def render_signed_in(self, data: SessionData) -> SettingsView:
        user = data.user
        return SettingsView(
            name=user.name,
            username=format_username(user),
            email=user.email,
            email_verified="Yes ✓" if user.email_verified else "No",
            account_status="Active",
            member_since=format_member_since(user.created_at),
        )


class UserMenu(SessionConsumer):
    """Avatar menu in the page header, with the sign-out action."""

    def __init__(
        self,
        store: SessionStore,
        auth_client: Any,
        navigate: Callable[[str], Awaitable[Any]],
    ):
        super().__init__(store)
        self.auth_client = auth_client
        self.navigate = navigate

    def render_signed_out(self) -> None:
        return None

    def render_signed_in(self, data: SessionData) -> UserMenuView:
        user = data.user
        return UserMenuView(
            initial=user.name[:1].upper(),
            name=user.name,
            username=format_username(user),
            image=user.image,
            links=(
                MenuLink("Settings", SETTINGS_PATH),
                MenuLink("Profile", PROFILE_PATH),
            ),
        )

    async def sign_out(self) -> None:
        """Sign out, then go to the auth page.

        If the sign-out call raises, no navigation happens.
        """
        await self.auth_client.sign_out()
        await self.navigate(AUTH_PATH)
