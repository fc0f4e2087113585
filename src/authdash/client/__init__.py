from authdash.client.app import DashboardApp
from authdash.client.auth_client import AuthClient, AuthErrorPayload, AuthResult
from authdash.client.config import ClientSettings, get_client_settings
from authdash.client.router import Router
from authdash.client.session import (
    SessionData,
    SessionInfo,
    SessionStore,
    SessionUser,
    SessionView,
)
from authdash.client.views import AuthPage, AuthView

__all__ = [
    "AuthClient",
    "AuthErrorPayload",
    "AuthPage",
    "AuthResult",
    "AuthView",
    "ClientSettings",
    "DashboardApp",
    "Router",
    "SessionData",
    "SessionInfo",
    "SessionStore",
    "SessionUser",
    "SessionView",
    "get_client_settings",
]
