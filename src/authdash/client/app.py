"""Dashboard client shell: settings, auth client, session store and routes."""

from authdash.client.auth_client import AuthClient
from authdash.client.config import ClientSettings, get_client_settings
from authdash.client.pages import DashboardPage, SettingsPage, UserMenu
from authdash.client.router import Page, Router
from authdash.client.views import AuthPage
from authdash.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


class DashboardApp:
    """Routes `/`, `/auth` and `/settings` over one AuthClient.

    Usage:
        app = DashboardApp()
        await app.start("/")
        ...
        await app.close()
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        auth_client: AuthClient | None = None,
    ):
        self.settings = settings or get_client_settings()
        setup_logging(debug=self.settings.DEBUG, environment=self.settings.ENVIRONMENT)
        self.auth_client = auth_client or AuthClient(settings=self.settings)
        self.router = Router()
        self.user_menu = UserMenu(
            self.auth_client.session, self.auth_client, self.router.navigate
        )

        @self.router.route("/")
        def dashboard() -> DashboardPage:
            return DashboardPage(self.auth_client.session)

        @self.router.route("/auth")
        def auth() -> AuthPage:
            return AuthPage(self.auth_client, self.router.navigate)

        @self.router.route("/settings")
        def settings_page() -> SettingsPage:
            return SettingsPage(self.auth_client.session)

    async def start(self, path: str = "/") -> Page:
        """Load the session, mount the header menu and open `path`."""
        logger.info("dashboard_starting", auth_base_url=self.settings.AUTH_BASE_URL)
        await self.auth_client.refresh_session()
        self.user_menu.mount()
        return await self.router.navigate(path)

    async def close(self) -> None:
        self.router.close()
        self.user_menu.unmount()
        await self.auth_client.aclose()
        logger.info("dashboard_closed")
