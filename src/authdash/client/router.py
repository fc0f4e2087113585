"""Path based page router for the dashboard client."""

from collections.abc import Callable
from typing import Protocol, TypeVar
from urllib.parse import urlsplit

from authdash.core.exceptions import ResourceNotFoundError
from authdash.core.logging import get_logger

logger = get_logger(__name__)


class Page(Protocol):
    def mount(self) -> None: ...

    def unmount(self) -> None: ...


PageFactory = TypeVar("PageFactory", bound=Callable[[], Page])


class Router:
    """Maps paths to page factories.

    Usage:
        router = Router()

        @router.route("/settings")
        def settings_page() -> SettingsPage:
            return SettingsPage(store)

        await router.navigate("/settings")
    """

    def __init__(self) -> None:
        self._routes: dict[str, Callable[[], Page]] = {}
        self.current: Page | None = None
        self.location: str | None = None
        self.history: list[str] = []

    def route(self, path: str) -> Callable[[PageFactory], PageFactory]:
        def decorator(factory: PageFactory) -> PageFactory:
            self._routes[path] = factory
            return factory

        return decorator

    @property
    def paths(self) -> list[str]:
        return list(self._routes)

    async def navigate(self, to: str) -> Page:
        """Unmount the current page and mount the one registered for `to`.

        The query string is kept in `location` but ignored for matching.

        Raises:
            ResourceNotFoundError: If no page is registered for the path
        """
        path = urlsplit(to).path or "/"
        factory = self._routes.get(path)
        if factory is None:
            raise ResourceNotFoundError("Route", path)

        self.close()
        page = factory()
        page.mount()
        self.current = page
        self.location = to
        self.history.append(to)
        logger.info("navigated", path=path)
        return page

    def close(self) -> None:
        if self.current is not None:
            self.current.unmount()
            self.current = None
