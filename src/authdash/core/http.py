"""HTTP client utilities with built-in timeout and error mapping.

The dashboard client talks to the auth service through these helpers so
that transport failures always surface as AppException subclasses.
"""

from typing import Any

import httpx

from authdash.core.exceptions import ExternalServiceError, TimeoutError
from authdash.core.logging import get_logger

logger = get_logger(__name__)


def build_timeout(total_seconds: float) -> httpx.Timeout:
    """Timeout with a short connect phase and the given read timeout."""
    return httpx.Timeout(
        connect=min(5.0, total_seconds),
        read=total_seconds,
        write=10.0,
        pool=5.0,
    )


DEFAULT_TIMEOUT = build_timeout(30.0)


def create_http_client(
    base_url: str = "",
    timeout: httpx.Timeout | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an async HTTP client with sensible defaults.

    Usage:
        async with create_http_client("http://localhost:3000") as client:
            response = await client.get("/api/auth/get-session")
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout or DEFAULT_TIMEOUT,
        follow_redirects=True,
        **kwargs,
    )


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    service_name: str = "external service",
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, translating transport failures.

    HTTP error statuses are returned untouched; callers decide what a 4xx
    means for them.

    Raises:
        TimeoutError: If the request times out
        ExternalServiceError: If the request cannot be completed
    """
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.warning("http_request_timeout", url=url, service=service_name)
        raise TimeoutError(f"Request to {service_name}") from e
    except httpx.RequestError as e:
        logger.warning("http_request_failed", url=url, service=service_name, error=str(e))
        raise ExternalServiceError(service_name, str(e) or type(e).__name__) from e
