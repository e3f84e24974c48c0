"""Shared outbound HTTP client - used for the schedule and odds providers.

One pooled httpx.AsyncClient per process, created on first use and closed
by the application lifespan.
"""

import httpx

from config.settings import settings

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared AsyncClient."""
    global _http_client  # noqa: PLW0603
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=settings.PROVIDER_TIMEOUT_SECONDS,
            headers={"Accept": "application/json", "User-Agent": "sidebet/0.1"},
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared AsyncClient."""
    global _http_client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
