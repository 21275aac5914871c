"""Shared HTTP client manager.

Keeps one pooled ``httpx.AsyncClient`` per client id so concurrent requests
reuse upstream connections instead of opening a client per fetch. Clients
are created lazily on first use and closed on application cleanup.
"""

import asyncio
import logging
from typing import Optional

import httpx

from tu_planner import __version__

logger = logging.getLogger(__name__)

# Global state for shared HTTP clients
_shared_clients: dict[str, httpx.AsyncClient] = {}
_client_lock = asyncio.Lock()

DEFAULT_CLIENT_ID = "upstream"

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": f"tu-planner/{__version__}",
    "Accept": "text/calendar, text/plain, */*",
}


def build_request_headers() -> dict[str, str]:
    """Get default headers with the current request's correlation ID, if any."""
    headers = DEFAULT_HEADERS.copy()

    from tu_planner.api.middleware import get_request_id

    request_id = get_request_id()
    if request_id != "no-request-id":
        headers["X-Request-ID"] = request_id

    return headers


async def get_shared_client(
    client_id: str = DEFAULT_CLIENT_ID,
    limits: Optional[httpx.Limits] = None,
) -> httpx.AsyncClient:
    """Get or create a shared HTTP client with connection pooling.

    The transport's default timeout is kept; redirects are followed.

    Args:
        client_id: Identifier for the client (allows multiple clients if needed)
        limits: Custom connection limits (defaults to httpx defaults)

    Returns:
        Shared httpx.AsyncClient
    """
    async with _client_lock:
        client = _shared_clients.get(client_id)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(
                limits=limits or httpx.Limits(),
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
            )
            _shared_clients[client_id] = client
            logger.debug("Created shared HTTP client '%s'", client_id)

        return client


async def close_all_clients() -> None:
    """Close all shared HTTP clients.

    Called during application shutdown so pooled connections are released.
    """
    async with _client_lock:
        for client_id, client in _shared_clients.items():
            try:
                if not client.is_closed:
                    await client.aclose()
                    logger.debug("Closed shared HTTP client '%s'", client_id)
            except httpx.HTTPError as e:  # noqa: PERF203
                logger.warning("Error closing shared HTTP client '%s': %s", client_id, e)

        _shared_clients.clear()
