"""HTTP client for downloading the upstream iCalendar feed."""

import logging
from typing import Optional

import httpx

from tu_planner.config.models import redact_url
from tu_planner.core.exceptions import FetchError
from tu_planner.core.http_client import build_request_headers, get_shared_client

logger = logging.getLogger(__name__)


class CalendarFetcher:
    """Fetch calendar text with a single GET per call.

    No retries are attempted; every failure surfaces as ``FetchError``.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional HTTP client; the process-wide shared client is
                used when omitted.
        """
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await get_shared_client()

    async def fetch(self, url: str) -> str:
        """Download ``url`` and return the response body as text.

        Raises:
            FetchError: transport failure or non-2xx status
        """
        safe_url = redact_url(url)
        client = await self._get_client()

        logger.debug("Fetching calendar from %s", safe_url)
        try:
            response = await client.get(url, headers=build_request_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"upstream returned HTTP {status} for {safe_url}", url, status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                f"could not reach upstream {safe_url}: {type(exc).__name__}: {exc}", url
            ) from exc

        logger.debug(
            "Fetched %d bytes from %s (HTTP %d)",
            len(response.content),
            safe_url,
            response.status_code,
        )
        return response.text
