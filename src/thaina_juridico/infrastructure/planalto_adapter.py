"""Planalto adapter — implements the LegislationFetcher port."""

from __future__ import annotations

import asyncio
import logging

import httpx

from thaina_juridico.domain.exceptions import LegislationFetchError

logger = logging.getLogger(__name__)

_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}

# planalto.gov.br serves compiled legislation as ISO-8859-1 regardless of headers
_PAGE_ENCODING = "iso-8859-1"


class PlanaltoAdapter:
    """Fetch legislation pages from planalto.gov.br with linear back-off."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        retries: int = 3,
        retry_delay: float = 2.0,
    ) -> None:
        self._client = client
        self._retries = retries
        self._retry_delay = retry_delay

    async def fetch_html(self, url: str) -> str:
        """Return the page decoded as Latin-1; raises after *retries* failed attempts."""
        last_error = "no attempt made"
        for attempt in range(self._retries):
            if attempt:
                await asyncio.sleep(self._retry_delay * attempt)
            try:
                resp = await self._client.get(
                    url, headers=_BROWSER_HEADERS, follow_redirects=True
                )
            except httpx.HTTPError as exc:
                last_error = str(exc) or type(exc).__name__
                logger.info("Attempt %d failed for %s: %s", attempt + 1, url, last_error)
                continue

            if resp.is_success:
                return resp.content.decode(_PAGE_ENCODING)

            last_error = f"HTTP {resp.status_code}"
            logger.info("Attempt %d failed for %s: %s", attempt + 1, url, last_error)

        raise LegislationFetchError(
            f"Failed to fetch {url} after {self._retries} attempts ({last_error})"
        )
