"""Port: legislation fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class LegislationFetcher(Protocol):
    """Abstract contract for downloading an official legislation page."""

    async def fetch_html(self, url: str) -> str:
        """Return the decoded HTML of the page at *url*."""
        ...
