from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from loguru import logger

from wtc.config.settings import settings
from wtc.models.pairing import Page


class ScraperError(Exception):
    """Custom exception for scraper-related errors."""

    pass


class FetchError(ScraperError):
    """Exception raised when a page could not be retrieved (transport or status)."""

    def __init__(self, message: str, round_number: Optional[int] = None):
        super().__init__(message)
        self.round = round_number


class BaseScraper(ABC):
    """Abstract base class for results page scrapers."""

    source: str = "unknown"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )
        self.log = logger.bind(stage="fetcher", source=self.source)

    @abstractmethod
    def fetch_pages(self) -> AsyncIterator[Page]:
        """Yield one Page per successfully fetched unit, in attempt order."""
        ...

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes a single HTTP request, no retries. Failures surface as FetchError."""
        self.log.debug("Making request", method=method, url=url, params=params)
        try:
            response = await self.client.request(method, url, params=params, **kwargs)
            response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"HTTP error {e.response.status_code} for {url}"
            ) from e
        except httpx.RequestError as e:
            raise FetchError(f"Request error for {url}: {e!r}") from e

        self.log.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        self.log.debug(f"Closed HTTP client for {self.source}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
