from typing import AsyncIterator, List, Optional

import httpx

from wtc.config.settings import settings
from wtc.models.pairing import Page
from .base_scraper import BaseScraper, FetchError


class RoundResultsScraper(BaseScraper):
    """Fetches the pairings page of every tournament round, 1..rounds."""

    source: str = "wtc"

    def __init__(
        self,
        rounds: Optional[int] = None,
        url_template: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client=client)
        self.rounds = rounds if rounds is not None else settings.rounds
        self.url_template = url_template or settings.url_template
        self.failed_rounds: List[int] = []
        if self.rounds < 1:
            raise ValueError(f"rounds must be positive, got {self.rounds}")

    def round_url(self, round_number: int) -> str:
        return self.url_template.format(round=round_number)

    async def fetch_round(self, round_number: int) -> Page:
        url = self.round_url(round_number)
        self.log.info("Retrieving page", round=round_number, url=url)
        try:
            response = await self._make_request("GET", url)
        except FetchError as e:
            e.round = round_number
            raise
        return Page(round=round_number, content=response.text)

    async def fetch_pages(self) -> AsyncIterator[Page]:
        """Attempts each round exactly once; failed rounds are logged and omitted."""
        for round_number in range(1, self.rounds + 1):
            try:
                page = await self.fetch_round(round_number)
            except FetchError as e:
                self.log.error("Retrieving page failed: {}", e, round=round_number)
                self.failed_rounds.append(round_number)
                continue
            yield page

        self.log.info(f"Finished fetching {self.rounds} rounds.")
