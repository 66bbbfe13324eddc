import asyncio

import httpx
import pytest

from wtc.scrapers.base_scraper import FetchError
from wtc.scrapers.results_scraper import RoundResultsScraper

TEMPLATE = "http://results.test/?round={round}"


def make_scraper(handler, rounds=4):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RoundResultsScraper(rounds=rounds, url_template=TEMPLATE, client=client)


async def collect(scraper):
    async with scraper:
        return [page async for page in scraper.fetch_pages()]


def test_fetches_every_round_once_in_order():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, text=f"<p>{request.url.params['round']}</p>")

    pages = asyncio.run(collect(make_scraper(handler, rounds=3)))

    assert [p.round for p in pages] == [1, 2, 3]
    assert pages[1].content == "<p>2</p>"
    assert requested == [TEMPLATE.format(round=n) for n in (1, 2, 3)]


def test_failed_rounds_are_skipped_without_retry(log_records):
    attempts = []

    def handler(request):
        round_number = int(request.url.params["round"])
        attempts.append(round_number)
        if round_number == 2:
            return httpx.Response(503)
        if round_number == 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="<html></html>")

    scraper = make_scraper(handler, rounds=4)
    pages = asyncio.run(collect(scraper))

    assert [p.round for p in pages] == [1, 4]
    assert attempts == [1, 2, 3, 4]
    assert scraper.failed_rounds == [2, 3]
    errors = [r for r in log_records if r["level"].name == "ERROR"]
    assert [r["extra"]["round"] for r in errors] == [2, 3]


def test_fetch_round_raises_with_round_attached():
    scraper = make_scraper(lambda request: httpx.Response(404), rounds=1)

    async def fetch():
        async with scraper:
            await scraper.fetch_round(1)

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(fetch())
    assert excinfo.value.round == 1
    assert "404" in str(excinfo.value)


def test_rounds_must_be_positive():
    with pytest.raises(ValueError):
        RoundResultsScraper(rounds=0, client=httpx.AsyncClient())
