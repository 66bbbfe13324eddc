"""Staged pipeline: fetch -> extract -> normalize -> sink.

Each stage is one coroutine reading from one bounded queue and writing to the
next. A full queue blocks the producer, an empty one blocks the consumer, and
END_OF_STREAM travels down the chain once a stage's input is exhausted.
"""
import asyncio
from collections import Counter
from dataclasses import dataclass, field
from typing import IO, Any, Awaitable, List, Optional

from loguru import logger

from wtc.config.settings import settings
from wtc.extraction.extractor import PairingExtractor
from wtc.extraction.interchange import encode_match, read_matches
from wtc.normalization.fixes import fix_match
from wtc.normalization.normalizer import Normalizer
from wtc.scrapers.base_scraper import BaseScraper
from wtc.storage.base import Sink

END_OF_STREAM = object()


@dataclass
class PipelineStats:
    pages: int = 0
    failed_rounds: List[int] = field(default_factory=list)
    unparsed_pages: int = 0
    matches: int = 0
    malformed_pairings: int = 0
    unparseable_teams: int = 0
    entities: Counter = field(default_factory=Counter)
    written: int = 0
    write_failures: int = 0

    def collect(
        self,
        scraper: Optional[BaseScraper] = None,
        extractor: Optional[PairingExtractor] = None,
        normalizer: Optional[Normalizer] = None,
        sink: Optional[Sink] = None,
    ) -> "PipelineStats":
        """Copies the failure counters each component kept while running."""
        if scraper is not None:
            self.failed_rounds = list(getattr(scraper, "failed_rounds", []))
        if extractor is not None:
            self.unparsed_pages = extractor.unparsed_pages
            self.malformed_pairings = extractor.malformed
        if normalizer is not None:
            self.unparseable_teams = normalizer.unparseable_teams
            self.entities = Counter({kind.value: n for kind, n in normalizer.emitted.items()})
        if sink is not None:
            self.written = sink.written
            self.write_failures = sink.failed
        return self


def make_queue(queue_size: Optional[int] = None) -> asyncio.Queue:
    return asyncio.Queue(maxsize=queue_size or settings.queue_size)


async def drain(queue: asyncio.Queue):
    """Async iterator over a queue until END_OF_STREAM."""
    while True:
        item = await queue.get()
        if item is END_OF_STREAM:
            return
        yield item


async def fetch_stage(scraper: BaseScraper, out: asyncio.Queue, stats: PipelineStats) -> None:
    try:
        async for page in scraper.fetch_pages():
            stats.pages += 1
            await out.put(page)
    finally:
        await out.put(END_OF_STREAM)


async def extract_stage(
    extractor: PairingExtractor,
    source: asyncio.Queue,
    out: asyncio.Queue,
    stats: PipelineStats,
) -> None:
    try:
        async for page in drain(source):
            for match in extractor.extract(page):
                stats.matches += 1
                await out.put(match)
    finally:
        await out.put(END_OF_STREAM)


async def read_stage(stream: IO[str], out: asyncio.Queue, stats: PipelineStats) -> None:
    try:
        for match in read_matches(stream):
            stats.matches += 1
            await out.put(match)
    finally:
        await out.put(END_OF_STREAM)


async def normalize_stage(
    normalizer: Normalizer, source: asyncio.Queue, sink: Sink
) -> None:
    """The only writer of the normalizer's identity registry."""
    async for match in drain(source):
        for entity in normalizer.normalize(match):
            await sink.write(entity)


async def write_stage(source: asyncio.Queue, stream: IO[str]) -> int:
    written = 0
    async for match in drain(source):
        logger.info("Writing match", stage="writer", round=match.round, zone=match.zone)
        stream.write(encode_match(match) + "\n")
        written += 1
    stream.flush()
    return written


async def run_stages(*stages: Awaitable[Any]) -> List[Any]:
    """Runs stages concurrently; if one fails the others are cancelled."""
    tasks = [asyncio.ensure_future(stage) for stage in stages]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def run_pipeline(
    scraper: BaseScraper,
    extractor: PairingExtractor,
    normalizer: Normalizer,
    sink: Sink,
    queue_size: Optional[int] = None,
) -> PipelineStats:
    """Fetch, extract, normalize and store every round."""
    stats = PipelineStats()
    pages, matches = make_queue(queue_size), make_queue(queue_size)
    await run_stages(
        fetch_stage(scraper, pages, stats),
        extract_stage(extractor, pages, matches, stats),
        normalize_stage(normalizer, matches, sink),
    )
    return stats.collect(scraper, extractor, normalizer, sink)


async def crawl(
    scraper: BaseScraper,
    extractor: PairingExtractor,
    stream: IO[str],
    queue_size: Optional[int] = None,
) -> PipelineStats:
    """Fetch and extract every round, writing matches as JSON lines."""
    stats = PipelineStats()
    pages, matches = make_queue(queue_size), make_queue(queue_size)
    await run_stages(
        fetch_stage(scraper, pages, stats),
        extract_stage(extractor, pages, matches, stats),
        write_stage(matches, stream),
    )
    return stats.collect(scraper, extractor)


async def crunch(
    stream: IO[str],
    normalizer: Normalizer,
    sink: Sink,
    queue_size: Optional[int] = None,
) -> PipelineStats:
    """Normalize and store matches read from JSON lines."""
    stats = PipelineStats()
    matches = make_queue(queue_size)
    await run_stages(
        read_stage(stream, matches, stats),
        normalize_stage(normalizer, matches, sink),
    )
    return stats.collect(normalizer=normalizer, sink=sink)


def fix_stream(source: IO[str], out: IO[str]) -> int:
    """Rewrites a JSON lines stream with caster names corrected."""
    fixed = 0
    for match in read_matches(source):
        out.write(encode_match(fix_match(match)) + "\n")
        fixed += 1
    return fixed
