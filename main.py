import sys
import asyncio
import argparse
from contextlib import contextmanager
from typing import IO, Iterator, List, Optional

# --- Settings/Logging ---
from wtc.config.settings import settings
from wtc.logging.setup import setup_logging

from loguru import logger

from wtc.extraction.extractor import PairingExtractor
from wtc.normalization.normalizer import Normalizer
from wtc.pipeline.stages import PipelineStats, crawl, crunch, fix_stream, run_pipeline
from wtc.scrapers.results_scraper import RoundResultsScraper
from wtc.storage.base import NullSink, Sink, StorageError
from wtc.storage.sqlite_store import SQLiteStore
from wtc.storage.supabase_client import SupabaseStore

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)


@contextmanager
def open_stream(path: str, mode: str) -> Iterator[IO[str]]:
    """Opens path, with "-" standing for stdin/stdout."""
    if path == "-":
        yield sys.stdin if "r" in mode else sys.stdout
        return
    with open(path, mode, encoding="utf-8") as stream:
        yield stream


async def open_sink(backend: str, database: str) -> Sink:
    if backend == "sqlite":
        return SQLiteStore(database)
    if backend == "supabase":
        return await SupabaseStore.connect()
    return NullSink()


def print_summary(title: str, stats: PipelineStats) -> None:
    lines = [
        f"Pages fetched: {stats.pages}",
        f"Failed rounds: {', '.join(map(str, stats.failed_rounds)) or 'none'}",
        f"Unparsed pages: {stats.unparsed_pages}",
        f"Matches: {stats.matches}",
        f"Malformed pairings skipped: {stats.malformed_pairings}",
        f"Unparseable teams: {stats.unparseable_teams}",
    ]
    if stats.entities:
        lines.append(
            "Entities: " + ", ".join(f"{k}={v}" for k, v in sorted(stats.entities.items()))
        )
        lines.append(f"Written: {stats.written} (failed: {stats.write_failures})")
    console.print(Panel("\n".join(lines), title=title))


async def cmd_run(args: argparse.Namespace) -> int:
    sink = await open_sink(args.backend, args.db)
    try:
        async with RoundResultsScraper(rounds=args.rounds) as scraper:
            stats = await run_pipeline(scraper, PairingExtractor(), Normalizer(), sink)
    finally:
        await sink.close()
    print_summary("Run complete", stats)
    return 0


async def cmd_crawl(args: argparse.Namespace) -> int:
    with open_stream(args.out, "w") as out:
        async with RoundResultsScraper(rounds=args.rounds) as scraper:
            stats = await crawl(scraper, PairingExtractor(), out)
    print_summary("Crawl complete", stats)
    return 0


async def cmd_crunch(args: argparse.Namespace) -> int:
    sink = await open_sink(args.backend, args.db)
    try:
        with open_stream(args.input, "r") as source:
            stats = await crunch(source, Normalizer(), sink)
    finally:
        await sink.close()
    print_summary("Crunch complete", stats)
    return 0


async def cmd_fix(args: argparse.Namespace) -> int:
    with open_stream(args.input, "r") as source, open_stream(args.out, "w") as out:
        fixed = fix_stream(source, out)
    logger.info(f"Rewrote {fixed} matches.")
    return 0


async def cmd_check(args: argparse.Namespace) -> int:
    store = SQLiteStore(args.db, reset=False)
    try:
        typos = store.unknown_casters()
    finally:
        await store.close()

    table = Table(title=f"Unknown casters ({len(typos)})")
    for column in ("Player", "Round", "Zone", "Caster"):
        table.add_column(column)
    for typo in typos:
        table.add_row(typo.player, str(typo.round), typo.zone, typo.caster)
    Console().print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wtc", description="Scrape and normalize team tournament results."
    )
    parser.add_argument("--silent", action="store_true", help="suppress log output")
    commands = parser.add_subparsers(dest="command", required=True)

    def with_rounds(p: argparse.ArgumentParser) -> None:
        p.add_argument("--rounds", type=int, default=settings.rounds, help="rounds to fetch")

    def with_storage(p: argparse.ArgumentParser) -> None:
        p.add_argument("--db", default=settings.database_path, help="database file")
        p.add_argument(
            "--backend",
            choices=["sqlite", "supabase", "none"],
            default=settings.storage_backend,
            help="where normalized records go",
        )

    run = commands.add_parser("run", help="fetch, extract, normalize and store")
    with_rounds(run)
    with_storage(run)
    run.set_defaults(handler=cmd_run)

    crawl_cmd = commands.add_parser("crawl", help="fetch and extract into JSON lines")
    with_rounds(crawl_cmd)
    crawl_cmd.add_argument("--out", default="-", help="output file")
    crawl_cmd.set_defaults(handler=cmd_crawl)

    fix = commands.add_parser("fix", help="correct known caster typos in JSON lines")
    fix.add_argument("--in", dest="input", default="-", help="input file")
    fix.add_argument("--out", default="-", help="output file")
    fix.set_defaults(handler=cmd_fix)

    crunch_cmd = commands.add_parser("crunch", help="normalize and store JSON lines")
    crunch_cmd.add_argument("--in", dest="input", default="-", help="input file")
    with_storage(crunch_cmd)
    crunch_cmd.set_defaults(handler=cmd_crunch)

    check = commands.add_parser("check", help="list casters missing from the faction table")
    check.add_argument("--db", default=settings.database_path, help="database file")
    check.set_defaults(handler=cmd_check)

    return parser


def cli(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(silent=args.silent or settings.silent)
    try:
        return asyncio.run(args.handler(args))
    except StorageError as e:
        logger.critical("{}", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        return 0
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(cli())
