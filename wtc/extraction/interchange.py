"""Newline-delimited JSON exchange of Match records between stages.

One Match per line::

    {"round": 1, "zone": "Zone A", "teams": ["...", "..."],
     "games": [{"players": ["...", "..."], "lists": ["...", "..."], "winner": 0}]}
"""
from typing import IO, Iterable, Iterator

from loguru import logger
from pydantic import ValidationError

from wtc.models.pairing import Match


class InterchangeError(Exception):
    """Raised when a line cannot be decoded into a Match."""

    pass


def encode_match(match: Match) -> str:
    return match.model_dump_json()


def decode_match(line: str) -> Match:
    try:
        return Match.model_validate_json(line)
    except ValidationError as e:
        raise InterchangeError(f"Invalid match record: {e.error_count()} error(s)") from e


def write_matches(matches: Iterable[Match], stream: IO[str]) -> int:
    """Writes matches one per line and returns how many were written."""
    written = 0
    for match in matches:
        stream.write(encode_match(match) + "\n")
        written += 1
    return written


def read_matches(stream: IO[str]) -> Iterator[Match]:
    """Yields decoded matches; blank lines are ignored, bad lines logged and skipped."""
    for line_number, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            yield decode_match(line)
        except InterchangeError as e:
            logger.error("Reading match failed: {}", e, stage="reader", line=line_number)
