from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from wtc.models.pairing import MAX_GAMES_PER_MATCH, Game, Match, Page
from wtc.scrapers.base_scraper import ScraperError
from . import paths
from .paths import MalformedPairingError

PAIRING_MARKER = "pairing-row"
WINNER_MARKER = "winner"
TEAM_LABEL_PREFIX = "Team"


class ParseError(ScraperError):
    """Raised when a page cannot be parsed as HTML."""

    pass


def class_value(node: Tag) -> str:
    """Returns the class attribute as one string (bs4 splits it into a list)."""
    value = node.get("class")
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def is_pairing_row(node) -> bool:
    return isinstance(node, Tag) and PAIRING_MARKER in class_value(node)


def clean_team_label(label: str) -> str:
    """Strips an optional leading "Team" and surrounding whitespace."""
    return label.strip().removeprefix(TEAM_LABEL_PREFIX).strip()


def find_pairing_rows(node) -> Iterator[Tag]:
    """Pre-order walk yielding pairing rows; a pairing row is not descended into."""
    stack = [node]
    while stack:
        node = stack.pop()
        if is_pairing_row(node):
            yield node
        elif isinstance(node, Tag):
            # Reversed so the leftmost child is visited first
            stack.extend(reversed(node.contents))


def decode_game(row) -> Game:
    winner_cell = paths.WINNER_CELL.resolve(row)
    winner = 0 if isinstance(winner_cell, Tag) and WINNER_MARKER in class_value(winner_cell) else 1
    return Game(
        players=(paths.PLAYER_1.text(row), paths.PLAYER_2.text(row)),
        lists=(paths.LIST_1.text(row), paths.LIST_2.text(row)),
        winner=winner,
    )


def decode_pairing(node: Tag, round_number: int) -> Match:
    """Maps one pairing row onto a Match, raising MalformedPairingError on any gap."""
    zone = paths.ZONE.text(node)
    teams = (
        clean_team_label(paths.TEAM_1.text(node)),
        clean_team_label(paths.TEAM_2.text(node)),
    )

    games: List[Game] = []
    rows = paths.GAME_ROWS.resolve(node)
    for index, row in enumerate(rows.children if isinstance(rows, Tag) else []):
        if index >= MAX_GAMES_PER_MATCH:
            logger.warning(
                f"Ignoring game rows beyond {MAX_GAMES_PER_MATCH}",
                stage="extractor",
                round=round_number,
                zone=zone,
            )
            break
        try:
            games.append(decode_game(row))
        except MalformedPairingError as e:
            raise MalformedPairingError(f"game_{index + 1}.{e.field}", e.detail) from e

    return Match(round=round_number, zone=zone, teams=teams, games=games)


class PairingExtractor:
    """Turns results pages into Match records."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser
        self.malformed = 0
        self.unparsed_pages = 0
        self.log = logger.bind(stage="extractor")

    def parse(self, page: Page) -> BeautifulSoup:
        try:
            return BeautifulSoup(page.content, self.parser)
        except Exception as e:
            raise ParseError(f"Unable to parse page for round {page.round}: {e}") from e

    def extract(self, page: Page) -> Iterator[Match]:
        """Yields one Match per well-formed pairing row, in document order."""
        self.log.info("Parsing page", round=page.round)
        try:
            root = self.parse(page)
        except ParseError as e:
            self.unparsed_pages += 1
            self.log.error("{}", e, round=page.round)
            return

        for position, node in enumerate(find_pairing_rows(root), start=1):
            match = self._decode(node, page.round, position)
            if match is not None:
                self.log.info("Extracted match", round=match.round, zone=match.zone)
                yield match

    def _decode(self, node: Tag, round_number: int, position: int) -> Optional[Match]:
        try:
            return decode_pairing(node, round_number)
        except (MalformedPairingError, ValueError) as e:
            # ValueError covers pydantic validation of the decoded values
            self.malformed += 1
            self.log.error(
                "Skipping malformed pairing row: {}",
                e,
                round=round_number,
                position=position,
            )
            return None
