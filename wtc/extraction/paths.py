"""Fixed positional paths into a pairing row.

The results site exposes no ids or semantic classes inside a pairing row, so
every field is reached by walking a fixed sequence of first/last child and
next sibling moves. Text nodes count as siblings. Each path is resolved
against a bs4 node and fails with MalformedPairingError naming the field.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from bs4 import NavigableString, PageElement, Tag

from wtc.scrapers.base_scraper import ScraperError


class MalformedPairingError(ScraperError):
    """Raised when an expected node is missing from a pairing row."""

    def __init__(self, field: str, detail: str):
        super().__init__(f"{field}: {detail}")
        self.field = field
        self.detail = detail


class Step(str, Enum):
    FIRST = "first"  # first child
    LAST = "last"  # last child
    NEXT = "next"  # next sibling
    TEXT = "text"  # first child, which must be a text node


def _first_child(node: PageElement) -> PageElement:
    if isinstance(node, Tag) and node.contents:
        return node.contents[0]
    return None


def _last_child(node: PageElement) -> PageElement:
    if isinstance(node, Tag) and node.contents:
        return node.contents[-1]
    return None


@dataclass(frozen=True)
class NodePath:
    field: str
    steps: Tuple[Step, ...]

    def resolve(self, node: PageElement) -> Union[PageElement, str]:
        """Walks the steps from node; a TEXT step ends the walk with a string."""
        for position, step in enumerate(self.steps):
            if step is Step.FIRST:
                node = _first_child(node)
            elif step is Step.LAST:
                node = _last_child(node)
            elif step is Step.NEXT:
                node = node.next_sibling
            elif step is Step.TEXT:
                child = _first_child(node)
                if not isinstance(child, NavigableString):
                    raise MalformedPairingError(
                        self.field, f"expected a text node after {self._trail(position)}"
                    )
                return str(child)

            if node is None:
                raise MalformedPairingError(
                    self.field, f"no node at {self._trail(position + 1)}"
                )
        return node

    def text(self, node: PageElement) -> str:
        value = self.resolve(node)
        if not isinstance(value, str):
            raise MalformedPairingError(self.field, "path does not end on text")
        return value.strip()

    def _trail(self, count: int) -> str:
        return "/".join(step.value for step in self.steps[:count]) or "."


def path(field: str, *steps: Step) -> NodePath:
    return NodePath(field=field, steps=tuple(steps))


F, L, N, T = Step.FIRST, Step.LAST, Step.NEXT, Step.TEXT

# Relative to the pairing row
ZONE = path("zone", F, L, T)
TEAM_1 = path("team_1", F, N, F, L, T)
TEAM_2 = path("team_2", F, N, N, N, F, L, T)
GAME_ROWS = path("games", L)

# Relative to one game row
PLAYER_1 = path("player_1", F, T)
PLAYER_2 = path("player_2", L, T)
LIST_1 = path("list_1", F, L, T)
LIST_2 = path("list_2", L, L, T)
WINNER_CELL = path("winner", F)
