# wtc/models/entities.py
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict

from .enums import EntityKind, Faction


class Entity(BaseModel):
    """Base for normalized records handed to a sink."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[EntityKind]

    id: int


class Team(Entity):
    kind: ClassVar[EntityKind] = EntityKind.TEAM

    name: str
    country: str


class Player(Entity):
    kind: ClassVar[EntityKind] = EntityKind.PLAYER

    name: str
    team_id: Optional[int] = None  # None when the team name could not be parsed
    faction: Optional[Faction] = None  # From the caster seen at first sight


class ArmyList(Entity):
    """A player's list built around one caster (the `list` relation)."""

    kind: ClassVar[EntityKind] = EntityKind.LIST

    caster: str
    player_id: int


class MatchRecord(Entity):
    kind: ClassVar[EntityKind] = EntityKind.MATCH

    round: int
    zone: str


class GameRecord(Entity):
    kind: ClassVar[EntityKind] = EntityKind.GAME

    match_id: int


class Report(Entity):
    """Outcome of one side of a game for the list that side played."""

    kind: ClassVar[EntityKind] = EntityKind.REPORT

    game_id: int
    list_id: int
    won: bool
