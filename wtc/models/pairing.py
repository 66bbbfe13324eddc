from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_GAMES_PER_MATCH = 5


class Page(BaseModel):
    """One fetched results page for a tournament round."""

    round: int = Field(..., ge=1)
    content: str


class Game(BaseModel):
    """A single game between two players inside a team match."""

    model_config = ConfigDict(frozen=True)

    players: Tuple[str, str]
    lists: Tuple[str, str]  # Caster names, same side order as players
    winner: int = Field(..., ge=0, le=1)  # Index of the winning side


class Match(BaseModel):
    """A team pairing as extracted from the page, names not yet deduplicated."""

    model_config = ConfigDict(frozen=True)

    round: int = Field(..., ge=1)
    zone: str
    teams: Tuple[str, str]
    games: List[Game] = []

    @field_validator("games")
    @classmethod
    def _at_most_five_games(cls, games: List[Game]) -> List[Game]:
        if len(games) > MAX_GAMES_PER_MATCH:
            raise ValueError(
                f"a match holds at most {MAX_GAMES_PER_MATCH} games, got {len(games)}"
            )
        return games
