from collections import Counter
from typing import List, Optional, Sequence

from loguru import logger

from wtc.models.entities import (
    ArmyList,
    Entity,
    GameRecord,
    MatchRecord,
    Player,
    Report,
    Team,
)
from wtc.models.enums import EntityKind
from wtc.models.pairing import Game, Match
from .countries import COUNTRIES, split_team_label
from .factions import faction_for
from .fixes import fix_match
from .registry import IdentityRegistry

SIDES = (0, 1)


class NormalizationError(Exception):
    """Custom exception for data normalization errors."""

    pass


class UnparseableTeamError(NormalizationError):
    """Raised when no known country prefixes a team label."""

    def __init__(self, label: str):
        super().__init__(f"Unable to parse team name: {label!r}")
        self.label = label


class Normalizer:
    """Turns raw Match records into deduplicated, identified entities.

    Teams are keyed by their raw label, players by name and lists by
    (player, caster). The first sighting of a key creates the entity and
    fixes its id; later sightings only reuse that id. Entities are returned
    in an order where every referenced id has already been emitted: teams,
    players, lists, the match, then each game followed by its two reports.
    """

    def __init__(
        self,
        registry: Optional[IdentityRegistry] = None,
        countries: Sequence[str] = COUNTRIES,
    ):
        self.registry = registry or IdentityRegistry()
        self.countries = countries
        self.emitted: Counter = Counter()
        self.unparseable_teams = 0
        self.log = logger.bind(stage="normalizer")
        logger.debug(f"Normalizer initialized with {len(self.countries)} countries.")

    def normalize(self, match: Match) -> List[Entity]:
        match = fix_match(match)
        entities: List[Entity] = []

        team_ids = [self._resolve_team(label, entities) for label in match.teams]

        for game in match.games:
            for side in SIDES:
                self._resolve_player(game, side, team_ids[side], entities)

        for game in match.games:
            for side in SIDES:
                self._resolve_list(game, side, entities)

        match_record = MatchRecord(
            id=self.registry.next_id(EntityKind.MATCH), round=match.round, zone=match.zone
        )
        entities.append(match_record)

        for game in match.games:
            game_record = GameRecord(
                id=self.registry.next_id(EntityKind.GAME), match_id=match_record.id
            )
            entities.append(game_record)
            for side in SIDES:
                entities.append(
                    Report(
                        id=self.registry.next_id(EntityKind.REPORT),
                        game_id=game_record.id,
                        list_id=self.registry.list_id(game.players[side], game.lists[side]),
                        won=side == game.winner,
                    )
                )

        self.emitted.update(entity.kind for entity in entities)
        return entities

    def _resolve_team(self, label: str, entities: List[Entity]) -> Optional[int]:
        team_id = self.registry.team_id(label)
        if team_id is not None:
            return team_id

        try:
            team = self._new_team(label)
        except UnparseableTeamError as e:
            self.unparseable_teams += 1
            self.log.error("{}", e, team=label)
            return None

        self.log.info("New team", country=team.country, name=team.name, id=team.id)
        entities.append(team)
        return team.id

    def _new_team(self, label: str) -> Team:
        parsed = split_team_label(label, self.countries)
        if parsed is None:
            raise UnparseableTeamError(label)
        country, name = parsed
        return Team(id=self.registry.bind_team(label), name=name, country=country)

    def _resolve_player(
        self, game: Game, side: int, team_id: Optional[int], entities: List[Entity]
    ) -> None:
        name = game.players[side]
        if self.registry.player_id(name) is not None:
            return

        player = Player(
            id=self.registry.bind_player(name),
            name=name,
            team_id=team_id,
            faction=faction_for(game.lists[side]),
        )
        self.log.info("New player", name=player.name, team_id=team_id, id=player.id)
        entities.append(player)

    def _resolve_list(self, game: Game, side: int, entities: List[Entity]) -> None:
        player, caster = game.players[side], game.lists[side]
        if self.registry.list_id(player, caster) is not None:
            return

        army_list = ArmyList(
            id=self.registry.bind_list(player, caster),
            caster=caster,
            player_id=self.registry.player_id(player),
        )
        self.log.info("New list", player=player, caster=caster, id=army_list.id)
        entities.append(army_list)
