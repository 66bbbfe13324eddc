from collections import Counter
from typing import Dict, Hashable, Optional, Tuple

from wtc.models.enums import EntityKind


class IdentityRegistry:
    """First-writer-wins identities for one pipeline run.

    Ids are handed out per entity kind starting at 1 with no gaps. A key, once
    bound, keeps its id for the lifetime of the registry. Not thread-safe: the
    normalizer owning it is the only writer.
    """

    def __init__(self):
        self._counters: Counter = Counter()
        self.teams: Dict[str, int] = {}
        self.players: Dict[str, int] = {}
        self.lists: Dict[Tuple[str, str], int] = {}

    def next_id(self, kind: EntityKind) -> int:
        self._counters[kind] += 1
        return self._counters[kind]

    def last_id(self, kind: EntityKind) -> int:
        return self._counters[kind]

    def team_id(self, label: str) -> Optional[int]:
        return self.teams.get(label)

    def player_id(self, name: str) -> Optional[int]:
        return self.players.get(name)

    def list_id(self, player: str, caster: str) -> Optional[int]:
        return self.lists.get((player, caster))

    def bind_team(self, label: str) -> int:
        return self._bind(self.teams, label, EntityKind.TEAM)

    def bind_player(self, name: str) -> int:
        return self._bind(self.players, name, EntityKind.PLAYER)

    def bind_list(self, player: str, caster: str) -> int:
        return self._bind(self.lists, (player, caster), EntityKind.LIST)

    def _bind(self, table: Dict, key: Hashable, kind: EntityKind) -> int:
        if key in table:
            raise KeyError(f"{kind.value} {key!r} is already bound to {table[key]}")
        table[key] = self.next_id(kind)
        return table[key]
