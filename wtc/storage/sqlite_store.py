# wtc/storage/sqlite_store.py
import sqlite3
from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from wtc.models.entities import Entity
from wtc.models.enums import EntityKind
from wtc.normalization.factions import CASTER_FACTIONS
from .base import Sink, StorageError, entity_row

TABLES: Dict[EntityKind, str] = {
    EntityKind.TEAM: "team (id INTEGER PRIMARY KEY, name VARCHAR(50), country VARCHAR(50))",
    EntityKind.PLAYER: (
        "player (id INTEGER PRIMARY KEY, name VARCHAR(50), team_id INTEGER, faction VARCHAR(50))"
    ),
    EntityKind.LIST: "list (id INTEGER PRIMARY KEY, caster VARCHAR(50), player_id INTEGER)",
    EntityKind.MATCH: "match (id INTEGER PRIMARY KEY, round INTEGER, zone VARCHAR(50))",
    EntityKind.GAME: "game (id INTEGER PRIMARY KEY, match_id INTEGER)",
    EntityKind.REPORT: (
        "report (id INTEGER PRIMARY KEY, game_id INTEGER, list_id INTEGER, won BOOLEAN)"
    ),
}

UNKNOWN_CASTERS_QUERY = """
    SELECT DISTINCT
        player.name,
        match.round,
        match.zone,
        list.caster
    FROM list
    JOIN player ON player.id = list.player_id
    JOIN report ON report.list_id = list.id
    JOIN game ON game.id = report.game_id
    JOIN match ON match.id = game.match_id
    WHERE list.caster NOT IN ({placeholders})
    ORDER BY list.caster, match.round, match.zone
"""


@dataclass
class UnknownCaster:
    player: str
    round: int
    zone: str
    caster: str


class SQLiteStore(Sink):
    """Writes every record into its own relation of a SQLite database.

    Ids come from the normalizer, so a store opened with reset=True starts
    from empty tables.
    """

    def __init__(self, path: str, reset: bool = True):
        super().__init__()
        self.path = path
        self.log = logger.bind(stage="storage", backend="sqlite")
        try:
            self.conn = sqlite3.connect(path)
            if reset:
                self._create_schema()
        except sqlite3.Error as e:
            raise StorageError(f"Opening database {path} failed: {e}") from e
        self.log.debug(f"Connected to database: {path}")

    def _create_schema(self) -> None:
        with self.conn:
            for kind, definition in TABLES.items():
                self.conn.execute(f"DROP TABLE IF EXISTS {kind.value}")
                self.conn.execute(f"CREATE TABLE {definition}")

    async def write(self, entity: Entity) -> bool:
        row = entity_row(entity)
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        statement = f"INSERT INTO {entity.kind.value} ({columns}) VALUES ({placeholders})"
        try:
            with self.conn:
                self.conn.execute(statement, tuple(row.values()))
        except sqlite3.Error as e:
            self.failed += 1
            self.log.error(
                "Inserting {} failed: {}", entity.kind.value, e, row=row
            )
            return False
        self.written += 1
        return True

    def count(self, kind: EntityKind) -> int:
        return self.conn.execute(f"SELECT COUNT(*) FROM {kind.value}").fetchone()[0]

    def unknown_casters(self, known: Optional[List[str]] = None) -> List[UnknownCaster]:
        """Casters played in a game that are missing from the faction table."""
        known = list(CASTER_FACTIONS) if known is None else known
        query = UNKNOWN_CASTERS_QUERY.format(placeholders=", ".join("?" for _ in known))
        try:
            rows = self.conn.execute(query, known).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Querying unknown casters failed: {e}") from e
        return [UnknownCaster(*row) for row in rows]

    async def close(self) -> None:
        self.conn.close()
        self.log.debug(f"Closed database: {self.path}")
