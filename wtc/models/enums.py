from enum import Enum


class Faction(str, Enum):
    CYGNAR = "cygnar"
    CRYX = "cryx"
    MENOTH = "menoth"
    KHADOR = "khador"
    MERCENARIES = "mercenaries"
    CYRISS = "cyriss"
    SCYRAH = "scyrah"
    TROLLBLOODS = "trollbloods"
    ORBOROS = "orboros"
    EVERBLIGHT = "everblight"
    SKORNE = "skorne"
    MINION = "minion"


class EntityKind(str, Enum):
    """Persisted relations, named after their tables."""

    TEAM = "team"
    PLAYER = "player"
    LIST = "list"
    MATCH = "match"
    GAME = "game"
    REPORT = "report"
