from abc import ABC, abstractmethod
from typing import Any, Dict

from wtc.models.entities import Entity


class StorageError(Exception):
    """Raised when a sink cannot be opened or written to."""

    pass


def entity_row(entity: Entity) -> Dict[str, Any]:
    """Column values for an entity, enums flattened to their values."""
    return entity.model_dump(mode="json")


class Sink(ABC):
    """Destination for normalized records, written in derivation order."""

    def __init__(self):
        self.written = 0
        self.failed = 0

    @abstractmethod
    async def write(self, entity: Entity) -> bool:
        """Stores one record; returns False (after logging) when it could not."""
        ...

    async def close(self) -> None:
        pass


class NullSink(Sink):
    """Discards everything, for dry runs."""

    async def write(self, entity: Entity) -> bool:
        self.written += 1
        return True
