# wtc/storage/supabase_client.py
from typing import Optional

from loguru import logger
from postgrest.exceptions import APIError
from supabase import AsyncClient, create_async_client

from wtc.config.settings import settings
from wtc.models.entities import Entity
from .base import Sink, StorageError, entity_row


class SupabaseStore(Sink):
    """Upserts records into Supabase tables named after each relation."""

    def __init__(self, client: AsyncClient):
        super().__init__()
        self.client = client
        self.log = logger.bind(stage="storage", backend="supabase")

    @classmethod
    async def connect(
        cls, url: Optional[str] = None, key: Optional[str] = None
    ) -> "SupabaseStore":
        url = url or settings.supabase_url
        key = key or settings.supabase_key
        if not url or not key:
            raise StorageError("Supabase URL or Key not configured in settings.")

        logger.debug(f"Attempting to initialize Async Supabase client with URL: {url}")
        try:
            client: AsyncClient = await create_async_client(url, key)
        except Exception as e:
            raise StorageError(f"Failed to initialize Async Supabase client: {e}") from e
        logger.success("Async Supabase client initialized successfully.")
        return cls(client)

    async def write(self, entity: Entity) -> bool:
        table_name = entity.kind.value
        row = entity_row(entity)
        try:
            await self.client.table(table_name).upsert(row).execute()
        except APIError as e:
            self.failed += 1
            self.log.error("Error during upsert to {}: {}", table_name, e.message, row=row)
            return False
        except Exception as e:
            # Transport failures from the PostgREST client (connection resets, timeouts)
            self.failed += 1
            self.log.error(
                "Unexpected error during upsert to {}: {!r}", table_name, e, row=row
            )
            return False
        self.written += 1
        return True
