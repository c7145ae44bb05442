"""
Storage dei prompt.

Il router parla solo con un ``PromptStore``; quale backend concreto usare
(REST endpoint Supabase o database SQLAlchemy) lo decide ``build_store``
in base ai settings.
"""

import abc
import logging
from typing import List, Optional

import httpx

from prompt_api.config import STORE_SQL, STORE_SUPABASE, Settings
from prompt_api.errors import ConfigurationError

logger = logging.getLogger("prompt_api.store")


class PromptStore(abc.ABC):
    table: str

    @abc.abstractmethod
    async def select_all(self) -> List[dict]:
        """Tutti i record, in ordine crescente di created_at."""

    @abc.abstractmethod
    async def insert(self, fields: dict) -> dict:
        """Inserisce un record; il dict restituito ha id e created_at generati."""

    @abc.abstractmethod
    async def update(self, prompt_id: str, fields: dict) -> Optional[dict]:
        """Sovrascrive ``fields`` sul record; None se nessun record corrisponde."""

    @abc.abstractmethod
    async def delete(self, prompt_id: str) -> None:
        ...

    async def startup(self) -> None:
        pass

    async def close(self) -> None:
        pass


def build_store(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> PromptStore:
    if settings.store == STORE_SUPABASE:
        from prompt_api.services.supabase_store import SupabasePromptStore

        if not settings.supabase_url or not settings.supabase_key:
            raise ConfigurationError()
        return SupabasePromptStore(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.table,
            timeout=settings.http_timeout,
            transport=transport,
        )

    if settings.store == STORE_SQL:
        from prompt_api.services.sql_store import SqlPromptStore

        if not settings.database_url:
            raise ConfigurationError("Missing DATABASE_URL environment variable")
        return SqlPromptStore(settings.database_url, table=settings.table)

    raise ConfigurationError(f"Unknown PROMPTS_STORE '{settings.store}' (use 'supabase' or 'sql')")
