import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import MetaData, delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from prompt_api.db import make_engine
from prompt_api.errors import StorageError
from prompt_api.models.prompt import new_id, utcnow, prompts_table
from prompt_api.services.store import PromptStore

logger = logging.getLogger("prompt_api.store")


def _row(mapping) -> dict:
    data = dict(mapping)
    ts = data.get("created_at")
    # SQLite restituisce datetime naive: li normalizziamo a UTC
    if isinstance(ts, datetime) and ts.tzinfo is None:
        data["created_at"] = ts.replace(tzinfo=timezone.utc)
    return data


class SqlPromptStore(PromptStore):
    def __init__(self, database_url: str, table: str = "prompts"):
        self.table = table
        self.metadata = MetaData()
        self.t = prompts_table(self.metadata, table)
        self.engine = make_engine(database_url)
        self._last_created_at: Optional[datetime] = None

    def _next_created_at(self) -> datetime:
        # strettamente crescente: due insert nello stesso microsecondo restano in ordine
        ts = utcnow()
        if self._last_created_at is not None and ts <= self._last_created_at:
            ts = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = ts
        return ts

    def _fail(self, op: str, e: SQLAlchemyError) -> StorageError:
        logger.error(f"[STORE] {op} {self.table} failed: {e!r}")
        return StorageError(f"{e.__class__.__name__}: {e}")

    async def startup(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all)
        except SQLAlchemyError as e:
            raise self._fail("create_all", e) from e
        logger.info(f"[STORE] table '{self.table}' ensured")

    async def _get(self, conn, prompt_id: str) -> Optional[dict]:
        res = await conn.execute(select(self.t).where(self.t.c.id == prompt_id))
        row = res.mappings().first()
        return _row(row) if row else None

    async def select_all(self) -> List[dict]:
        q = select(self.t).order_by(self.t.c.created_at.asc(), self.t.c.id.asc())
        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(q)).mappings().all()
        except SQLAlchemyError as e:
            raise self._fail("select", e) from e
        return [_row(r) for r in rows]

    async def insert(self, fields: dict) -> dict:
        values = dict(fields, id=new_id(), created_at=self._next_created_at())
        try:
            async with self.engine.begin() as conn:
                await conn.execute(self.t.insert().values(**values))
                return await self._get(conn, values["id"])
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e

    async def update(self, prompt_id: str, fields: dict) -> Optional[dict]:
        # id e created_at non si toccano mai
        values = {k: v for k, v in fields.items() if k not in ("id", "created_at")}
        try:
            async with self.engine.begin() as conn:
                res = await conn.execute(update(self.t).where(self.t.c.id == prompt_id).values(**values))
                if res.rowcount == 0:
                    return None
                return await self._get(conn, prompt_id)
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e

    async def delete(self, prompt_id: str) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(self.t).where(self.t.c.id == prompt_id))
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e

    async def close(self) -> None:
        await self.engine.dispose()
