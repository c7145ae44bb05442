"""
Operazioni sui prompt.

``PromptService`` sta tra il router e il ``PromptStore``: controlla i campi
obbligatori, esegue create + backfill di location_id e trasforma "nessuna
riga trovata" in ``NotFoundError``. Non tiene stato tra una chiamata e l'altra.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from prompt_api.errors import NotFoundError, StorageError, ValidationError
from prompt_api.schemas.prompts import PromptIn
from prompt_api.services.store import PromptStore

logger = logging.getLogger("prompt_api.prompts")


@dataclass
class Created:
    record: dict


@dataclass
class CreatedWithWarning:
    record: dict
    detail: str


CreateResult = Union[Created, CreatedWithWarning]


def _require(payload: Optional[PromptIn]) -> PromptIn:
    if payload is None or payload.missing_required():
        raise ValidationError()
    return payload


class PromptService:
    def __init__(self, store: PromptStore):
        self.store = store

    async def list(self) -> List[dict]:
        return await self.store.select_all()

    async def create(self, payload: Optional[PromptIn]) -> CreateResult:
        payload = _require(payload)
        record = await self.store.insert(payload.fields())
        logger.info(f"[PROMPTS] created id={record.get('id')}")
        if not payload.wants_backfill():
            return Created(record)

        # seconda scrittura: location_id = id. Se fallisce il create resta valido
        try:
            backfilled = await self.store.update(record["id"], {"location_id": record["id"]})
        except StorageError as e:
            logger.warning(f"[PROMPTS] location_id backfill failed for id={record['id']}: {e.details}")
            return CreatedWithWarning(record, f"location_id backfill failed: {e.details}")
        if backfilled is None:
            logger.warning(f"[PROMPTS] location_id backfill found no row for id={record['id']}")
            return CreatedWithWarning(record, "location_id backfill failed: record not found")
        return Created(backfilled)

    async def update(self, prompt_id: str, payload: Optional[PromptIn]) -> dict:
        payload = _require(payload)
        record = await self.store.update(prompt_id, payload.fields())
        if record is None:
            raise NotFoundError()
        logger.info(f"[PROMPTS] updated id={prompt_id}")
        return record

    async def delete(self, prompt_id: str) -> None:
        await self.store.delete(prompt_id)
        logger.info(f"[PROMPTS] deleted id={prompt_id}")
