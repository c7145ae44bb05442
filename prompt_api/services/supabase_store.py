import logging
from typing import List, Optional

import httpx

from prompt_api.errors import StorageError
from prompt_api.services.http import make_client
from prompt_api.services.store import PromptStore

logger = logging.getLogger("prompt_api.store")

ORDER = "created_at.asc,id.asc"


def _error_text(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}: {resp.text[:200]}"
    if isinstance(data, dict):
        msg = data.get("message") or data.get("error") or str(data)
        code = data.get("code")
        return f"{code}: {msg}" if code else msg
    return f"HTTP {resp.status_code}: {data}"


def _rows(resp: httpx.Response) -> List[dict]:
    # 2xx con corpo vuoto o non JSON: errore di storage, non un 500 generico
    try:
        data = resp.json()
    except ValueError as e:
        raise StorageError(f"Invalid JSON from store: HTTP {resp.status_code} {resp.text[:200]!r}") from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise StorageError(f"Invalid JSON from store: expected a list of rows, got {type(data).__name__}")
    return data


class SupabasePromptStore(PromptStore):
    """Tabella esposta dal REST endpoint (PostgREST) del progetto Supabase."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "prompts",
        timeout: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.table = table
        self._path = f"/rest/v1/{table}"
        self._client = make_client(
            url.rstrip("/"),
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._client.request(method, self._path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[STORE] {method} {self.table} failed: {e!r}")
            raise StorageError(f"{e.__class__.__name__}: {e}") from e
        if resp.status_code >= 400:
            detail = _error_text(resp)
            logger.error(f"[STORE] {method} {self.table} -> {resp.status_code} {detail}")
            raise StorageError(detail)
        return resp

    async def select_all(self) -> List[dict]:
        resp = await self._request("GET", params={"select": "*", "order": ORDER})
        return _rows(resp)

    async def insert(self, fields: dict) -> dict:
        resp = await self._request(
            "POST",
            json=[fields],
            headers={"Prefer": "return=representation"},
        )
        rows = _rows(resp)
        if not rows:
            raise StorageError("Insert returned no row")
        return rows[0]

    async def update(self, prompt_id: str, fields: dict) -> Optional[dict]:
        resp = await self._request(
            "PATCH",
            params={"id": f"eq.{prompt_id}"},
            json=fields,
            headers={"Prefer": "return=representation"},
        )
        rows = _rows(resp)
        return rows[0] if rows else None

    async def delete(self, prompt_id: str) -> None:
        await self._request("DELETE", params={"id": f"eq.{prompt_id}"})

    async def close(self) -> None:
        await self._client.aclose()
