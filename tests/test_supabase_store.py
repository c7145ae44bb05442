import json

import httpx
import pytest

from prompt_api.config import Settings
from prompt_api.errors import ConfigurationError, StorageError
from prompt_api.services.store import build_store
from prompt_api.services.supabase_store import SupabasePromptStore

URL = "https://demo.supabase.co"
KEY = "anon-key"


def _store(handler) -> SupabasePromptStore:
    return SupabasePromptStore(URL, KEY, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_select_all_orders_by_created_at_and_sends_key():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["apikey"] = request.headers.get("apikey")
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json=[{"id": "1", "name": "a"}])

    store = _store(handler)
    rows = await store.select_all()
    await store.close()

    assert rows == [{"id": "1", "name": "a"}]
    assert seen["method"] == "GET"
    assert seen["path"] == "/rest/v1/prompts"
    assert seen["params"]["order"] == "created_at.asc,id.asc"
    assert seen["params"]["select"] == "*"
    assert seen["apikey"] == KEY
    assert seen["auth"] == f"Bearer {KEY}"


@pytest.mark.asyncio
async def test_select_all_null_body_is_empty_list():
    store = _store(lambda request: httpx.Response(200, json=None))
    assert await store.select_all() == []
    await store.close()


@pytest.mark.asyncio
async def test_insert_returns_representation():
    def handler(request: httpx.Request):
        assert request.method == "POST"
        assert request.headers["prefer"] == "return=representation"
        sent = json.loads(request.content)
        assert sent == [{"name": "a", "prompt": "b"}]
        return httpx.Response(201, json=[{"id": "77", "name": "a", "prompt": "b", "created_at": "2024-01-01T00:00:00+00:00"}])

    store = _store(handler)
    row = await store.insert({"name": "a", "prompt": "b"})
    await store.close()
    assert row["id"] == "77"


@pytest.mark.asyncio
async def test_update_filters_by_id_and_returns_none_when_no_row():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.params.get("id")))
        return httpx.Response(200, json=[])

    store = _store(handler)
    assert await store.update("abc", {"name": "x"}) is None
    await store.close()
    assert calls == [("PATCH", "eq.abc")]


@pytest.mark.asyncio
async def test_update_returns_first_row():
    store = _store(lambda request: httpx.Response(200, json=[{"id": "abc", "business_name": "New"}]))
    row = await store.update("abc", {"business_name": "New"})
    await store.close()
    assert row == {"id": "abc", "business_name": "New"}


@pytest.mark.asyncio
async def test_delete_sends_id_filter():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.params.get("id")))
        return httpx.Response(204)

    store = _store(handler)
    await store.delete("abc")
    await store.close()
    assert calls == [("DELETE", "eq.abc")]


@pytest.mark.asyncio
async def test_error_response_becomes_storage_error():
    def handler(request: httpx.Request):
        return httpx.Response(400, json={"code": "22P02", "message": "invalid input syntax for type uuid"})

    store = _store(handler)
    with pytest.raises(StorageError) as exc:
        await store.select_all()
    await store.close()
    assert exc.value.details == "22P02: invalid input syntax for type uuid"
    assert exc.value.status_code == 500


@pytest.mark.asyncio
async def test_network_failure_becomes_storage_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(StorageError) as exc:
        await store.delete("abc")
    await store.close()
    assert "ConnectError" in exc.value.details


def test_build_store_requires_url_and_key():
    with pytest.raises(ConfigurationError):
        build_store(Settings(store="supabase", supabase_url=URL))
    with pytest.raises(ConfigurationError):
        build_store(Settings(store="supabase", supabase_key=KEY))


@pytest.mark.asyncio
async def test_build_store_uses_table_name():
    seen = []
    settings = Settings(store="supabase", supabase_url=URL + "/", supabase_key=KEY, table="agent_prompts")
    store = build_store(settings, transport=httpx.MockTransport(
        lambda request: seen.append(request.url.path) or httpx.Response(200, json=[])
    ))
    assert isinstance(store, SupabasePromptStore)
    await store.select_all()
    await store.close()
    assert seen == ["/rest/v1/agent_prompts"]


@pytest.mark.asyncio
async def test_non_json_success_body_becomes_storage_error():
    store = _store(lambda request: httpx.Response(200, content=b"<html>gateway</html>"))
    with pytest.raises(StorageError) as exc:
        await store.select_all()
    await store.close()
    assert exc.value.details.startswith("Invalid JSON from store")


@pytest.mark.asyncio
async def test_object_instead_of_rows_becomes_storage_error():
    store = _store(lambda request: httpx.Response(200, json={"id": "abc"}))
    with pytest.raises(StorageError):
        await store.update("abc", {"name": "x"})
    await store.close()


def test_backfill_with_empty_patch_body_is_created_with_warning(make_client):
    def handler(request: httpx.Request):
        if request.method == "POST":
            return httpx.Response(201, json=[{"id": "row-1", "name": "a", "prompt": "b", "location_id": None}])
        # PATCH senza corpo: l'insert è già avvenuto
        return httpx.Response(204)

    c = make_client(_store(handler))
    r = c.post("/prompts", json={"name": "a", "prompt": "b"})
    assert r.status_code == 201
    body = r.json()
    assert body["id"] == "row-1"
    assert body["location_id"] is None
    assert "Invalid JSON from store" in body["warning"]
