"""
Configurazione pytest e fixture
"""
import os

import pytest
from fastapi.testclient import TestClient

# Nessuna credenziale reale durante i test
os.environ.setdefault("PROMPTS_STORE", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from prompt_api.config import STORE_SQL, Settings  # noqa: E402
from prompt_api.main import create_app  # noqa: E402
from prompt_api.services.sql_store import SqlPromptStore  # noqa: E402


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'prompts.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(store=STORE_SQL, database_url=database_url)


@pytest.fixture
def client(settings):
    """Client di test su un file SQLite nuovo per ogni test."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_client(settings):
    """Client costruito attorno a uno store dato (es. uno che fallisce apposta)."""
    opened = []

    def _make(store):
        c = TestClient(create_app(settings, store=store))
        c.__enter__()
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture
def sql_store(database_url) -> SqlPromptStore:
    return SqlPromptStore(database_url)
