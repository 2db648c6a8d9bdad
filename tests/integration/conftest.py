"""Fixtures for tests against a real SQLite database."""

import pytest
import pytest_asyncio

from trusty.core.config import Settings
from trusty.infrastructure.database import Database
from trusty.infrastructure.stores.sql_store import SqlDocumentStore


@pytest.fixture
def sql_settings(tmp_path):
    return Settings(
        _env_file=None,
        STORE_BACKEND="sql",
        DATABASE_URL=f"sqlite:///{tmp_path / 'trusty.db'}",
    )


@pytest_asyncio.fixture
async def sql_store(sql_settings):
    database = Database(sql_settings)
    await database.init_schema()
    store = SqlDocumentStore(database)
    await store.connect()
    yield store
    await store.disconnect()
