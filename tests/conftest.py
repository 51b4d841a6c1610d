"""Shared fixtures: a temporary SQLite database and a scripted reply generator."""
import sqlite3
from contextlib import closing

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from api.main import app
from api.shared.entities.registry import BaseEntity
from infra.resources import DatabaseResource


class FakeReplyGenerator:
    """Stands in for the Gemini-backed generator and records every call."""

    def __init__(self, reply=None):
        self.reply = reply
        self.calls = []

    async def generate(self, turns, prompt):
        self.calls.append((list(turns), prompt))
        if self.reply is not None:
            return self.reply
        return f"Reply to: {prompt}"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "chat.db"


@pytest.fixture
def reply_generator():
    return FakeReplyGenerator()


@pytest.fixture
def client(db_path, reply_generator):
    container = app.container
    database = providers.Singleton(
        DatabaseResource, database_url=f"sqlite+aiosqlite:///{db_path}"
    )
    with container.infrastructure.database.override(database), \
            container.infrastructure.reply_generator.override(providers.Object(reply_generator)):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def count_rows(db_path):
    def _count(table: str) -> int:
        with closing(sqlite3.connect(db_path)) as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    return _count


@pytest.fixture
async def db_session(tmp_path):
    db = DatabaseResource(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await db.init()
    await db.create_schema(BaseEntity.metadata)
    session = db.get_session()
    try:
        yield session
    finally:
        await session.close()
        await db.shutdown()
