import asyncio
import os
import sys
from typing import AsyncIterator

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Must be set before volleytracker.main is imported anywhere.
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("DISABLE_RATE_LIMITS", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from volleytracker.db import Base, get_session
from volleytracker.history import UndoHistory, get_undo_history
from volleytracker import models  # noqa: F401  # register tables on Base
from volleytracker.storage import MemoryStorage

ROSTER_CSV = (
    "Player Name,Team,Kills,Assists,Digs,Blocks,Aces,Errors,Position,Jersey Number\n"
    "Ana Lima,home,3,1,2,0,1,0,Setter,1\n"
    "Emma Clarke,away,0,4,1,1,0,2,Opposite,9\n"
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def history() -> UndoHistory:
    return UndoHistory(limit=50)


@pytest.fixture
def client_and_history():
    """TestClient for the full app backed by a fresh in-memory SQLite database."""

    from volleytracker.main import app

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async_session_maker = sessionmaker(
        engine, expire_on_commit=False, class_=AsyncSession
    )

    async def init_models():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(init_models())

    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with async_session_maker() as session:
            yield session

    history = UndoHistory(limit=50)
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_undo_history] = lambda: history
    try:
        with TestClient(app) as client:
            yield client, history
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(client_and_history):
    return client_and_history[0]


@pytest.fixture
def roster_csv() -> bytes:
    return ROSTER_CSV.encode()
