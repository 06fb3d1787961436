"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import asyncio
from datetime import datetime, timezone
from typing import Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from boardsync.chess.rules import ChessRules
from boardsync.core.exceptions import SnapshotStoreError
from boardsync.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


class InMemorySnapshotStore:
    """
    Mock the SnapshotStore using a dictionary of blobs per (session id, key).

    * fail=True makes every call raise a SnapshotStoreError (network down)
    * gate: when set, get() waits for the event after reading the value (simulates a slow fetch)
    """

    def __init__(self) -> None:
        self.blobs: dict[tuple[int, str], str] = {}
        self.fail = False
        self.gate: Optional[asyncio.Event] = None
        self.fetch_started: Optional[asyncio.Event] = None
        self.get_calls = 0
        self.put_calls: list[tuple[int, str, str]] = []

    async def get(self, session_id: int, key: str) -> str | None:
        self.get_calls += 1
        if self.fail:
            raise SnapshotStoreError("store unreachable")
        value = self.blobs.get((session_id, key))
        if self.gate is not None:
            if self.fetch_started is not None:
                self.fetch_started.set()
            await self.gate.wait()
        return value

    async def put(self, session_id: int, key: str, value: str) -> None:
        if self.fail:
            raise SnapshotStoreError("store unreachable")
        self.put_calls.append((session_id, key, value))
        self.blobs[(session_id, key)] = value

    async def delete(self, session_id: int, key: str) -> None:
        if self.fail:
            raise SnapshotStoreError("store unreachable")
        self.blobs.pop((session_id, key), None)


@pytest.fixture
def snapshot_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def rules() -> ChessRules:
    return ChessRules()


@pytest.fixture
def fixed_clock():
    """Deterministic timestamps for history entries."""
    moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return lambda: moment
