"""Unit tests for boardsync/db/sql_repository.py"""

import pytest
from sqlalchemy.orm import Session

from boardsync.core.exceptions import SessionNotFoundError
from boardsync.db.sql_repository import SQLSnapshotRepository


def test_create_session(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    first = repo.create_session()
    second = repo.create_session()
    assert first != second


def test_put_and_get_state(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    session_id = repo.create_session()

    assert repo.get_state(session_id, "game-1") is None
    repo.put_state(session_id, "game-1", "first")
    repo.put_state(session_id, "other", "kept")
    repo.put_state(session_id, "game-1", "second")

    assert repo.get_state(session_id, "game-1") == "second"
    assert repo.get_state(session_id, "other") == "kept"


def test_state_is_persisted_across_db_sessions(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    session_id = repo.create_session()
    repo.put_state(session_id, "game-1", "blob")

    db_session_repo.expire_all()
    assert SQLSnapshotRepository(db_session_repo).get_state(session_id, "game-1") == "blob"


def test_delete_state(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    session_id = repo.create_session()
    repo.put_state(session_id, "game-1", "blob")
    repo.put_state(session_id, "other", "kept")

    repo.delete_state(session_id, "game-1")
    repo.delete_state(session_id, "never-stored")

    assert repo.get_state(session_id, "game-1") is None
    assert repo.get_state(session_id, "other") == "kept"


def test_unknown_session(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    with pytest.raises(SessionNotFoundError):
        repo.get_state(999, "game-999")
    with pytest.raises(SessionNotFoundError):
        repo.put_state(999, "game-999", "blob")
    with pytest.raises(SessionNotFoundError):
        repo.delete_state(999, "game-999")
