"""Implementation of (Snapshot)Repository using SQLAlchemy"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from boardsync.core.exceptions import SessionNotFoundError
from boardsync.db.schema import DBSession

logger = logging.getLogger(__name__)


class SQLSnapshotRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def create_session(self) -> int:
        session_db = DBSession(data={})
        self.db.add(session_db)
        self.db.commit()
        self.db.refresh(session_db)
        logger.info("Created session %s", session_db.id)
        return session_db.id

    def get_state(self, session_id: int, name: str) -> str | None:
        session_db = self._fetch_session(session_id)
        return (session_db.data or {}).get(name)

    def put_state(self, session_id: int, name: str, state: str) -> None:
        session_db = self._fetch_session(session_id)
        # assign a new dict, the JSON column does not track in-place mutations
        session_db.data = {**(session_db.data or {}), name: state}
        self.db.commit()

    def delete_state(self, session_id: int, name: str) -> None:
        session_db = self._fetch_session(session_id)
        data = dict(session_db.data or {})
        if name not in data:
            return
        del data[name]
        session_db.data = data
        self.db.commit()

    def _fetch_session(self, session_id: int) -> DBSession:
        query = select(DBSession).where(DBSession.id == session_id)
        session_db = self.db.scalar(query)
        if session_db is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return session_db
