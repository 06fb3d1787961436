"""
Keeps a session's local GameState approximately fresh relative to the remote snapshot.

There is no locking and no merge: whatever was fetched last replaces the local game (last-fetch-wins).
A move applied locally between two polls can therefore be overwritten by an older remote snapshot.
The policy lives behind MergePolicy so it can be swapped without touching the polling logic.
"""

import asyncio
import contextlib
import logging
from typing import Callable, Optional

from boardsync.core import config
from boardsync.core.exceptions import (
    EnvelopeError,
    SnapshotStoreError,
    UnsupportedVersionError,
)
from boardsync.core.models import GameState
from boardsync.db.snapshot_store import SnapshotStore
from boardsync.services.session_store import SessionStore, fetch_game

logger = logging.getLogger(__name__)

# (local, remote) -> value to keep
MergePolicy = Callable[[GameState, GameState], GameState]


def last_fetch_wins(local: GameState, remote: GameState) -> GameState:
    return remote


class SyncEngine:
    """
    Poll the snapshot store: once right away on start(), then every `interval` seconds.

    sync() is the manual trigger and runs the exact same routine as a poll tick.
    stop() cancels the polling task (once); a fetch that completes after stop() is discarded.
    """

    def __init__(
        self,
        session: SessionStore,
        store: Optional[SnapshotStore] = None,
        interval: float = config.SYNC_INTERVAL,
        merge: MergePolicy = last_fetch_wins,
    ) -> None:
        self.session = session
        self.store = store or session.store
        self.interval = interval
        self.merge = merge
        self.last_error: Optional[Exception] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._stopped = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._stopped:
            logger.warning("SyncEngine for session %s was stopped, not restarting", self.session.session_id)
            return
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._poll())

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def __aenter__(self) -> "SyncEngine":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def sync(self) -> bool:
        """Fetch, decode and overwrite. True if the local game was replaced."""
        if self._stopped:
            return False
        session_id = self.session.session_id
        try:
            remote = await fetch_game(self.store, session_id)
        except SnapshotStoreError as exc:
            return self._failed(exc, "Error fetching snapshot of session %s: %s")
        except UnsupportedVersionError as exc:
            return self._failed(exc, "Unsupported snapshot version for session %s: %s")
        except EnvelopeError as exc:
            return self._failed(exc, "Cannot decode snapshot of session %s: %s")
        except Exception as exc:
            logger.exception("Unexpected error syncing session %s", session_id)
            self.last_error = exc
            return False

        self.last_error = None
        if remote is None:
            return False
        if self._stopped:
            logger.debug("Discarding snapshot of session %s fetched after teardown", session_id)
            return False

        self.session.replace_game(self.merge(self.session.game, remote))
        return True

    async def _poll(self) -> None:
        while True:
            await self.sync()
            await asyncio.sleep(self.interval)

    def _failed(self, exc: Exception, message: str) -> bool:
        logger.warning(message, self.session.session_id, exc)
        self.last_error = exc
        return False
