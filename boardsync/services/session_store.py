"""
Orchestration of one client's session: state machine + roster in, snapshot store out.

The SessionStore is the only mutation surface the rest of the system calls. Every successful mutation is written
to the snapshot store as a detached task ("fire and forget"): a failed write is logged and otherwise ignored,
the next mutation simply writes again.
"""

import asyncio
import logging
from typing import Optional

from boardsync.chess.engine import RulesEngine
from boardsync.chess.rules import ChessRules
from boardsync.core.envelope import decode_envelope, encode_envelope, snapshot_key
from boardsync.core.exceptions import EnvelopeError, SnapshotStoreError
from boardsync.core.models import GameState, User
from boardsync.db.snapshot_store import SnapshotStore
from boardsync.game.roster import Roster
from boardsync.game.state_machine import Clock, GameStateMachine, utc_now

logger = logging.getLogger(__name__)


async def fetch_game(store: SnapshotStore, session_id: int) -> Optional[GameState]:
    """
    Read + decode the session's snapshot. None if nothing is stored yet.
    Raises SnapshotStoreError (transport) or EnvelopeError (unsupported version / malformed blob).
    """
    blob = await store.get(session_id, snapshot_key(session_id))
    if blob is None:
        return None
    return decode_envelope(blob)


class SessionStore:
    def __init__(
        self,
        session_id: int,
        store: SnapshotStore,
        rules: Optional[RulesEngine] = None,
        game: Optional[GameState] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.session_id = session_id
        self.key = snapshot_key(session_id)
        self.store = store
        self.machine = GameStateMachine(rules or ChessRules(), game, clock)
        self._pending_writes: set[asyncio.Task[None]] = set()

    @classmethod
    async def open(
        cls,
        session_id: int,
        store: SnapshotStore,
        rules: Optional[RulesEngine] = None,
        clock: Clock = utc_now,
    ) -> "SessionStore":
        """Start from the persisted snapshot if there is a readable one, otherwise from a new game."""
        game: Optional[GameState] = None
        try:
            game = await fetch_game(store, session_id)
        except (SnapshotStoreError, EnvelopeError) as exc:
            logger.warning(
                "Could not restore session %s, starting a new game: %s", session_id, exc
            )
        if game is not None:
            logger.info("Restored session %s from snapshot", session_id)
        return cls(session_id, store, rules, game, clock)

    @property
    def game(self) -> GameState:
        return self.machine.state

    @property
    def roster(self) -> Roster:
        return Roster(self.game.users)

    # --- MUTATIONS ---
    def make_move(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> bool:
        accepted = self.machine.apply_move(from_square, to_square, promotion)
        if accepted:
            self._persist()
        return accepted

    def reset_game(self) -> None:
        self.machine.reset()
        self._persist()

    def load_game(self, fen: str) -> bool:
        loaded = self.machine.load(fen)
        if loaded:
            self._persist()
        return loaded

    def undo_move(self) -> None:
        before = self.game
        self.machine.undo()
        if self.game is not before:
            self._persist()

    def add_user(self, user: User) -> None:
        roster = self.roster.upsert(user)
        self.machine.commit(self.game.model_copy(update={"users": roster.users}))
        self._persist()

    def remove_user(self, name: str) -> None:
        roster = self.roster.remove(name)
        self.machine.commit(self.game.model_copy(update={"users": roster.users}))
        self._persist()

    def replace_game(self, game: GameState) -> None:
        """Overwrite the local game with a fetched one (sync path). Not written back to the store."""
        self.machine.commit(game)

    # --- PERSISTENCE ---
    async def clear(self) -> None:
        """Remove the persisted snapshot. Local state is left alone."""
        try:
            await self.store.delete(self.session_id, self.key)
        except SnapshotStoreError as exc:
            logger.warning("Error removing snapshot %s: %s", self.key, exc)

    async def flush(self) -> None:
        """Wait until all writes issued so far have finished (they never raise)."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    async def close(self) -> None:
        await self.flush()

    def _persist(self) -> None:
        blob = encode_envelope(self.game)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "No running event loop, snapshot %s was not written", self.key
            )
            return
        task = loop.create_task(self._write(blob))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write(self, blob: str) -> None:
        try:
            await self.store.put(self.session_id, self.key, blob)
        except SnapshotStoreError as exc:
            logger.warning("Error saving snapshot %s: %s", self.key, exc)
        except Exception:
            logger.exception("Unexpected error saving snapshot %s", self.key)
