"""
The GameStateMachine owns the local GameState of one session and is the only place where it gets replaced.

Every operation is total: a rejected move or an unparseable FEN is logged and leaves the state exactly as it was.
The state is an immutable value, so "replace the slot" is the commit and nothing can ever observe a half-applied move.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from boardsync.chess.engine import RulesEngine
from boardsync.core.exceptions import GameError
from boardsync.core.models import GameState, HistoryEntry, ProposedMove

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameStateMachine:
    def __init__(
        self,
        rules: RulesEngine,
        state: Optional[GameState] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.rules = rules
        self.clock = clock
        self._state = state if state is not None else GameState.initial()

    @property
    def state(self) -> GameState:
        return self._state

    def commit(self, state: GameState) -> GameState:
        """Single assignment point of the slot. Returns the previous value."""
        previous = self._state
        self._state = state
        return previous

    def apply_move(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> bool:
        """
        Attempt a move
        ----

        1. let the rules engine validate + apply it to the current position
        2. remember the position before the move in the history
        3. flip the turn and take over the flags of the new position

        The roster is carried over untouched.
        """
        prev = self._state
        move = ProposedMove(from_square, to_square, promotion)
        try:
            new_fen, flags = self.rules.validate_and_apply(prev.fen, move)
        except GameError as exc:
            logger.warning("Invalid move %s-%s: %s", from_square, to_square, exc)
            return False
        except Exception:
            logger.exception("Rules engine failed on move %s-%s", from_square, to_square)
            return False

        entry = HistoryEntry(
            by=prev.turn,
            from_square=from_square,
            to_square=to_square,
            prev_fen=prev.fen,
            at=self.clock(),
        )
        self.commit(
            prev.with_flags(
                flags,
                fen=new_fen,
                turn=prev.turn.opponent,
                history=prev.history + (entry,),
            )
        )
        return True

    def reset(self) -> None:
        """Back to the starting position. The users stay."""
        self.commit(GameState.initial(users=self._state.users))

    def load(self, fen: str) -> bool:
        """
        Replace the position with the given FEN and clear the history.

        NOTE: the turn is flipped relative to the current turn, it is NOT read from the FEN's active color.
        """
        prev = self._state
        try:
            self.rules.parse(fen)
            flags = self.rules.derive_flags(fen)
        except GameError as exc:
            logger.warning("Invalid FEN %r: %s", fen, exc)
            return False
        except Exception:
            logger.exception("Rules engine failed to load FEN %r", fen)
            return False

        self.commit(
            prev.with_flags(flags, fen=fen, history=(), turn=prev.turn.opponent)
        )
        return True

    def undo(self) -> None:
        """Take back the last move. Nothing happens when there is no history."""
        prev = self._state
        if not prev.history:
            return

        last = prev.history[-1]
        try:
            flags = self.rules.derive_flags(last.prev_fen)
        except Exception:
            logger.exception("Cannot restore position %r, undo abandoned", last.prev_fen)
            return

        self.commit(
            prev.with_flags(
                flags,
                fen=last.prev_fen,
                turn=prev.turn.opponent,
                history=prev.history[:-1],
            )
        )
