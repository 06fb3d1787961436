"""Protocol rules engine (the state machine only needs these three capabilities, ChessRules is the default)."""

from typing import Protocol

from boardsync.chess.fen import FENState
from boardsync.core.models import ProposedMove, StatusFlags


class RulesEngine(Protocol):
    """Pure and synchronous. Illegality is signalled with the exceptions from boardsync.core.exceptions."""

    def parse(self, fen: str) -> FENState:
        """Parse a position, raise InvalidFENError if it cannot be played from."""
        ...

    def derive_flags(self, fen: str) -> StatusFlags:
        """Check / checkmate / stalemate / draw for the side to move."""
        ...

    def validate_and_apply(
        self, fen: str, move: ProposedMove
    ) -> tuple[str, StatusFlags]:
        """The position after the move + its flags. Raise IllegalMoveError if the move is not allowed."""
        ...
