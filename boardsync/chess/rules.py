"""
Default RulesEngine implementation: standard chess.

Stateless: every call starts again from the FEN string. A consequence is that threefold repetition can never be
detected here (it needs the game's history), the same as with any engine that gets loaded from a bare FEN.
"""

from boardsync.chess.fen import FENState
from boardsync.chess.moves import Move, has_legal_move, legal_moves, play
from boardsync.chess.pieces import FEN_TO_PIECE, PieceType
from boardsync.chess.square import Square, is_valid_square
from boardsync.core.exceptions import IllegalMoveError
from boardsync.core.models import ProposedMove, StatusFlags

# 50 moves by each player without a capture or a pawn move
FIFTY_MOVE_RULE_HALF_MOVES = 100


def is_insufficient_material(state: FENState) -> bool:
    """
    Neither side can ever deliver mate:
    * king vs king
    * king + a single knight or bishop vs king
    * kings + bishops only, all bishops on the same square color
    """
    others = [
        (square, piece)
        for square, piece in state.board.pieces.items()
        if piece.type != PieceType.KING
    ]
    if not others:
        return True
    if len(others) == 1:
        return others[0][1].type in (PieceType.KNIGHT, PieceType.BISHOP)
    if all(piece.type == PieceType.BISHOP for _, piece in others):
        return len({square.is_light for square, _ in others}) == 1
    return False


class ChessRules:
    """Chess rules for the state machine."""

    def parse(self, fen: str) -> FENState:
        return FENState.from_fen(fen)

    def derive_flags(self, fen: str) -> StatusFlags:
        return self._flags(self.parse(fen))

    def validate_and_apply(
        self, fen: str, move: ProposedMove
    ) -> tuple[str, StatusFlags]:
        state = self.parse(fen)
        matched = self._match_legal_move(state, move)
        new_state = play(state, matched)
        return new_state.to_fen(), self._flags(new_state)

    def legal_moves(self, fen: str) -> list[str]:
        """All legal moves in UCI notation (convenience for callers that want to show them)."""
        return [move.to_uci() for move in legal_moves(self.parse(fen))]

    def _match_legal_move(self, state: FENState, proposed: ProposedMove) -> Move:
        """
        Find the generated move that matches the request.

        The promotion piece only matters for a pawn move onto the last rank: it is required there
        and ignored for every other move.
        """
        if not (is_valid_square(proposed.from_square) and is_valid_square(proposed.to_square)):
            raise IllegalMoveError(
                f"Not a square on the board: {proposed.from_square!r} -> {proposed.to_square!r}"
            )
        promotion = proposed.promotion.lower() if proposed.promotion else None
        if promotion is not None and promotion not in FEN_TO_PIECE:
            raise IllegalMoveError(f"Unknown promotion piece: {proposed.promotion!r}")

        from_square = Square.from_algebraic(proposed.from_square)
        to_square = Square.from_algebraic(proposed.to_square)
        for move in legal_moves(state):
            if move.from_square != from_square or move.to_square != to_square:
                continue
            if move.promote_to is None or move.promote_to.value == promotion:
                return move
        raise IllegalMoveError(
            f"Move not allowed: {proposed.from_square}{proposed.to_square}{promotion or ''}"
        )

    def _flags(self, state: FENState) -> StatusFlags:
        is_check = state.board.is_check(state.side_to_move)
        can_move = has_legal_move(state)
        is_checkmate = is_check and not can_move
        is_stalemate = not is_check and not can_move
        is_draw = (
            is_stalemate
            or state.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES
            or is_insufficient_material(state)
        )
        return StatusFlags(
            is_check=is_check,
            is_checkmate=is_checkmate,
            is_stalemate=is_stalemate,
            is_draw=is_draw,
        )
