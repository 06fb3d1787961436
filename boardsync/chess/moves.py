"""
Movement rules and move application.

Key idea: Use strategy pattern to define candidate move sets for each piece type.
A candidate move is only legal if it does not leave the own king in check (filtered in legal_moves).
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional, Self

from boardsync.chess.board import (
    DIAGONALS,
    KING_DELTAS,
    KNIGHT_DELTAS,
    STRAIGHTS,
    Board,
    Vector,
    pawn_direction,
)
from boardsync.chess.fen import FENState
from boardsync.chess.pieces import FEN_TO_PIECE, PROMOTION_TYPES, Piece, PieceType
from boardsync.chess.square import BOARD_DIMENSIONS, Square
from boardsync.core.shared_types import Side


@dataclass(frozen=True)
class CastlingSquares:
    """
    The squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, the king / rook should still be at their starting squares.
    """

    color: Side
    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(
        cls, color: Side, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> Self:
        return cls(
            color,
            Square.from_algebraic(k_from),
            Square.from_algebraic(k_to),
            Square.from_algebraic(r_from),
            Square.from_algebraic(r_to),
        )

    def between(self) -> list[Square]:
        """Squares between king and rook, they must all be empty."""
        low, high = sorted((self.king_from.file, self.rook_from.file))
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """Squares the king stands on or crosses, none of them may be under attack."""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file, self.king_to.file + step, step)
        ]


# Keys are the FEN castling characters
CASTLING_RULES: dict[str, CastlingSquares] = {
    "K": CastlingSquares.from_algebraic(Side.WHITE, "e1", "g1", "h1", "f1"),
    "Q": CastlingSquares.from_algebraic(Side.WHITE, "e1", "c1", "a1", "d1"),
    "k": CastlingSquares.from_algebraic(Side.BLACK, "e8", "g8", "h8", "f8"),
    "q": CastlingSquares.from_algebraic(Side.BLACK, "e8", "c8", "a8", "d8"),
}


@dataclass(frozen=True)
class Move:
    """A fully specified move. The special rules are resolved during generation."""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    castling: Optional[str] = None
    is_en_passant: bool = False

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface notation, ex. "e2e4" or "e7e8q" (pawn promotes to a queen).
        NOTE: Castling / En Passant are not encoded in UCI, match against generated moves to find those.
        """
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        return cls(
            Square.from_algebraic(uci[:2]), Square.from_algebraic(uci[2:4]), promote_to
        )

    def to_uci(self) -> str:
        piece_char = self.promote_to.value if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


CandidateMovesFn = Callable[[Square, FENState], list[Move]]


# --- MOVEMENT RULES ---
def raycasting_moves(
    square: Square, board: Board, directions: tuple[Vector, ...]
) -> list[Move]:
    """Slide along each direction until hitting the edge of the board or another piece (which can be captured if it is the opponent's)."""
    color = board.pieces[square].color
    moves: list[Move] = []
    for d_file, d_rank in directions:
        target = square.offset(d_file, d_rank)
        while target.is_within_bounds():
            occupant = board.piece(target)
            if occupant is None:
                moves.append(Move(square, target))
            else:
                if occupant.color != color:
                    moves.append(Move(square, target))
                break
            target = target.offset(d_file, d_rank)
    return moves


def single_step_moves(
    square: Square, board: Board, deltas: tuple[Vector, ...]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights."""
    color = board.pieces[square].color
    moves: list[Move] = []
    for delta in deltas:
        target = square.offset(*delta)
        if not target.is_within_bounds():
            continue
        occupant = board.piece(target)
        if occupant is None or occupant.color != color:
            moves.append(Move(square, target))
    return moves


def _with_promotions(from_square: Square, to_square: Square) -> list[Move]:
    """A pawn reaching the last rank becomes one move per piece type it can promote into."""
    if to_square.rank in (1, BOARD_DIMENSIONS[1]):
        return [Move(from_square, to_square, promote_to=piece) for piece in PROMOTION_TYPES]
    return [Move(from_square, to_square)]


def candidate_pawn_moves(square: Square, state: FENState) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, or two from its starting rank when both squares are free
    - takes diagonally (including en passant)
    """
    board = state.board
    color = board.pieces[square].color
    direction = pawn_direction(color)
    starting_rank = 2 if color == Side.WHITE else BOARD_DIMENSIONS[1] - 1
    moves: list[Move] = []

    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.extend(_with_promotions(square, one_step))
        two_steps = one_step.offset(0, direction)
        if square.rank == starting_rank and board.is_empty(two_steps):
            moves.append(Move(square, two_steps))

    for d_file in (1, -1):
        target = square.offset(d_file, direction)
        if not target.is_within_bounds():
            continue
        occupant = board.piece(target)
        if occupant is not None and occupant.color != color:
            moves.extend(_with_promotions(square, target))
        elif target == state.en_passant_square:
            moves.append(Move(square, target, is_en_passant=True))
    return moves


def candidate_knight_moves(square: Square, state: FENState) -> list[Move]:
    return single_step_moves(square, state.board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, state: FENState) -> list[Move]:
    return raycasting_moves(square, state.board, DIAGONALS)


def candidate_rook_moves(square: Square, state: FENState) -> list[Move]:
    return raycasting_moves(square, state.board, STRAIGHTS)


def candidate_queen_moves(square: Square, state: FENState) -> list[Move]:
    return raycasting_moves(square, state.board, DIAGONALS + STRAIGHTS)


def candidate_king_moves(square: Square, state: FENState) -> list[Move]:
    return single_step_moves(square, state.board, KING_DELTAS) + castling_moves(
        square, state
    )


def castling_moves(square: Square, state: FENState) -> list[Move]:
    """
    You are allowed to castle if
    * the castling right has not been revoked (and king + rook actually stand on their squares)
    * all squares between king and rook are empty
    * the king is not in check, and does not cross or land on an attacked square
    """
    board = state.board
    color = board.pieces[square].color
    moves: list[Move] = []
    for right, rule in CASTLING_RULES.items():
        if rule.color != color or not state.has_castling_right(right):
            continue
        if square != rule.king_from or board.piece(rule.rook_from) != Piece(
            PieceType.ROOK, color
        ):
            continue
        if not all(board.is_empty(between) for between in rule.between()):
            continue
        if board.is_any_attacked(rule.king_path(), color.opponent):
            continue
        moves.append(Move(rule.king_from, rule.king_to, castling=right))
    return moves


MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(state: FENState) -> list[Move]:
    color = state.side_to_move
    moves: list[Move] = []
    for square in state.board.locate_color(color):
        movement_rule = MOVEMENT_RULES[state.board.pieces[square].type]
        moves.extend(movement_rule(square, state))
    return moves


def legal_moves(state: FENState) -> list[Move]:
    """Keep those candidate moves that do not put (or leave) you in check."""
    color = state.side_to_move
    return [
        move
        for move in candidate_moves(state)
        if not play(state, move).board.is_check(color)
    ]


def has_legal_move(state: FENState) -> bool:
    color = state.side_to_move
    return any(
        not play(state, move).board.is_check(color) for move in candidate_moves(state)
    )


# --- APPLYING A MOVE ---
def play(state: FENState, move: Move) -> FENState:
    """
    The position after the move. No legality check here.

    1. update the board (castling moves the rook too, en passant removes the pawn behind the target square)
    2. revoke castling rights
    3. set the en passant square after a double pawn push, only when an enemy pawn could take
    4. update the move counters and the side to move
    """
    board = state.board
    color = state.side_to_move
    moving_piece = board.pieces[move.from_square]
    is_capture = not board.is_empty(move.to_square) or move.is_en_passant

    captured_square = None
    if move.is_en_passant:
        captured_square = Square(move.to_square.file, move.from_square.rank)
    new_board = board.moved(
        move.from_square, move.to_square, move.promote_to, captured_square
    )
    if move.castling:
        rule = CASTLING_RULES[move.castling]
        new_board = new_board.moved(rule.rook_from, rule.rook_to)

    en_passant_square = None
    is_pawn_move = moving_piece.type == PieceType.PAWN
    if (
        is_pawn_move
        and abs(move.to_square.rank - move.from_square.rank) == 2
        and _has_adjacent_pawn(new_board, move.to_square, color.opponent)
    ):
        en_passant_square = move.from_square.offset(0, pawn_direction(color))

    return replace(
        state,
        board=new_board,
        side_to_move=color.opponent,
        castling_rights=_remaining_castling_rights(state.castling_rights, move),
        en_passant_square=en_passant_square,
        half_move_clock=0 if is_pawn_move or is_capture else state.half_move_clock + 1,
        full_move_number=state.full_move_number + (1 if color == Side.BLACK else 0),
    )


def _has_adjacent_pawn(board: Board, square: Square, color: Side) -> bool:
    enemy_pawn = Piece(PieceType.PAWN, color)
    return any(board.piece(square.offset(d_file, 0)) == enemy_pawn for d_file in (-1, 1))


def _remaining_castling_rights(rights: str, move: Move) -> str:
    """A right is lost once its king or rook leaves its starting square, or the rook gets captured there."""
    touched = {move.from_square, move.to_square}
    return "".join(
        right
        for right in rights
        if not touched & {CASTLING_RULES[right].king_from, CASTLING_RULES[right].rook_from}
    )
