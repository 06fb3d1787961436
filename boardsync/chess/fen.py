"""
Parsing and writing FEN strings.

FEN, or Forsyth-Edwards Notation, describes a position completely:

<board placement> <active color> <castling rights> <en passant square> <half move clock> <full move number>

ex) The standard starting position:
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
"""

from dataclasses import dataclass
from typing import Optional, Self

from boardsync.chess.board import Board, is_valid_placement
from boardsync.chess.pieces import Piece, PieceType
from boardsync.chess.square import BOARD_DIMENSIONS, Square, is_valid_square
from boardsync.core.exceptions import InvalidFENError
from boardsync.core.models import STARTING_FEN
from boardsync.core.shared_types import Side

# Order in which the castling rights are always written
CASTLING_ORDER = "KQkq"


def is_valid_color_code(color: str) -> bool:
    return color in {side.value for side in Side}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a non-empty subsequence of 'KQkq' (so no duplicates and canonical order)."""
    if castling == "-":
        return True
    if not castling:
        return False
    remaining = CASTLING_ORDER
    for character in castling:
        position = remaining.find(character)
        if position < 0:
            return False
        remaining = remaining[position + 1 :]
    return True


def is_valid_en_passant(en_passant: str, active_color: str) -> bool:
    """The en passant square sits behind a pawn that just made a double push: rank 3 if black to move, rank 6 otherwise."""
    if en_passant == "-":
        return True
    if not is_valid_square(en_passant):
        return False
    expected_rank = "6" if active_color == Side.WHITE else "3"
    return en_passant[1] == expected_rank


def is_valid_move_counter(counter: str) -> bool:
    return counter.isascii() and counter.isdigit()


def find_fen_problem(fen: str) -> Optional[str]:
    """Describe what is wrong with the FEN, or None if it can be played from."""
    parts = fen.split(" ")
    if len(parts) != 6:
        return "FEN must contain 6 space-separated parts"

    placement, color, castling, en_passant, half_moves, full_moves = parts
    if not is_valid_placement(placement):
        return f"invalid piece placement {placement!r}"
    if not is_valid_color_code(color):
        return f"invalid active color {color!r}"
    if not is_valid_castling_rights(castling):
        return f"invalid castling rights {castling!r}"
    if not is_valid_en_passant(en_passant, color):
        return f"invalid en passant square {en_passant!r}"
    if not (is_valid_move_counter(half_moves) and is_valid_move_counter(full_moves)):
        return "move counters must be non-negative integers"
    if int(full_moves) < 1:
        return "full move number must start at 1"

    board = Board.from_fen(placement)
    for side in Side:
        if len(board.locate(Piece(PieceType.KING, side))) != 1:
            return f"there must be exactly one {side.name.lower()} king"

    back_ranks = (1, BOARD_DIMENSIONS[1])
    for square, piece in board.pieces.items():
        if piece.type == PieceType.PAWN and square.rank in back_ranks:
            return f"pawn on back rank {square.to_algebraic()}"
    return None


def is_valid_fen(fen: str) -> bool:
    return find_fen_problem(fen) is None


@dataclass(frozen=True)
class FENState:
    """Data that can be constructed from a FEN string."""

    board: Board
    side_to_move: Side
    castling_rights: str
    en_passant_square: Optional[Square]
    half_move_clock: int
    full_move_number: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        problem = find_fen_problem(fen)
        if problem:
            raise InvalidFENError(f"Cannot interpret {fen!r} as FEN: {problem}")

        placement, color, castling, en_passant, half_moves, full_moves = fen.split(" ")
        return cls(
            board=Board.from_fen(placement),
            side_to_move=Side(color),
            castling_rights="" if castling == "-" else castling,
            en_passant_square=(
                Square.from_algebraic(en_passant) if en_passant != "-" else None
            ),
            half_move_clock=int(half_moves),
            full_move_number=int(full_moves),
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        en_passant = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return " ".join(
            [
                self.board.to_fen(),
                self.side_to_move.value,
                self.castling_rights or "-",
                en_passant,
                str(self.half_move_clock),
                str(self.full_move_number),
            ]
        )

    def has_castling_right(self, right: str) -> bool:
        return right in self.castling_rights
