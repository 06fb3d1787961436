"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from boardsync.core.shared_types import Side


class PieceType(Enum):
    """Values are the (lower case) FEN characters."""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


FEN_TO_PIECE: dict[str, PieceType] = {piece.value: piece for piece in PieceType}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Side

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Side.WHITE if character.isupper() else Side.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return self.type.value.upper() if self.color == Side.WHITE else self.type.value
