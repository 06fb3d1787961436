"""The Board holds the placement of the pieces and answers geometric questions about it (attacks, checks)."""

from dataclasses import dataclass, field
from typing import Optional, Self

from boardsync.chess.pieces import FEN_TO_PIECE, Piece, PieceType
from boardsync.chess.square import BOARD_DIMENSIONS, Square
from boardsync.core.shared_types import Side

Vector = tuple[int, int]

KNIGHT_DELTAS: tuple[Vector, ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)
KING_DELTAS: tuple[Vector, ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)
DIAGONALS: tuple[Vector, ...] = ((1, 1), (-1, 1), (1, -1), (-1, -1))
STRAIGHTS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def pawn_direction(color: Side) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Side.WHITE else -1


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = placement.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        previous_was_digit = False
        for character in rank_fen:
            if character.isascii() and character.isdigit():
                # two digits in a row ("44") is not a valid encoding, neither is "0" or "9"
                if previous_was_digit or not 1 <= int(character) <= num_files:
                    return False
                file_count += int(character)
                previous_was_digit = True
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
                previous_was_digit = False
            else:
                return False

        if file_count != num_files:
            return False
    return True


@dataclass(frozen=True)
class Board:
    """Only occupied squares are stored."""

    pieces: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def from_fen(cls, placement: str) -> Self:
        """Construct a board from the first part of a FEN string.

        ex. standard starting position: rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        * read from the 8th rank down to the 1st rank, ranks separated by slashes
        * within a rank read from the a-file to the h-file
        * a digit denotes that many consecutive empty squares
        """
        pieces: dict[Square, Piece] = {}
        for rank_idx, rank_fen in enumerate(placement.split("/")):
            rank = BOARD_DIMENSIONS[1] - rank_idx
            file = 1
            for character in rank_fen:
                if character.isascii() and character.isdigit():
                    file += int(character)
                else:
                    pieces[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
        return cls(pieces)

    def to_fen(self) -> str:
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())
        if empty_count:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Optional[Piece]:
        return self.pieces.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.pieces

    def locate(self, piece: Piece) -> list[Square]:
        return [square for square, other in self.pieces.items() if other == piece]

    def locate_color(self, color: Side) -> list[Square]:
        return [square for square, piece in self.pieces.items() if piece.color == color]

    def king_square(self, color: Side) -> Optional[Square]:
        kings = self.locate(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    def moved(
        self,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
        captured_square: Optional[Square] = None,
    ) -> "Board":
        """New board after moving one piece. captured_square is only needed when it differs from to_square (en passant)."""
        pieces = dict(self.pieces)
        moving_piece = pieces.pop(from_square)
        if captured_square is not None:
            pieces.pop(captured_square, None)
        if promote_to is not None:
            moving_piece = Piece(promote_to, moving_piece.color)
        pieces[to_square] = moving_piece
        return Board(pieces)

    # --- ATTACKS ---
    def is_attacked(self, square: Square, by: Side) -> bool:
        """Look outwards from the square for any piece of color `by` that has line of sight onto it."""
        # pawns attack diagonally forward, so look diagonally *backwards* from the target square
        for d_file in (1, -1):
            origin = square.offset(d_file, -pawn_direction(by))
            if self.piece(origin) == Piece(PieceType.PAWN, by):
                return True

        if self._any_single_step(square, KNIGHT_DELTAS, Piece(PieceType.KNIGHT, by)):
            return True
        if self._any_single_step(square, KING_DELTAS, Piece(PieceType.KING, by)):
            return True

        diagonal_sliders = {PieceType.BISHOP, PieceType.QUEEN}
        straight_sliders = {PieceType.ROOK, PieceType.QUEEN}
        return self._any_slider(square, DIAGONALS, diagonal_sliders, by) or (
            self._any_slider(square, STRAIGHTS, straight_sliders, by)
        )

    def is_any_attacked(self, squares: list[Square], by: Side) -> bool:
        return any(self.is_attacked(square, by) for square in squares)

    def is_check(self, color: Side) -> bool:
        """Is the king of `color` under attack?"""
        king = self.king_square(color)
        return king is not None and self.is_attacked(king, color.opponent)

    def _any_single_step(
        self, square: Square, deltas: tuple[Vector, ...], attacker: Piece
    ) -> bool:
        return any(self.piece(square.offset(*delta)) == attacker for delta in deltas)

    def _any_slider(
        self,
        square: Square,
        directions: tuple[Vector, ...],
        types: set[PieceType],
        by: Side,
    ) -> bool:
        for d_file, d_rank in directions:
            target = square.offset(d_file, d_rank)
            while target.is_within_bounds():
                piece = self.piece(target)
                if piece is not None:
                    if piece.color == by and piece.type in types:
                        return True
                    break
                target = target.offset(d_file, d_rank)
        return False
