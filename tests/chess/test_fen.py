"""Unit tests for boardsync/chess/fen.py"""

import pytest

from boardsync.chess.fen import (
    FENState,
    find_fen_problem,
    is_valid_castling_rights,
    is_valid_en_passant,
    is_valid_fen,
)
from boardsync.chess.pieces import Piece, PieceType
from boardsync.chess.square import Square
from boardsync.core.exceptions import InvalidFENError
from boardsync.core.models import STARTING_FEN
from boardsync.core.shared_types import Side


def test_parse_starting_position() -> None:
    state = FENState.from_fen(STARTING_FEN)

    assert state.side_to_move == Side.WHITE
    assert state.castling_rights == "KQkq"
    assert state.en_passant_square is None
    assert state.half_move_clock == 0
    assert state.full_move_number == 1
    assert len(state.board.pieces) == 32
    assert state.board.piece(Square.from_algebraic("e1")) == Piece(PieceType.KING, Side.WHITE)
    assert state.board.piece(Square.from_algebraic("d8")) == Piece(PieceType.QUEEN, Side.BLACK)


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9",
        "8/8/8/4k3/8/8/8/4K3 w - - 0 1",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert FENState.from_fen(fen).to_fen() == fen


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        "rnbqkbnr/pppppppp/44/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w QK - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e4 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - a 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQQBNR w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBKKBNR w KQkq - 0 1",
        "Pnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN² w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - ² 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 ١",
        "not a fen at all",
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)
    assert find_fen_problem(fen) is not None
    with pytest.raises(InvalidFENError):
        FENState.from_fen(fen)


@pytest.mark.parametrize(
    "castling, expected",
    [
        ("-", True),
        ("KQkq", True),
        ("Kq", True),
        ("k", True),
        ("", False),
        ("qk", False),
        ("KK", False),
        ("KQx", False),
    ],
)
def test_castling_encoding(castling: str, expected: bool) -> None:
    assert is_valid_castling_rights(castling) is expected


def test_en_passant_rank_depends_on_side_to_move() -> None:
    assert is_valid_en_passant("e3", "b")
    assert is_valid_en_passant("d6", "w")
    assert not is_valid_en_passant("e3", "w")
    assert not is_valid_en_passant("z9", "b")


def test_empty_castling_rights_written_as_dash() -> None:
    state = FENState.from_fen("8/8/8/4k3/8/8/8/4K3 w - - 0 1")
    assert state.castling_rights == ""
    assert not state.has_castling_right("K")
    assert state.to_fen().split(" ")[2] == "-"


def test_non_ascii_digits_raise_invalid_fen() -> None:
    with pytest.raises(InvalidFENError):
        FENState.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - ² 1")
    with pytest.raises(InvalidFENError):
        FENState.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN² w KQkq - 0 1")
