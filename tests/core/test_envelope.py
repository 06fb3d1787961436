"""Unit tests for boardsync/core/envelope.py and the wire form of boardsync/core/models.py"""

import json
from datetime import datetime, timezone

import pytest

from boardsync.core.envelope import decode_envelope, encode_envelope, snapshot_key
from boardsync.core.exceptions import EnvelopeError, UnsupportedVersionError
from boardsync.core.models import GameState, HistoryEntry, User
from boardsync.core.shared_types import Role, Side

GAME = GameState(
    users=(User(name="ann", role=Role.WHITE), User(name="eve", role=Role.SPECTATOR)),
    fen="rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
    turn=Side.BLACK,
    history=(
        HistoryEntry(
            by=Side.WHITE,
            from_square="e2",
            to_square="e4",
            prev_fen="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        ),
    ),
)


def test_snapshot_key() -> None:
    assert snapshot_key(7) == "game-7"


def test_encoded_envelope_uses_wire_names() -> None:
    data = json.loads(encode_envelope(GAME))

    assert data["version"] == 0
    game = data["state"]["game"]
    assert game["fen"] == GAME.fen
    assert game["turn"] == "b"
    assert game["isCheck"] is False
    assert game["isGameOver"] is False
    assert game["users"] == [{"name": "ann", "turn": "w"}, {"name": "eve", "turn": "s"}]
    entry = game["history"][0]
    assert entry["from"] == "e2"
    assert entry["to"] == "e4"
    assert entry["by"] == "w"
    assert entry["prevFen"] == GAME.history[0].prev_fen


def test_decode_encoded_envelope() -> None:
    assert decode_envelope(encode_envelope(GAME)) == GAME


def test_decode_snapshot_written_by_another_client() -> None:
    blob = json.dumps(
        {
            "version": 0,
            "state": {
                "game": {
                    "users": [{"name": "bob", "turn": "b"}],
                    "fen": "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
                    "turn": "w",
                    "history": [],
                    "isCheck": False,
                    "isCheckmate": False,
                    "isStalemate": False,
                    "isDraw": False,
                    "isGameOver": False,
                }
            },
        }
    )
    game = decode_envelope(blob)
    assert game.users == (User(name="bob", role=Role.BLACK),)
    assert game == GameState.initial(users=game.users)


@pytest.mark.parametrize("version", [1, -1, 2])
def test_unsupported_version_is_rejected(version: int) -> None:
    # state is not even looked at
    blob = json.dumps({"version": version, "state": "garbage"})
    with pytest.raises(UnsupportedVersionError):
        decode_envelope(blob)


@pytest.mark.parametrize(
    "blob",
    [
        "{not json",
        "[]",
        json.dumps({"state": {"game": {}}}),
        json.dumps({"version": "0", "state": {"game": {}}}),
        json.dumps({"version": 0}),
        json.dumps({"version": 0, "state": {"game": {"turn": "x"}}}),
    ],
)
def test_malformed_envelope_is_rejected(blob: str) -> None:
    with pytest.raises(EnvelopeError):
        decode_envelope(blob)
