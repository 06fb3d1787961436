"""
Versioned wrapper around a persisted / synced GameState.

Wire format: {"version": 0, "state": {"game": <GameState>}}
Only version 0 is understood. Any other version is rejected before `state` is looked at.
"""

from pydantic import BaseModel, StrictInt, ValidationError

from boardsync.core.exceptions import EnvelopeError, UnsupportedVersionError
from boardsync.core.models import GameState

ENVELOPE_VERSION = 0


class EnvelopeHeader(BaseModel):
    """Just enough to decide whether the rest can be read."""

    version: StrictInt


class PersistedState(BaseModel):
    game: GameState


class Envelope(BaseModel):
    version: StrictInt = ENVELOPE_VERSION
    state: PersistedState


def snapshot_key(session_id: int | str) -> str:
    """Name under which a session's game is stored."""
    return f"game-{session_id}"


def encode_envelope(game: GameState) -> str:
    envelope = Envelope(state=PersistedState(game=game))
    return envelope.model_dump_json(by_alias=True)


def decode_envelope(blob: str) -> GameState:
    """Raises UnsupportedVersionError for an unknown version and EnvelopeError for anything malformed."""
    try:
        header = EnvelopeHeader.model_validate_json(blob)
    except ValidationError as exc:
        raise EnvelopeError(f"Malformed snapshot envelope: {exc}") from exc

    if header.version != ENVELOPE_VERSION:
        raise UnsupportedVersionError(
            f"Unsupported snapshot version {header.version} (expected {ENVELOPE_VERSION})"
        )

    try:
        return Envelope.model_validate_json(blob).state.game
    except ValidationError as exc:
        raise EnvelopeError(f"Malformed game state in snapshot: {exc}") from exc
