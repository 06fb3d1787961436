"""
Boundary layer data model(s).

These objects are shared by the rules engine, the state machine, the session store and the sync engine.
The JSON form of GameState is what ends up (wrapped in an Envelope) in the snapshot store, so the field aliases
are part of the wire format and must not change.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from boardsync.core.shared_types import Role, Side

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@dataclass(frozen=True)
class StatusFlags:
    """Terminal flags derived from a position by the rules engine."""

    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    is_draw: bool = False

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate or self.is_draw


@dataclass(frozen=True)
class ProposedMove:
    """A move as requested by a viewer: two squares in algebraic notation (+ optional promotion piece)."""

    from_square: str
    to_square: str
    promotion: Optional[str] = None


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in python. Immutable, so a new value is always committed as a whole."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class User(WireModel):
    name: str
    # stored under "turn" on the wire: w / b / s(pectator)
    role: Role = Field(alias="turn")


class HistoryEntry(WireModel):
    by: Side
    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    prev_fen: str
    at: datetime


class GameState(WireModel):
    users: tuple[User, ...] = ()
    fen: str = STARTING_FEN
    turn: Side = Side.WHITE
    history: tuple[HistoryEntry, ...] = ()
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    is_draw: bool = False
    is_game_over: bool = False

    @classmethod
    def initial(cls, users: tuple[User, ...] = ()) -> "GameState":
        """Starting position, empty history. The roster can be carried over (used by reset)."""
        return cls(users=users)

    @property
    def flags(self) -> StatusFlags:
        return StatusFlags(
            is_check=self.is_check,
            is_checkmate=self.is_checkmate,
            is_stalemate=self.is_stalemate,
            is_draw=self.is_draw,
        )

    def with_flags(self, flags: StatusFlags, **changes) -> "GameState":
        """Copy of this state with the given flags (isGameOver is always derived from the other three)."""
        return self.model_copy(
            update={
                **changes,
                "is_check": flags.is_check,
                "is_checkmate": flags.is_checkmate,
                "is_stalemate": flags.is_stalemate,
                "is_draw": flags.is_draw,
                "is_game_over": flags.is_game_over,
            }
        )
