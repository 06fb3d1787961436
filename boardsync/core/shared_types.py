"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    """Side to move. Values are the FEN active color codes."""

    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self == Side.WHITE else Side.WHITE


class Role(StrEnum):
    """Role of a participant in a session. Spectators only watch."""

    WHITE = "w"
    BLACK = "b"
    SPECTATOR = "s"
