"""
Custom exceptions shared by all layers.

Everything derives from GameError, so callers that only care about "something in boardsync went wrong"
can catch a single type.
"""


class GameError(Exception):
    """Top-level exception for this application."""


# --- RULES ENGINE ---
class InvalidFENError(GameError):
    """The string cannot be interpreted as a (legal) FEN position."""


class IllegalMoveError(GameError):
    """The rules engine rejected the proposed move."""


# --- PERSISTENCE / TRANSPORT ---
class SnapshotStoreError(GameError):
    """Reading, writing or deleting a snapshot failed (network error or non-success status)."""


class RepositoryError(GameError):
    """Server side persistence failure."""


class SessionNotFoundError(RepositoryError):
    """No session is stored under the requested id."""


# --- WIRE FORMAT ---
class EnvelopeError(GameError):
    """A stored snapshot could not be decoded."""


class UnsupportedVersionError(EnvelopeError):
    """The snapshot envelope carries a version this client does not understand."""
