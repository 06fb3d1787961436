"""Protocol repository for the snapshot service (server side persistence)"""

from typing import Protocol


class SnapshotRepository(Protocol):
    """Keyed blobs per session. Unknown session ids raise SessionNotFoundError."""

    def create_session(self) -> int:
        """Store a new, empty session and return its id."""
        ...

    def get_state(self, session_id: int, name: str) -> str | None:
        """The blob stored under `name`, or None."""
        ...

    def put_state(self, session_id: int, name: str, state: str) -> None:
        """Store (overwrite) the blob under `name`."""
        ...

    def delete_state(self, session_id: int, name: str) -> None:
        """Remove the blob under `name` (no-op if there is none)."""
        ...
