"""Protocol snapshot store (client side persistence: HTTP by default, anything with the same three calls works)."""

from typing import Protocol


class SnapshotStore(Protocol):
    """Keyed blob storage scoped to a session. Every call raises SnapshotStoreError when the transport fails."""

    async def get(self, session_id: int, key: str) -> str | None:
        """The stored blob, or None if nothing is stored under the key."""
        ...

    async def put(self, session_id: int, key: str, value: str) -> None:
        """Store (overwrite) the blob under the key."""
        ...

    async def delete(self, session_id: int, key: str) -> None:
        """Remove the blob under the key, if any."""
        ...
