"""Participants of a session. The name is the identity, a second upsert with the same name only changes the role."""

from dataclasses import dataclass
from typing import Iterator, Optional

from boardsync.core.models import User


@dataclass(frozen=True)
class Roster:
    users: tuple[User, ...] = ()

    def __iter__(self) -> Iterator[User]:
        return iter(self.users)

    def __len__(self) -> int:
        return len(self.users)

    def get(self, name: str) -> Optional[User]:
        return next((user for user in self.users if user.name == name), None)

    def upsert(self, user: User) -> "Roster":
        """Replace the user with the same name in place (ordering preserved), or append."""
        if self.get(user.name) is None:
            return Roster(self.users + (user,))
        return Roster(
            tuple(user if existing.name == user.name else existing for existing in self.users)
        )

    def remove(self, name: str) -> "Roster":
        return Roster(tuple(user for user in self.users if user.name != name))
