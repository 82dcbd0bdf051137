"""Participant roles inside a lobby."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """The role a participant plays in a lobby."""

    ADMIN = "Admin"
    PLAYER = "Player"
    OBSERVER = "Observer"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Parse a role name; unknown names fall back to PLAYER."""
        try:
            return cls(value)
        except ValueError:
            return cls.PLAYER

    @classmethod
    def default(cls) -> "Role":
        """Return the default role."""
        return cls.PLAYER