"""Small capability interfaces shared by players, activities and results."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Identifiable(ABC):
    """Something that carries a string identifier."""

    @abstractmethod
    def identifier(self) -> str:
        """Return the identifier."""


class Named(ABC):
    """Something that has a display name."""

    @abstractmethod
    def name(self) -> str:
        """Return the display name."""


class Scorable:
    """Something that can report a score; zero unless overridden."""

    def score(self) -> int:
        return 0


class Timable:
    """Something that can report the time it took; zero unless overridden."""

    def time_taken(self) -> int:
        return 0