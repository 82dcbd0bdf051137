"""Results a player achieved in an activity."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


def _serialize(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


@dataclass
class ActivityResult(Generic[T]):
    """A player's result for one activity."""

    activity_id: str
    player_id: UUID
    data: T

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this result."""
        return {
            "activity_id": self.activity_id,
            "player_id": str(self.player_id),
            "data": _serialize(self.data),
        }