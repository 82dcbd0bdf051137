"""A catalog of activities available to a lobby."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from .activity import Activity

T = TypeVar("T")


@dataclass
class ActivityCatalog(Generic[T]):
    """Ordered collection of activities, unique by id."""

    activities: list[Activity[T]] = field(default_factory=list)

    def add_activity(self, activity: Activity[T]) -> None:
        """Add an activity unless one with the same id is present."""
        if any(existing.id == activity.id for existing in self.activities):
            return
        self.activities.append(activity)

    def get_activity(self, activity_id: str) -> Optional[Activity[T]]:
        """Return the activity with the given id, or None."""
        return next((a for a in self.activities if a.id == activity_id), None)