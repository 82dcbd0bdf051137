"""Activities that can be played in a lobby."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from .traits import Identifiable, Named

T = TypeVar("T", bound="_ActivityData")


class _ActivityData(Identifiable, Named):
    """Payload of an activity: identifiable and named."""


class ActivityStatus(str, Enum):
    """Progress of an activity."""

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def default(cls) -> "ActivityStatus":
        return cls.NOT_STARTED


@dataclass
class Activity(Named, Generic[T]):
    """An activity wrapping its payload together with its status."""

    id: str
    data: T
    status: ActivityStatus = ActivityStatus.NOT_STARTED

    @classmethod
    def create(cls, data: T) -> "Activity[T]":
        """Build a not-started activity whose id is the payload's identifier."""
        return cls(id=data.identifier(), data=data)

    def name(self) -> str:
        return self.data.name()