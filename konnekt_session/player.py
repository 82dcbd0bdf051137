"""Participants of a lobby."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from .role import Role
from .traits import Identifiable, Named

T = TypeVar("T")


@dataclass
class Player(Identifiable, Named, Generic[T]):
    """A participant with a role, a profile and a freshly generated id."""

    role: Role
    data: T
    id: UUID = field(default_factory=uuid4)

    def identifier(self) -> str:
        return self.data.identifier()

    def name(self) -> str:
        return self.data.name()