"""A lobby holding participants, an activity catalog and results."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional
from uuid import UUID, uuid4

from .activity import Activity, ActivityStatus
from .activity_catalog import ActivityCatalog
from .activity_result import ActivityResult
from .player import Player
from .role import Role


class InvalidPasswordError(ValueError):
    """Raised when joining a lobby with a wrong password."""

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class Lobby:
    """A game lobby seen from the point of view of one local player."""

    def __init__(
        self,
        admin: Player,
        password: Optional[str] = None,
        lobby_id: Optional[UUID] = None,
    ) -> None:
        self.id: UUID = lobby_id if lobby_id is not None else uuid4()
        self.player_id: UUID = admin.id
        self.participants: list[Player] = [admin]
        self.catalog: ActivityCatalog = ActivityCatalog()
        self.activities: list[Activity] = []
        self.password: Optional[str] = password
        self.results: list[ActivityResult] = []

    def __repr__(self) -> str:
        return (
            f"Lobby(id={self.id!r}, player_id={self.player_id!r}, "
            f"participants={len(self.participants)}, activities={len(self.activities)})"
        )

    def join(self, player: Player, password: Optional[str] = None) -> None:
        """Add a player, checking the password if the lobby has one."""
        if self.password is not None and password != self.password:
            raise InvalidPasswordError()
        self.add_participant(player)

    def update_player_id(self, player_id: UUID) -> None:
        """Replace the local player's id, in the participant list too."""
        for player in self.participants:
            if player.id == self.player_id:
                player.id = player_id
                break
        self.player_id = player_id

    def add_participant(self, participant: Player) -> None:
        if any(p.id == participant.id for p in self.participants):
            return
        self.participants.append(participant)

    def add_activity(self, activity: Activity) -> None:
        self.catalog.add_activity(activity)

    def get_admin(self) -> Optional[Player]:
        return next((p for p in self.participants if p.role == Role.ADMIN), None)

    def is_admin(self) -> bool:
        admin = self.get_admin()
        return admin is not None and admin.id == self.player_id

    def _find_activity(self, activity_id: str) -> Optional[Activity]:
        return next((a for a in self.activities if a.id == activity_id), None)

    def select_activity(self, activity_id: str) -> Optional[Activity]:
        """Return the selected activity, copying it from the catalog if needed."""
        selected = self._find_activity(activity_id)
        if selected is not None:
            return selected
        from_catalog = self.catalog.get_activity(activity_id)
        if from_catalog is None:
            return None
        selected = dataclasses.replace(from_catalog)
        self.activities.append(selected)
        return selected

    def remove_participant(self, participant_id: UUID) -> Optional[Player]:
        for index, player in enumerate(self.participants):
            if player.id == participant_id:
                return self.participants.pop(index)
        return None

    def start_activity(self, activity_id: str) -> Optional[Activity]:
        self.results.clear()
        activity = self._find_activity(activity_id)
        if activity is not None:
            activity.status = ActivityStatus.IN_PROGRESS
        return activity

    def complete_activity(self, activity_id: str) -> Optional[Activity]:
        activity = self._find_activity(activity_id)
        if activity is not None:
            activity.status = ActivityStatus.DONE
        return activity

    def update_activity_info(self, activity_id: str, data: Any) -> Optional[Activity]:
        return self.select_activity(activity_id)

    def add_activity_result(self, result: ActivityResult) -> None:
        self.results.append(result)

    def update_activity_status(
        self, activity_id: str, status: ActivityStatus
    ) -> Optional[Activity]:
        activity = self._find_activity(activity_id)
        if activity is None:
            return None
        if status == ActivityStatus.NOT_STARTED:
            self.results.clear()
        activity.status = status
        return activity