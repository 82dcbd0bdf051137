"""Commands exchanged between lobby participants, and their errors."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import MISSING, dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional
from uuid import UUID

from .activity import ActivityStatus
from .role import Role

if TYPE_CHECKING:
    from .lobby import Lobby


_ENCODERS: dict[str, Callable[[Any], Any]] = {
    "player_id": str,
    "lobby_id": str,
    "participant_id": str,
    "role": lambda role: role.value,
    "status": lambda status: status.value,
}

_DECODERS: dict[str, Callable[[Any], Any]] = {
    "player_id": UUID,
    "lobby_id": UUID,
    "participant_id": UUID,
    "role": Role,
    "status": ActivityStatus,
}


def _encode_field(name: str, value: Any) -> Any:
    """Return the JSON-ready form of the field called ``name``."""
    encode = _ENCODERS.get(name)
    if encode is None:
        return value
    return encode(value)


class LobbyCommand:
    """Base of all lobby commands.

    The wire form is externally tagged: ``{"Join": {...}}`` for variants with
    fields, and the bare variant name for variants without any.
    """

    _variants: ClassVar[dict[str, type["LobbyCommand"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        LobbyCommand._variants[cls.__name__] = cls

    def to_dict(self) -> Any:
        """Return the JSON-ready form of this command."""
        names = [f.name for f in fields(self)]
        variant = type(self).__name__
        if not names:
            return variant
        return {
            variant: {name: _encode_field(name, getattr(self, name)) for name in names}
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LobbyCommand":
        """Build a command from its JSON-ready form; raise ValueError if malformed."""
        if isinstance(data, str):
            name, payload = data, None
        elif isinstance(data, dict) and len(data) == 1:
            ((name, payload),) = data.items()
        else:
            raise ValueError("expected a variant name or a single-entry mapping")
        variant = LobbyCommand._variants.get(name)
        if variant is None:
            raise ValueError(f"unknown command variant: {name!r}")
        variant_fields = fields(variant)
        if not variant_fields:
            if payload is not None:
                raise ValueError(f"variant {name!r} takes no fields")
            return variant()
        if not isinstance(payload, dict):
            raise ValueError(f"variant {name!r} expects a mapping of fields")
        kwargs: dict[str, Any] = {}
        for f in variant_fields:
            if f.name not in payload:
                if f.default is MISSING:
                    raise ValueError(f"missing field {f.name!r} in {name!r}")
                continue
            value = payload[f.name]
            decode = _DECODERS.get(f.name)
            if decode is not None:
                try:
                    value = decode(value)
                except (TypeError, ValueError, AttributeError) as exc:
                    raise ValueError(f"invalid value for {f.name!r}: {value!r}") from exc
            kwargs[f.name] = value
        return variant(**kwargs)


@dataclass(frozen=True)
class Join(LobbyCommand):
    player_id: UUID
    lobby_id: UUID
    role: Role
    data: str
    password: Optional[str] = None


@dataclass(frozen=True)
class PlayerInfo(LobbyCommand):
    player_id: UUID
    role: Role
    data: str


@dataclass(frozen=True)
class ActivityInfo(LobbyCommand):
    activity_id: str
    status: ActivityStatus
    data: str


@dataclass(frozen=True)
class SelectActivity(LobbyCommand):
    activity_id: str


@dataclass(frozen=True)
class RemovePlayer(LobbyCommand):
    participant_id: UUID


@dataclass(frozen=True)
class StartActivity(LobbyCommand):
    activity_id: str


@dataclass(frozen=True)
class CompleteActivity(LobbyCommand):
    activity_id: str


@dataclass(frozen=True)
class AddActivityResult(LobbyCommand):
    activity_id: str
    player_id: UUID
    data: str


@dataclass(frozen=True)
class UpdateActivityStatus(LobbyCommand):
    activity_id: str
    status: ActivityStatus


@dataclass(frozen=True)
class UpdatePlayerId(LobbyCommand):
    player_id: UUID


@dataclass(frozen=True)
class RequestState(LobbyCommand):
    pass


@dataclass(frozen=True)
class LobbyCommandWrapper:
    """A command addressed to a lobby, with the lobby password if any."""

    lobby_id: UUID
    password: Optional[str]
    command: LobbyCommand

    def to_json(self) -> str:
        return json.dumps(
            {
                "lobby_id": str(self.lobby_id),
                "password": self.password,
                "command": self.command.to_dict(),
            },
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, text: str) -> "LobbyCommandWrapper":
        """Parse a wrapper; raise ValueError if the text is not a valid one."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        try:
            lobby_id = UUID(data["lobby_id"])
            command_data = data["command"]
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError("invalid lobby command wrapper") from exc
        password = data.get("password")
        if password is not None and not isinstance(password, str):
            raise ValueError("password must be a string or null")
        return cls(lobby_id, password, LobbyCommand.from_dict(command_data))


class CommandError(Exception):
    """Base of the errors raised while handling a lobby command."""


class ActivityNotFoundError(CommandError):
    def __init__(self, activity_id: str) -> None:
        self.activity_id = activity_id
        super().__init__(f"Activity not found: {activity_id}")


class PlayerNotFoundError(CommandError):
    def __init__(self, player_id: UUID) -> None:
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")


class NotAuthorizedError(CommandError):
    def __init__(self) -> None:
        super().__init__("Not authorized")


class InvalidOperationError(CommandError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid operation: {message}")


class LobbyCommandHandler(ABC):
    """Applies lobby commands to a lobby and sends them to others."""

    @abstractmethod
    def handle_command(self, lobby: "Lobby", command: LobbyCommand) -> None:
        """Apply a command to the lobby; raise CommandError on failure."""

    @abstractmethod
    def send_command(self, command: LobbyCommand) -> None:
        """Send a command; raise CommandError on failure."""