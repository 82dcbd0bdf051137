"""Commands of the network layer and the clients that exchange them."""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


@dataclass
class Client:
    """A client connected to a lobby, with its last measured ping."""

    id: UUID
    lobby_id: UUID
    ping: int


def _encode_data(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class NetworkCommand:
    """Base of network commands; externally tagged on the wire."""

    _variants: ClassVar[dict[str, type["NetworkCommand"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        NetworkCommand._variants[cls.__name__] = cls

    def get_type(self) -> str:
        """Return the variant name."""
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            payload[f.name] = _encode_data(value) if f.name == "data" else str(value)
        return {self.get_type(): payload}

    @classmethod
    def from_dict(cls, data: Any) -> "NetworkCommand":
        """Build a command from its JSON-ready form; raise ValueError if malformed.

        A Message's data is kept as the decoded JSON value.
        """
        if not isinstance(data, dict) or len(data) != 1:
            raise ValueError("expected a single-entry mapping")
        ((name, payload),) = data.items()
        variant = NetworkCommand._variants.get(name)
        if variant is None:
            raise ValueError(f"unknown network command: {name!r}")
        if not isinstance(payload, dict):
            raise ValueError(f"variant {name!r} expects a mapping of fields")
        kwargs: dict[str, Any] = {}
        for f in fields(variant):
            if f.name not in payload:
                raise ValueError(f"missing field {f.name!r} in {name!r}")
            value = payload[f.name]
            if f.name != "data":
                try:
                    value = UUID(value)
                except (TypeError, ValueError, AttributeError) as exc:
                    raise ValueError(f"invalid uuid for {f.name!r}: {value!r}") from exc
            kwargs[f.name] = value
        return variant(**kwargs)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "NetworkCommand":
        return cls.from_dict(json.loads(text))


@dataclass(frozen=True)
class Connect(NetworkCommand):
    client_id: UUID
    lobby_id: UUID


@dataclass(frozen=True)
class Disconnect(NetworkCommand):
    client_id: UUID
    lobby_id: UUID


@dataclass(frozen=True)
class Ping(NetworkCommand):
    id: UUID
    client_id: UUID


@dataclass(frozen=True)
class Pong(NetworkCommand):
    id: UUID
    client_id: UUID


@dataclass(frozen=True)
class Message(NetworkCommand, Generic[T]):
    client_id: UUID
    data: T


class NetworkCommandHandler(ABC):
    """Handles incoming network commands and sends outgoing ones."""

    @abstractmethod
    async def handle_command(self, command: NetworkCommand) -> None:
        """Handle a command; raise NetworkError on failure."""

    @abstractmethod
    async def send_command(self, command: NetworkCommand) -> None:
        """Send a command; raise NetworkError on failure."""