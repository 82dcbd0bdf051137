"""Storage of client connections and lobby membership."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from .connection import Connection

logger = logging.getLogger(__name__)


class ConnectionRepository(ABC):
    """Stores the connections of clients, keyed by client id."""

    @abstractmethod
    async def add_connection(self, connection: Connection) -> None:
        """Store a connection, replacing one with the same client id."""

    @abstractmethod
    async def remove_connection(self, client_id: UUID) -> None:
        """Forget the connection of a client, if any."""

    @abstractmethod
    async def get_connection(self, client_id: UUID) -> Optional[Connection]:
        """Return the connection of a client, or None."""

    @abstractmethod
    async def get_all_connections(self) -> list[Connection]:
        """Return every stored connection."""


class LobbyRepository(ABC):
    """Tracks which clients are in which lobby."""

    @abstractmethod
    async def add_client_to_lobby(self, lobby_id: UUID, client_id: UUID) -> None:
        """Record that a client is in a lobby."""

    @abstractmethod
    async def remove_client_from_lobby(self, lobby_id: UUID, client_id: UUID) -> None:
        """Record that a client left a lobby."""

    @abstractmethod
    async def get_clients_in_lobby(self, lobby_id: UUID) -> list[UUID]:
        """Return the clients of a lobby, in the order they joined."""

    @abstractmethod
    async def get_lobby_with_client(self, client_id: UUID) -> Optional[UUID]:
        """Return the lobby a client is in, or None."""


class MemoryStorage(ConnectionRepository, LobbyRepository):
    """In-memory implementation of both repositories."""

    def __init__(self) -> None:
        self._connections: dict[UUID, Connection] = {}
        self._lobbies_to_clients: dict[UUID, list[UUID]] = {}
        self._clients_to_lobbies: dict[UUID, UUID] = {}

    async def add_connection(self, connection: Connection) -> None:
        logger.debug(
            "Adding connection client_id=%s lobby_id=%s",
            connection.client_id,
            connection.lobby_id,
        )
        self._connections[connection.client_id] = connection

    async def remove_connection(self, client_id: UUID) -> None:
        logger.debug("Removing connection client_id=%s", client_id)
        self._connections.pop(client_id, None)

    async def get_connection(self, client_id: UUID) -> Optional[Connection]:
        return self._connections.get(client_id)

    async def get_all_connections(self) -> list[Connection]:
        connections = list(self._connections.values())
        logger.debug("Retrieved %d connections", len(connections))
        return connections

    async def add_client_to_lobby(self, lobby_id: UUID, client_id: UUID) -> None:
        logger.debug("Adding client %s to lobby %s", client_id, lobby_id)
        self._lobbies_to_clients.setdefault(lobby_id, []).append(client_id)
        self._clients_to_lobbies[client_id] = lobby_id

    async def remove_client_from_lobby(self, lobby_id: UUID, client_id: UUID) -> None:
        logger.debug("Removing client %s from lobby %s", client_id, lobby_id)
        clients = self._lobbies_to_clients.get(lobby_id)
        if clients is not None:
            clients[:] = [c for c in clients if c != client_id]
        self._clients_to_lobbies.pop(client_id, None)

    async def get_clients_in_lobby(self, lobby_id: UUID) -> list[UUID]:
        return list(self._lobbies_to_clients.get(lobby_id, []))

    async def get_lobby_with_client(self, client_id: UUID) -> Optional[UUID]:
        return self._clients_to_lobbies.get(client_id)