"""Server-side handling of network commands for one client connection."""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from .connection import Connection
from .errors import InternalError, InvalidData
from .network_command import (
    Connect,
    Disconnect,
    Message,
    NetworkCommand,
    NetworkCommandHandler,
    Ping,
    Pong,
)
from .repository import ConnectionRepository, LobbyRepository

logger = logging.getLogger(__name__)


class ConnectionHandler(NetworkCommandHandler):
    """Handles the commands of one client and relays them to its lobby.

    The sender is a queue-like object with an async ``put`` method that
    receives the JSON text of outgoing commands.
    """

    def __init__(
        self, connection_repo: ConnectionRepository, lobby_repo: LobbyRepository
    ) -> None:
        self.connection_repo = connection_repo
        self.lobby_repo = lobby_repo
        self.sender: Optional[Any] = None
        self._client_id: Optional[UUID] = None

    @classmethod
    def new_from(cls, other: "ConnectionHandler") -> "ConnectionHandler":
        """Return a fresh handler sharing the repositories of another."""
        return cls(other.connection_repo, other.lobby_repo)

    @property
    def client_id(self) -> Optional[UUID]:
        """The id of the connected client, once it has sent Connect."""
        return self._client_id

    def with_sender(self, sender: Any) -> "ConnectionHandler":
        """Return a fresh handler that sends through the given queue."""
        handler = self.new_from(self)
        handler.sender = sender
        return handler

    async def get_connection(self) -> Optional[Connection]:
        """Return this client's stored connection, or None."""
        if self._client_id is None:
            return None
        return await self.connection_repo.get_connection(self._client_id)

    async def disconnect(self) -> None:
        """Disconnect this client if it is connected."""
        connection = await self.get_connection()
        if connection is not None:
            await self.handle_command(
                Disconnect(connection.client_id, connection.lobby_id)
            )

    async def broadcast_command(self, command: NetworkCommand) -> None:
        """Send a command to every client in this client's lobby."""
        connection = await self.get_connection()
        if connection is None:
            raise InternalError("no connection for this client")
        lobby_id = connection.lobby_id
        for other in await self.connection_repo.get_all_connections():
            if other.lobby_id != lobby_id:
                continue
            await self.send_command_to_client(other.client_id, command)

    async def send_command_to_client(
        self, client_id: UUID, command: NetworkCommand
    ) -> None:
        """Send a command to one client, if it is connected."""
        connection = await self.connection_repo.get_connection(client_id)
        if connection is None:
            return
        try:
            text = command.to_json()
        except (TypeError, ValueError) as exc:
            raise InvalidData() from exc
        try:
            await connection.sender.put(text)
        except Exception as exc:
            raise InternalError(str(exc)) from exc

    async def handle_command(self, command: NetworkCommand) -> None:
        if self.sender is None:
            return
        match command:
            case Connect(client_id=client_id, lobby_id=lobby_id):
                logger.info(
                    "Processing connection request client_id=%s lobby_id=%s",
                    client_id,
                    lobby_id,
                )
                connection = Connection(client_id, lobby_id, self.sender)
                self._client_id = client_id
                await self.connection_repo.add_connection(connection)
                await self.lobby_repo.add_client_to_lobby(client_id, lobby_id)
                logger.info("Connection request processed successfully")
            case Disconnect(client_id=client_id, lobby_id=lobby_id):
                await self.lobby_repo.remove_client_from_lobby(client_id, lobby_id)
                await self.connection_repo.remove_connection(client_id)
            case Message(client_id=client_id, data=data):
                await self.send_command(Message(client_id, data))
            case Ping(id=ping_id, client_id=client_id):
                await self.send_command(Pong(ping_id, client_id))
            case Pong(id=pong_id, client_id=client_id):
                await self.send_command(Ping(pong_id, client_id))

    async def send_command(self, command: NetworkCommand) -> None:
        logger.debug("Sending command of type %s", command.get_type())
        if isinstance(command, (Message, Ping, Pong)):
            await self.broadcast_command(command)