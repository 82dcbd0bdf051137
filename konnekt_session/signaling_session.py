"""Routing of signaling messages between the clients of a lobby."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional
from uuid import UUID

from .errors import InternalError
from .signaling import SignalingMessage

logger = logging.getLogger(__name__)

_ANY_PEER = UUID(int=0)


class SignalingSession:
    """Keeps one outgoing queue per client and lobby, and forwards messages.

    A sender is a queue-like object with an async ``put`` method that
    receives the JSON text of forwarded messages.
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, dict[UUID, Any]] = {}
        logger.debug("Creating new SignalingSession")

    def __repr__(self) -> str:
        lobbies = {lobby: len(clients) for lobby, clients in self._sessions.items()}
        return f"SignalingSession(lobbies={lobbies!r})"

    async def add_session(self, lobby_id: UUID, client_id: UUID, sender: Any) -> None:
        """Register the sender of a client, replacing an earlier one."""
        logger.info("Adding signaling session lobby_id=%s client_id=%s", lobby_id, client_id)
        self._sessions.setdefault(lobby_id, {})[client_id] = sender

    async def remove_session(self, lobby_id: UUID, client_id: UUID) -> None:
        """Forget a client; a lobby left empty is forgotten too."""
        logger.info("Removing signaling session lobby_id=%s client_id=%s", lobby_id, client_id)
        clients = self._sessions.get(lobby_id)
        if clients is None:
            return
        clients.pop(client_id, None)
        if not clients:
            del self._sessions[lobby_id]
            logger.debug("Removed empty lobby %s", lobby_id)

    async def get_available_peer(self, lobby_id: UUID, client_id: UUID) -> Optional[UUID]:
        """Return another client of the lobby, or None if there is none."""
        clients = self._sessions.get(lobby_id)
        if clients is None:
            logger.debug("Lobby %s not found", lobby_id)
            return None
        peer = next((other for other in clients if other != client_id), None)
        if peer is None:
            logger.debug("No available peers in lobby %s for %s", lobby_id, client_id)
        else:
            logger.info("Found available peer %s for %s in lobby %s", peer, client_id, lobby_id)
        return peer

    async def forward_message(self, lobby_id: UUID, message: SignalingMessage) -> None:
        """Forward a message to its recipient.

        A nil recipient means any other client of the lobby. Raises
        LookupError when the lobby, a peer or the recipient is missing,
        and InternalError when the recipient's queue fails.
        """
        clients = self._sessions.get(lobby_id)
        if clients is None:
            logger.error("Lobby %s not found", lobby_id)
            raise LookupError("Lobby not found")

        target = message.to
        if target == _ANY_PEER:
            target = await self.get_available_peer(lobby_id, message.from_)
            if target is None:
                logger.error("No available peers in lobby %s", lobby_id)
                raise LookupError("No available peers")

        sender = clients.get(target)
        if sender is None:
            logger.error("Recipient %s not found in lobby %s", target, lobby_id)
            raise LookupError("Recipient not found")

        text = dataclasses.replace(message, to=target).to_json()
        try:
            await sender.put(text)
        except Exception as exc:
            logger.error("Failed to send message in lobby %s: %s", lobby_id, exc)
            raise InternalError(str(exc)) from exc
        logger.info("Message forwarded from %s to %s", message.from_, target)