"""The websocket server: session relay and signaling routes."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional
from uuid import UUID

from aiohttp import WSMessage, WSMsgType, web

from .connection_handler import ConnectionHandler
from .errors import NetworkError
from .network_command import NetworkCommand
from .repository import MemoryStorage
from .signaling import SignalingMessage
from .signaling_session import SignalingSession
from .telemetry import init_telemetry, shutdown_telemetry

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
_SESSION_QUEUE_SIZE = 10
_SIGNALING_QUEUE_SIZE = 32
_CLOSING = (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED)


async def handle_message(message: WSMessage, connection_handler: ConnectionHandler) -> None:
    """Apply one websocket message to a connection handler; errors are logged."""
    if message.type == WSMsgType.TEXT:
        text = message.data
        try:
            command = NetworkCommand.from_json(text)
        except ValueError as exc:
            logger.error("Failed to parse command %r: %s", text, exc)
            return
        logger.debug("Parsed command %r", command)
        try:
            await connection_handler.handle_command(command)
        except NetworkError as exc:
            logger.error("Failed to handle command: %s", exc)
    elif message.type in _CLOSING:
        logger.info("Client %s disconnected", connection_handler.client_id)
        try:
            await connection_handler.disconnect()
        except NetworkError as exc:
            logger.error("Failed to handle disconnect: %s", exc)
    else:
        logger.warning(
            "Unsupported message type %s from client %s",
            message.type,
            connection_handler.client_id,
        )


async def _pump_outgoing(outgoing: asyncio.Queue, ws: web.WebSocketResponse) -> None:
    while True:
        text = await outgoing.get()
        try:
            await ws.send_str(text)
        except (ConnectionError, RuntimeError) as exc:
            logger.error("Failed to send message: %s", exc)
            return


async def _pump_incoming(ws: web.WebSocketResponse, handler: ConnectionHandler) -> None:
    async for message in ws:
        if message.type == WSMsgType.ERROR:
            logger.error("Failed to receive message: %s", ws.exception())
            return
        await handle_message(message, handler)


async def _stop(tasks: set[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise web.HTTPBadRequest(text=f"invalid id: {value}") from exc


def create_app(
    connection_handler: ConnectionHandler,
    signaling_session: Optional[SignalingSession] = None,
) -> web.Application:
    """Build the application serving /session and /signaling/{lobby}/{client}."""
    session = signaling_session if signaling_session is not None else SignalingSession()

    async def session_endpoint(request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        logger.debug("WebSocket connection established")
        outgoing: asyncio.Queue = asyncio.Queue(maxsize=_SESSION_QUEUE_SIZE)
        handler = connection_handler.with_sender(outgoing)

        sender = asyncio.create_task(_pump_outgoing(outgoing, ws))
        receiver = asyncio.create_task(_pump_incoming(ws, handler))
        done, pending = await asyncio.wait(
            {sender, receiver}, return_when=asyncio.FIRST_COMPLETED
        )
        which = "Sender" if sender in done else "Receiver"
        logger.info("%s task completed for client %s", which, handler.client_id)
        await _stop(pending)

        try:
            await handler.disconnect()
        except NetworkError as exc:
            logger.error("Failed to disconnect: %s", exc)
        await ws.close()
        return ws

    async def signaling_endpoint(request: web.Request) -> web.WebSocketResponse:
        lobby_id = _parse_uuid(request.match_info["lobby_id"])
        client_id = _parse_uuid(request.match_info["client_id"])
        logger.info("New signaling connection for lobby %s, client %s", lobby_id, client_id)

        ws = web.WebSocketResponse()
        await ws.prepare(request)
        outgoing: asyncio.Queue = asyncio.Queue(maxsize=_SIGNALING_QUEUE_SIZE)
        await session.add_session(lobby_id, client_id, outgoing)
        sender = asyncio.create_task(_pump_outgoing(outgoing, ws))
        try:
            async for message in ws:
                if message.type == WSMsgType.ERROR:
                    break
                if message.type != WSMsgType.TEXT:
                    continue
                try:
                    signal = SignalingMessage.from_json(message.data)
                except ValueError as exc:
                    logger.error("Failed to parse signaling message: %s", exc)
                    continue
                try:
                    await session.forward_message(lobby_id, signal)
                except (LookupError, NetworkError) as exc:
                    logger.error("Failed to forward message: %s", exc)
        finally:
            await session.remove_session(lobby_id, client_id)
            await _stop({sender})
        return ws

    app = web.Application()
    app.router.add_get("/session", session_endpoint)
    app.router.add_get("/signaling/{lobby_id}/{client_id}", signaling_endpoint)
    return app


def main(argv: Optional[list[str]] = None) -> None:
    """Run the server until interrupted."""
    parser = argparse.ArgumentParser(description="Lobby session and signaling server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    init_telemetry()
    try:
        storage = MemoryStorage()
        handler = ConnectionHandler(storage, storage)
        app = create_app(handler, SignalingSession())
        logger.info("Server running at http://%s:%s", args.host, args.port)
        web.run_app(app, host=args.host, port=args.port, print=None)
    finally:
        shutdown_telemetry()