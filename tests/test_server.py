import asyncio
from uuid import UUID, uuid4

import pytest
from aiohttp import WSMessage, WSMsgType
from aiohttp.test_utils import TestClient, TestServer

from konnekt_session.connection import Connection
from konnekt_session.connection_handler import ConnectionHandler
from konnekt_session.network_command import Connect, Message, NetworkCommand, Ping, Pong
from konnekt_session.repository import MemoryStorage
from konnekt_session.server import create_app, handle_message
from konnekt_session.signaling import Offer, SignalingMessage
from konnekt_session.signaling_session import SignalingSession

NIL = UUID(int=0)


async def _eventually(check, timeout=5.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        result = await check()
        if result or loop.time() > deadline:
            return result
        await asyncio.sleep(0.02)


def _text(text):
    return WSMessage(WSMsgType.TEXT, text, None)


@pytest.mark.asyncio
async def test_handle_message_connect_and_close():
    storage = MemoryStorage()
    handler = ConnectionHandler(storage, storage).with_sender(asyncio.Queue())
    client_id, lobby_id = uuid4(), uuid4()

    await handle_message(_text(Connect(client_id, lobby_id).to_json()), handler)
    assert handler.client_id == client_id
    assert await storage.get_connection(client_id) == Connection(client_id, lobby_id, None)

    await handle_message(WSMessage(WSMsgType.CLOSE, 1000, None), handler)
    assert await storage.get_all_connections() == []


@pytest.mark.asyncio
async def test_handle_message_ignores_bad_and_binary_input():
    storage = MemoryStorage()
    handler = ConnectionHandler(storage, storage).with_sender(asyncio.Queue())

    await handle_message(_text("not json"), handler)
    await handle_message(_text('{"Unknown":{}}'), handler)
    await handle_message(WSMessage(WSMsgType.BINARY, b"\x00", None), handler)

    assert handler.client_id is None
    assert await storage.get_all_connections() == []


@pytest.mark.asyncio
async def test_session_ping_is_answered_with_pong():
    storage = MemoryStorage()
    app = create_app(ConnectionHandler(storage, storage), SignalingSession())
    async with TestClient(TestServer(app)) as client:
        ws = await client.ws_connect("/session")
        client_id, lobby_id = uuid4(), uuid4()
        await ws.send_str("garbage")
        await ws.send_str(Connect(client_id, lobby_id).to_json())
        ping_id = uuid4()
        await ws.send_str(Ping(ping_id, client_id).to_json())

        reply = await asyncio.wait_for(ws.receive_str(), 5)
        assert NetworkCommand.from_json(reply) == Pong(ping_id, client_id)

        await ws.close()

        async def no_connections():
            return await storage.get_all_connections() == []

        assert await _eventually(no_connections)


@pytest.mark.asyncio
async def test_session_message_reaches_lobby_only():
    storage = MemoryStorage()
    app = create_app(ConnectionHandler(storage, storage))
    async with TestClient(TestServer(app)) as client:
        lobby = uuid4()
        a, b, outsider = uuid4(), uuid4(), uuid4()
        ws_a = await client.ws_connect("/session")
        ws_b = await client.ws_connect("/session")
        ws_c = await client.ws_connect("/session")
        await ws_a.send_str(Connect(a, lobby).to_json())
        await ws_b.send_str(Connect(b, lobby).to_json())
        await ws_c.send_str(Connect(outsider, uuid4()).to_json())

        async def all_connected():
            return len(await storage.get_all_connections()) == 3

        assert await _eventually(all_connected)

        await ws_a.send_str(Message(a, "hello").to_json())
        for ws in (ws_a, ws_b):
            received = await asyncio.wait_for(ws.receive_str(), 5)
            assert NetworkCommand.from_json(received) == Message(a, "hello")

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(ws_c.receive_str(), 0.3)

        for ws in (ws_a, ws_b, ws_c):
            await ws.close()


@pytest.mark.asyncio
async def test_signaling_offer_is_routed_to_peer():
    session = SignalingSession()
    storage = MemoryStorage()
    app = create_app(ConnectionHandler(storage, storage), session)
    async with TestClient(TestServer(app)) as client:
        lobby, a, b = uuid4(), uuid4(), uuid4()
        ws_a = await client.ws_connect(f"/signaling/{lobby}/{a}")
        ws_b = await client.ws_connect(f"/signaling/{lobby}/{b}")

        async def peer_ready():
            return await session.get_available_peer(lobby, a) == b

        assert await _eventually(peer_ready)

        await ws_a.send_str(SignalingMessage(a, NIL, Offer("v=0")).to_json())
        received = SignalingMessage.from_json(await asyncio.wait_for(ws_b.receive_str(), 5))
        assert received == SignalingMessage(a, b, Offer("v=0"))

        await ws_b.close()

        async def peer_gone():
            return await session.get_available_peer(lobby, a) is None

        assert await _eventually(peer_gone)
        await ws_a.close()


@pytest.mark.asyncio
async def test_signaling_rejects_invalid_ids():
    storage = MemoryStorage()
    app = create_app(ConnectionHandler(storage, storage))
    async with TestClient(TestServer(app)) as client:
        response = await client.get("/signaling/not-a-uuid/also-not")
        assert response.status == 400