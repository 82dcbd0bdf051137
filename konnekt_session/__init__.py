"""Lobby and activity session model with a WebSocket relay and signaling server."""

__version__ = "0.1.0"