"""Bookkeeping of connected peers."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Generic, Hashable, Optional, TypeVar

P = TypeVar("P", bound=Hashable)


class ConnectionManager(ABC, Generic[P]):
    """Tracks which peers are connected."""

    @abstractmethod
    def add_peer(self, peer: P) -> None: ...

    @abstractmethod
    def remove_peer(self, peer: P) -> None: ...

    @abstractmethod
    def get_connected_peers(self) -> list[P]: ...

    @abstractmethod
    def is_peer_connected(self, peer: P) -> bool: ...


class SinglePeerManager(ConnectionManager[P]):
    """Tracks at most one peer, such as the server of a websocket."""

    def __init__(self) -> None:
        self._peer: Optional[P] = None
        self._lock = threading.Lock()

    def add_peer(self, peer: P) -> None:
        with self._lock:
            self._peer = peer

    def remove_peer(self, peer: P) -> None:
        with self._lock:
            if self._peer is not None and self._peer == peer:
                self._peer = None

    def get_connected_peers(self) -> list[P]:
        with self._lock:
            return [] if self._peer is None else [self._peer]

    def is_peer_connected(self, peer: P) -> bool:
        with self._lock:
            return self._peer is not None and self._peer == peer


class PeerTableManager(ConnectionManager[P]):
    """Tracks many peers, each with a connected flag."""

    def __init__(self) -> None:
        self.peers: dict[P, bool] = {}
        self._lock = threading.Lock()

    def add_peer(self, peer: P) -> None:
        with self._lock:
            self.peers[peer] = True

    def remove_peer(self, peer: P) -> None:
        with self._lock:
            self.peers.pop(peer, None)

    def get_connected_peers(self) -> list[P]:
        with self._lock:
            return [peer for peer, connected in self.peers.items() if connected]

    def is_peer_connected(self, peer: P) -> bool:
        with self._lock:
            return self.peers.get(peer, False)

    def set_connected(self, peer: P, connected: bool) -> None:
        """Record a peer with the given connected flag."""
        with self._lock:
            self.peers[peer] = connected