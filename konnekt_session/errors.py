"""Errors raised by the networking layer."""

from __future__ import annotations

from typing import ClassVar


class NetworkError(Exception):
    """Base of all networking errors."""


class _AddressError(NetworkError):
    _message: ClassVar[str] = ""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(self._message)


class ConnectionRefused(_AddressError):
    _message = "Connection refused"


class ConnectionReset(_AddressError):
    _message = "Connection reset by peer"


class ConnectionTimeout(_AddressError):
    _message = "Connection timed out"


class InvalidData(NetworkError):
    def __init__(self) -> None:
        super().__init__("Invalid data received")


class UnknownNetworkError(NetworkError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__("Unknown network error")


class SendError(NetworkError):
    def __init__(self) -> None:
        super().__init__("Failed to send message")


class InternalError(NetworkError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Internal error: {detail}")


class ConnectionFailed(NetworkError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Connection error: {detail}")