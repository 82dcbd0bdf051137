"""A client connection held by the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID


@dataclass
class Connection:
    """A client in a lobby with the queue its outgoing messages go to.

    Two connections are equal when client and lobby match; the sender is
    not compared.
    """

    client_id: UUID
    lobby_id: UUID
    sender: Any = field(compare=False, repr=False)