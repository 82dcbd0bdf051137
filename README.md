# konnekt-session

Building blocks for lobby-based sessions: players join a lobby, an admin
picks activities from a catalog, runs them and collects results. The
package also ships a small asyncio server (built on `aiohttp`) that relays
messages between the clients of a lobby over WebSockets and forwards
WebRTC signaling messages between peers.

## Installation

```
pip install konnekt-session
```

To run the test suite:

```
pip install "konnekt-session[test]"
pytest
```

## The session model

- `konnekt_session.role` – `Role` (`ADMIN`, `PLAYER`, `OBSERVER`).
  `Role.parse("Admin")` returns the matching role and falls back to
  `Role.PLAYER` for unknown names; `Role.default()` is `Role.PLAYER`.
- `konnekt_session.activity` – `Activity` and `ActivityStatus`
  (`NOT_STARTED`, `IN_PROGRESS`, `DONE`). `Activity.create(data)` builds a
  not-started activity whose id is `data.identifier()`.
- `konnekt_session.activity_catalog` – `ActivityCatalog`, an ordered
  list of activities; `add_activity` ignores an activity whose id is
  already present, `get_activity` returns the match or `None`.
- `konnekt_session.activity_result` – `ActivityResult(activity_id,
  player_id, data)` with `to_dict()`.
- `konnekt_session.player` – `Player(role, data)`, which gets a fresh
  UUID as its `id`.
- `konnekt_session.lobby` – `Lobby` and `InvalidPasswordError`.

Profiles, activities and results are your own objects. They need the
methods described in `konnekt_session.traits`: `identifier()` and
`name()`, and for results `score()` and `time_taken()` (`Scorable` and
`Timable` return 0 unless overridden).

```python
from dataclasses import dataclass

from konnekt_session.activity import Activity, ActivityStatus
from konnekt_session.lobby import InvalidPasswordError, Lobby
from konnekt_session.player import Player
from konnekt_session.role import Role


@dataclass
class Profile:
    key: str
    title: str

    def identifier(self) -> str:
        return self.key

    def name(self) -> str:
        return self.title


@dataclass
class Quiz:
    key: str
    title: str

    def identifier(self) -> str:
        return self.key

    def name(self) -> str:
        return self.title


admin = Player(role=Role.ADMIN, data=Profile("1", "Alice"))
password = "password"
lobby = Lobby(admin, password=password)

guest = Player(role=Role.PLAYER, data=Profile("2", "Bob"))
lobby.join(guest, password=password)

try:
    lobby.join(Player(role=Role.PLAYER, data=Profile("3", "Eve")))
except InvalidPasswordError:
    print("wrong password")

lobby.add_activity(Activity.create(Quiz("quiz-1", "Articles")))
lobby.select_activity("quiz-1")

started = lobby.start_activity("quiz-1")
assert started.status is ActivityStatus.IN_PROGRESS

done = lobby.complete_activity("quiz-1")
assert done.status is ActivityStatus.DONE
assert lobby.is_admin()
```

Selecting an activity copies it from the catalog into `lobby.activities`
once; selecting it again returns the copy already there. Starting an
activity clears `lobby.results`, and so does setting its status back to
`NOT_STARTED` with `update_activity_status`. Lookups that find nothing
return `None`. `update_player_id` changes the local player's id both in
`lobby.player_id` and in the participant list.

## Commands

`konnekt_session.command` describes what clients ask a lobby to do:
`Join`, `PlayerInfo`, `ActivityInfo`, `SelectActivity`, `RemovePlayer`,
`StartActivity`, `CompleteActivity`, `AddActivityResult`,
`UpdateActivityStatus`, `UpdatePlayerId` and `RequestState`, all
subclasses of `LobbyCommand` with `to_dict()` / `LobbyCommand.from_dict()`.
`LobbyCommandWrapper` carries the lobby id, an optional password and the
command, and converts with `to_json()` / `from_json()`. Malformed input
raises `ValueError`. `LobbyCommandHandler` is an abstract base whose
failures are meant to be `CommandError` subclasses
(`ActivityNotFoundError`, `PlayerNotFoundError`, `NotAuthorizedError`,
`InvalidOperationError`).

`konnekt_session.network_command` holds the transport-level commands
`Connect`, `Disconnect`, `Ping`, `Pong` and `Message`, plus the `Client`
record and the abstract `NetworkCommandHandler`. On the wire each command
is a JSON object keyed by its type:

```json
{"Message":{"client_id":"a1a2a3a4-b1b2-c1c2-d1d2-d3d4d5d6d7d8","data":{"field":"test"}}}
```

`konnekt_session.signaling` defines `SignalingMessage` (fields `from_`,
`to`, `content`) with `Offer`, `Answer` and `IceCandidate` content. The
JSON form is flat, with `"from"`, `"to"` and a `"type"` of `"offer"`,
`"answer"` or `"ice-candidate"`.

Network failures are `NetworkError` subclasses from
`konnekt_session.errors`: `ConnectionRefused`, `ConnectionReset`,
`ConnectionTimeout`, `InvalidData`, `UnknownNetworkError`, `SendError`,
`InternalError` and `ConnectionFailed`.

`konnekt_session.peers` offers `SinglePeerManager` (at most one peer) and
`PeerTableManager` (many peers with a connected flag, set via
`set_connected`), both implementing `ConnectionManager`.

## Running the server

```
konnekt-session
konnekt-session --host 127.0.0.1 --port 8080
```

By default it listens on `0.0.0.0:3000` and offers two WebSocket
endpoints:

- `/session` – a client sends `Connect` with its client and lobby ids,
  then `Message`, `Ping` and `Pong` commands. A `Message` is broadcast to
  every client connected to the same lobby; a `Ping` is answered by
  broadcasting a `Pong`, and a `Pong` by broadcasting a `Ping`. Closing
  the socket disconnects the client. Unparsable text is logged and
  ignored.
- `/signaling/{lobby_id}/{client_id}` – WebRTC signaling. Each text
  message is parsed as a `SignalingMessage` and forwarded to its `to`
  client in the same lobby; a message addressed to the nil UUID goes to
  any other client of the lobby.

To embed the server, build the `aiohttp` application with
`konnekt_session.server.create_app(connection_handler, signaling_session)`,
passing a `ConnectionHandler` from `konnekt_session.connection_handler`
and optionally a `SignalingSession` from
`konnekt_session.signaling_session`. Connections and lobby membership are
kept by `MemoryStorage` from `konnekt_session.repository`, which
implements both `ConnectionRepository` and `LobbyRepository`.

### Logging and telemetry

The server calls `konnekt_session.telemetry.init_telemetry()` on start
and `shutdown_telemetry()` on exit. Logs are written as JSON lines to
standard error. The per-logger levels come from `LOG_FILTER`
(comma-separated `name=level` entries, a bare level applying to the root
logger), defaulting to `konnekt_session=debug,aiohttp=debug,warn`.

With `ENABLE_TELEMETRY=true` (exactly that value; `telemetry_enabled()`
reports it), every log record is additionally posted as JSON, tagged with
the service name and version, to `JAEGER_ENDPOINT` (default
`http://jaeger:14268/api/traces`) from a background thread, with a
two-second timeout; failed posts are dropped.

## What the package does not do

- It has no client side: there are no WebSocket or WebRTC client
  connections to a server, only the server and the message types.
- `LobbyCommandHandler` and `NetworkCommandHandler` are abstract; the
  only concrete handler is the server's `ConnectionHandler`. Nothing
  applies `LobbyCommand`s to a `Lobby` for you.
- Storage is in memory only; connections and lobbies are lost when the
  server stops.
- Telemetry posts log records, not distributed-tracing spans.