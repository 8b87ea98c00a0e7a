# zgmserver

A multiplayer game server that speaks JSON over a WebSocket. It keeps track
of player sessions, lets players log in and out, and seats them in rooms.
When a user logs in again on a new connection, the room the user was in is
moved over to the new connection.

## Install

```
pip install .
```

## Run

```
zgmserver
zgmserver --host 127.0.0.1 --port 9000
```

By default the server listens on `0.0.0.0:8000`. It serves a WebSocket
endpoint at `/ws`.

## Protocol

Clients send JSON text frames tagged by `kind`, with a payload under `data`:

```json
{"kind": "Login", "data": "player-one"}
{"kind": "JoinRoom", "data": "AB12"}
{"kind": "JoinRoom", "data": null}
{"kind": "Logout"}
```

- `Login` registers the session under a user id and gives it a new
  transient id. A second `Login` on the same connection is ignored and
  logged. If the user is already registered from another connection, the
  registration moves to the new connection. The room the user was in then
  gives the user's seat to the new connection. If a game is running there,
  the new connection is sent the game state as
  `{"word": ..., "time_remaining": ..., "turn": ..., "score": ...}`.
- `JoinRoom` with a code joins the room with that code. The code must be
  four bytes long; otherwise the reply is `InvalidCode`. The code must be
  sent after `Login`; a join before it ends the connection.
- `JoinRoom` with `null` (or no `data`) joins the first room in the open
  matching pool. If the pool is empty, a new public room is created and the
  player becomes its leader.
- `Logout` unregisters the session and closes the connection.

Frames that cannot be decoded are logged and ignored.

The server replies in the same shape:

```json
{"kind": "JoinRoomResult", "data": {"status": "Success", "data": "AB12"}}
{"kind": "JoinRoomResult", "data": {"status": "Error", "data": "RoomFull"}}
{"kind": "RemoveFromRoom", "data": "RoomClosed"}
{"kind": "GameStarted"}
{"kind": "TurnUpdate", "data": 3}
```

Join errors are `RoomFull`, `GameInProgress`, `AlreadyInRoom`,
`RoomNotFound`, `InvalidCode` and `InternalServerError`. Removal reasons are
`RoomClosed`, `Logout`, `Disconnected`, `LeaveRequested` and `IdMismatch`.

A room holds up to six players by default. A room closes when its last
player is removed. Every player still seated then receives
`RemoveFromRoom` with `RoomClosed`.

A connection counts as stale once it has sent nothing (text, ping or pong)
for two seconds. This is checked every five seconds. A connection still
stale fifteen seconds after it was first found stale is closed, and its
session is unregistered as `Disconnected`.

## Using it from Python

```python
from aiohttp import web
from zgmserver.server import create_app

web.run_app(create_app(), host="127.0.0.1", port=8000)
```

The parts:

- `zgmserver.messages`: the wire format. It has `parse_incoming`,
  `OutgoingMessage` and the error and reason enums.
- `zgmserver.session.Session`: one connection. It handles client messages
  and sends text through a callback it is given.
- `zgmserver.sessions.SessionManager`: hands out transient ids and tracks
  which room each user is in.
- `zgmserver.rooms.RoomManager`: creates rooms with random four-character
  codes (`A`–`Z`, `0`–`9`). It keeps rooms in `open`, `reserved` and `free`
  pools and matches players into them.
- `zgmserver.room.Room`: the seated players and the game of one room.
  `request_start` starts a game; in a private room only the leader may start
  it.
- `zgmserver.game.Game`: the per-player and shared game state.
  `StandardGame.next_turn` picks the next living player and announces the
  turn.

## What it does not do

- There is no game play yet. `Game` records whether it is running or paused,
  but it does nothing with word input.
- Clients have no message to start a game, leave a room or pause. These are
  reachable only from Python (`Room.request_start`, `Room.remove_player`).
- New rooms start in the `reserved` pool. Only `RoomManager.mark_available`
  moves them to the open matching pool, and the server never calls it. So a
  `JoinRoom` without a code always creates a new room, unless the
  application opens rooms itself.
- Nothing is stored: sessions and rooms live in memory only.

## Tests

```
pip install .[test]
pytest
```