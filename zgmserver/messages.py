"""Messages exchanged with clients over the websocket, and the error kinds they carry."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class RemoveReason(Enum):
    """Why a client was removed from a room or disconnected."""

    ROOM_CLOSED = "RoomClosed"
    LOGOUT = "Logout"
    DISCONNECTED = "Disconnected"
    LEAVE_REQUESTED = "LeaveRequested"
    ID_MISMATCH = "IdMismatch"


class JoinRoomError(Enum):
    """Why a request to join a room was refused."""

    ROOM_FULL = "RoomFull"
    GAME_IN_PROGRESS = "GameInProgress"
    ALREADY_IN_ROOM = "AlreadyInRoom"
    ROOM_NOT_FOUND = "RoomNotFound"
    INVALID_CODE = "InvalidCode"
    INTERNAL_SERVER_ERROR = "InternalServerError"


class StartGameError(Enum):
    """Why a request to start a game was refused."""

    GAME_ALREADY_RUNNING = "GameAlreadyRunning"
    NOT_LEADER = "NotLeader"


class MessageError(ValueError):
    """Raised when an incoming message cannot be decoded."""


@dataclass(frozen=True)
class Login:
    """Client identifies itself with a user id."""

    user_id: str


@dataclass(frozen=True)
class JoinRoomRequest:
    """Client asks to join a room by code, or any open room when code is None."""

    code: str | None = None


@dataclass(frozen=True)
class Logout:
    """Client ends its session."""


IncomingMessage = Union[Login, JoinRoomRequest, Logout]

_MISSING = object()


def parse_incoming(text: str | bytes) -> IncomingMessage:
    """Decode a client message of the form {"kind": ..., "data": ...}."""
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MessageError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MessageError("expected a JSON object")
    kind = payload.get("kind", _MISSING)
    if kind is _MISSING:
        raise MessageError("missing field `kind`")
    data = payload.get("data", _MISSING)

    if kind == "Login":
        if not isinstance(data, str):
            raise MessageError("Login expects a string as data")
        return Login(data)
    if kind == "JoinRoom":
        if data is _MISSING or data is None:
            return JoinRoomRequest(None)
        if not isinstance(data, str):
            raise MessageError("JoinRoom expects a string or null as data")
        return JoinRoomRequest(data)
    if kind == "Logout":
        if data is not _MISSING and data is not None:
            raise MessageError("Logout carries no data")
        return Logout()
    raise MessageError(f"unknown message kind: {kind!r}")


def _result(status: str, data: Any) -> dict[str, Any]:
    return {"status": status, "data": data}


@dataclass(frozen=True)
class OutgoingMessage:
    """A message sent to a client; data is None for messages that carry none."""

    kind: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"kind": self.kind}
        if self.data is not None:
            body["data"] = self.data
        return body

    def encode(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def remove_from_room(cls, reason: RemoveReason | str) -> OutgoingMessage:
        return cls("RemoveFromRoom", RemoveReason(reason).value)

    @classmethod
    def force_disconnect(cls, reason: RemoveReason | str) -> OutgoingMessage:
        return cls("ForceDisconnect", RemoveReason(reason).value)

    @classmethod
    def game_started(cls) -> OutgoingMessage:
        return cls("GameStarted")

    @classmethod
    def game_end(cls) -> OutgoingMessage:
        return cls("GameEnd")

    @classmethod
    def join_room_success(cls, code: str) -> OutgoingMessage:
        return cls("JoinRoomResult", _result("Success", code))

    @classmethod
    def join_room_error(cls, error: JoinRoomError | str) -> OutgoingMessage:
        return cls("JoinRoomResult", _result("Error", JoinRoomError(error).value))

    @classmethod
    def turn_update(cls, turn: int) -> OutgoingMessage:
        return cls("TurnUpdate", int(turn))