"""A client session: identity, room membership and handling of client messages."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from .messages import (
    IncomingMessage,
    JoinRoomError,
    JoinRoomRequest,
    Login,
    Logout,
    MessageError,
    OutgoingMessage,
    RemoveReason,
    parse_incoming,
)
from .room import JoinRoomFailed
from .rooms import ROOM_CODE_LENGTH

log = logging.getLogger(__name__)

# How long to wait before disconnecting an inactive client for good, in seconds.
RECONNECTION_TIME_LIMIT = 15
# How often to check for staleness, in seconds.
HB_CHECK_INTERVAL = 5
# A client silent for this many seconds is considered stale.
HB_TIME_LIMIT = 2


def code_to_string(code: bytes) -> str:
    """Render a room code as text; raises ValueError for a code of the wrong length."""
    if len(code) != ROOM_CODE_LENGTH:
        raise ValueError(f"room code must be {ROOM_CODE_LENGTH} bytes long")
    return bytes(code).decode("utf-8", errors="replace")


def string_to_code(text: str) -> bytes:
    """Turn client text into a room code; raises ValueError for the wrong length."""
    code = text.encode("utf-8")
    if len(code) != ROOM_CODE_LENGTH:
        raise ValueError(f"room code must be {ROOM_CODE_LENGTH} bytes long")
    return code


class Session:
    """One client connection.

    Outgoing text goes through ``send``; ``on_close`` is called once when the
    session stops, so the transport can shut the connection.
    """

    def __init__(
        self,
        session_manager: Any,
        room_manager: Any,
        send: Callable[[str], None] | None = None,
        on_close: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_manager = session_manager
        self.room_manager = room_manager
        self._send = send if send is not None else (lambda _text: None)
        self._on_close = on_close
        self._clock = clock
        self.user_id: str | None = None
        self.transient_id: int | None = None
        self.room: Any = None
        self.hb = clock()
        self.closed = False

    def _registered_id(self) -> int:
        if self.transient_id is None:
            raise RuntimeError("session must be registered")
        return self.transient_id

    def handle_text(self, text: str | bytes) -> None:
        """Decode a client text frame and act on it; undecodable frames are logged."""
        try:
            message = parse_incoming(text)
        except MessageError as exc:
            log.error("Failed to deserialize message: %s", exc)
            return
        self.handle_message(message)

    def handle_message(self, message: IncomingMessage) -> None:
        if isinstance(message, Login):
            if self.user_id is not None:
                log.error("attempting to re-login")
                return
            self.user_id = message.user_id
            self.transient_id = self.session_manager.register(self, message.user_id)
        elif isinstance(message, Logout):
            if self.transient_id is not None:
                transient_id, self.transient_id = self.transient_id, None
                self.user_id = None
                self.session_manager.remove_session(transient_id, RemoveReason.LOGOUT)
            self.stop()
        elif isinstance(message, JoinRoomRequest):
            code = None
            if message.code is not None:
                try:
                    code = string_to_code(message.code)
                except ValueError:
                    self.send_message(
                        OutgoingMessage.join_room_error(JoinRoomError.INVALID_CODE)
                    )
                    return
            self.join_room(code)
        else:
            raise TypeError(f"unsupported message: {message!r}")

    def join_room(self, code: bytes | None = None) -> None:
        """Ask the room manager for a room and report the outcome to the client."""
        transient_id = self._registered_id()
        try:
            room_code, room = self.room_manager.join(transient_id, self, code)
        except JoinRoomFailed as exc:
            result = OutgoingMessage.join_room_error(exc.error)
        else:
            self.room = room
            self.session_manager.update_room(transient_id, room)
            result = OutgoingMessage.join_room_success(code_to_string(room_code))
        self.send_message(result)

    def send_message(self, message: OutgoingMessage) -> None:
        self._send(message.encode())

    def clear_room(self, reason: RemoveReason) -> None:
        """Forget the current room after being removed from it, and tell the client."""
        self.room = None
        self.send_message(OutgoingMessage.remove_from_room(reason))
        self.session_manager.update_room(self._registered_id(), None)

    def restore_state(self, code: bytes, state: str) -> None:
        self._send(state)

    def touch(self) -> None:
        """Record that the client has just been heard from."""
        self.hb = self._clock()

    def is_stale(self, now: float | None = None) -> bool:
        current = self._clock() if now is None else now
        return current - self.hb >= HB_TIME_LIMIT

    def stop(self) -> None:
        """End the session; a still registered session is unregistered as disconnected."""
        if self.closed:
            return
        self.closed = True
        self.user_id = None
        if self.transient_id is not None:
            transient_id, self.transient_id = self.transient_id, None
            self.session_manager.remove_session(transient_id, RemoveReason.DISCONNECTED)
        if self._on_close is not None:
            self._on_close()