"""Registry of logged-in sessions keyed by user id and by transient id."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .messages import RemoveReason

TRANSIENT_ID_LIMIT = 10_000_000_000


@dataclass
class SessionData:
    """What the manager knows about a user's current session."""

    session: Any
    transient_id: int
    room: Any = None


class SessionManager:
    """Sessions register here before interacting with rooms.

    Each registration gets a fresh transient id; a user registering again is a
    reconnection, and the room it was in is told about its new session.
    """

    def __init__(self) -> None:
        self.sessions: dict[str, SessionData] = {}
        self.transient_id_map: dict[int, str] = {}
        self.temp_id_counter = 0

    def new_id(self) -> int:
        if self.temp_id_counter >= TRANSIENT_ID_LIMIT:
            self.temp_id_counter = 0
        self.temp_id_counter += 1
        return self.temp_id_counter

    def add_session(self, user_id: str, session: Any, transient_id: int) -> None:
        old = self.sessions.get(user_id)
        if old is None:
            self.sessions[user_id] = SessionData(session, transient_id)
        else:
            if old.room is not None:
                old.room.reconnect(old.transient_id, transient_id, session)
            self.transient_id_map.pop(old.transient_id, None)
            old.transient_id = transient_id
            old.session = session
        self.transient_id_map[transient_id] = user_id

    def remove_session(self, transient_id: int, reason: RemoveReason) -> None:
        user_id = self.transient_id_map.pop(transient_id, None)
        if user_id is None:
            return
        data = self.sessions.pop(user_id, None)
        if data is not None and data.room is not None:
            data.room.remove_player(data.transient_id, reason)

    def get_user_by_transient_id(self, transient_id: int) -> str | None:
        return self.transient_id_map.get(transient_id)

    def register(self, session: Any, user_id: str) -> int:
        """Register a session for a user and return its new transient id."""
        transient_id = self.new_id()
        self.add_session(user_id, session, transient_id)
        return transient_id

    def update_room(self, transient_id: int, room: Any) -> None:
        """Record the room a session has joined, or None once it has left."""
        user_id = self.transient_id_map.get(transient_id)
        if user_id is None:
            return
        data = self.sessions.get(user_id)
        if data is not None:
            data.room = room