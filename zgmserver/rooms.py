"""Room pools: creating rooms, matching players into them and recycling closed ones."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .messages import JoinRoomError
from .room import JoinRoomFailed, Room, RoomConfig

ROOM_CODE_LENGTH = 4
ROOM_CODE_CHARSET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class UnavailableReason(Enum):
    """Why a room is taken out of the matching pool."""

    FULL = "Full"
    GAME_STARTED = "GameStarted"


@dataclass
class RoomInfo:
    """A room as the manager tracks it."""

    room: Room
    playing: bool = False
    full: bool = False

    def reset(self) -> None:
        self.full = False
        self.playing = False


def generate_room_code(rng: random.Random | None = None) -> bytes:
    """A random room code of upper-case letters and digits."""
    source = rng if rng is not None else random.Random()
    return bytes(source.choice(ROOM_CODE_CHARSET) for _ in range(ROOM_CODE_LENGTH))


def _as_code(code: bytes | str) -> bytes:
    return code.encode("ascii") if isinstance(code, str) else bytes(code)


class RoomManager:
    """Keeps rooms in three pools.

    ``open`` holds public rooms available for matching, ``reserved`` holds rooms
    that cannot be matched (private, full or playing) and ``free`` holds closed
    rooms kept for pooling.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.free: dict[bytes, RoomInfo] = {}
        self.reserved: dict[bytes, RoomInfo] = {}
        self.open: dict[bytes, RoomInfo] = {}

    def _new_code(self) -> bytes:
        while True:
            code = generate_room_code(self.rng)
            if code not in self.reserved and code not in self.open:
                return code

    def create(
        self, leader_id: int, leader_session: Any, config: RoomConfig | None = None
    ) -> tuple[bytes, Room]:
        """Create a room led by the given session; it starts out reserved."""
        code = self._new_code()
        room = Room(code, self, leader_id, leader_session, config)
        self.free.pop(code, None)
        self.reserved[code] = RoomInfo(room)
        return code, room

    def join(
        self, transient_id: int, session: Any, code: bytes | str | None = None
    ) -> tuple[bytes, Room]:
        """Join the room with the given code, or any open room when code is None.

        With no code and no open room, a new public room is created. Raises
        JoinRoomFailed when the player cannot be seated.
        """
        if code is not None:
            code = _as_code(code)
            info = self.reserved.get(code)
            if info is not None:
                if info.playing:
                    raise JoinRoomFailed(JoinRoomError.GAME_IN_PROGRESS)
                if info.full:
                    raise JoinRoomFailed(JoinRoomError.ROOM_FULL)
                return info.room.add_player(transient_id, session), info.room
            info = self.open.get(code)
            if info is not None:
                return info.room.add_player(transient_id, session), info.room
            raise JoinRoomFailed(JoinRoomError.ROOM_NOT_FOUND)

        info = next(iter(self.open.values()), None)
        if info is not None:
            return info.room.add_player(transient_id, session), info.room
        return self.create(transient_id, session, RoomConfig())

    def mark_available(self, code: bytes) -> None:
        """Put a reserved room into the matching pool unless it is full or playing."""
        info = self.reserved.pop(code, None)
        if info is None:
            return
        if not info.full and not info.playing:
            self.open[code] = info
        else:
            self.reserved[code] = info

    def mark_unavailable(self, code: bytes, reason: UnavailableReason | str) -> None:
        """Flag a room and take it out of the matching pool."""
        reason = UnavailableReason(reason)
        info = self.open.pop(code, None)
        if info is not None:
            self.reserved[code] = info
        else:
            info = self.reserved.get(code)
            if info is None:
                return
        if reason is UnavailableReason.FULL:
            info.full = True
        else:
            info.playing = True

    def on_room_closed(self, code: bytes) -> None:
        """Move a closed room to the free pool with its flags cleared."""
        info = self.open.pop(code, None)
        reserved = self.reserved.pop(code, None)
        if info is None:
            info = reserved
        if info is None:
            return
        info.reset()
        self.free[code] = info