"""A room: the players gathered together and the game they play."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .game import Game, GameMode
from .messages import JoinRoomError, OutgoingMessage, RemoveReason, StartGameError

DEFAULT_PLAYER_LIMIT = 6

# Values of the room manager's unavailability reasons.
_FULL = "Full"
_GAME_STARTED = "GameStarted"


@dataclass
class RoomConfig:
    public: bool = True
    max_player_count: int = DEFAULT_PLAYER_LIMIT


@dataclass
class GameConfigOptions:
    mode: GameMode = GameMode.STANDARD


@dataclass
class PlayerInRoom:
    session: Any
    transient_id: int


class JoinRoomFailed(Exception):
    """A player could not be added to a room."""

    def __init__(self, error: JoinRoomError) -> None:
        super().__init__(error.value)
        self.error = error


class StartGameFailed(Exception):
    """A game could not be started."""

    def __init__(self, error: StartGameError) -> None:
        super().__init__(error.value)
        self.error = error


class Room:
    """Players in fixed slots; a freed slot is reused by the next player to join.

    The room manager is told through ``mark_unavailable(code, reason)`` and
    ``on_room_closed(code)``; sessions receive ``send_message``, ``clear_room``
    and ``restore_state`` calls.
    """

    def __init__(
        self,
        code: bytes,
        room_manager: Any,
        leader_id: int,
        leader_session: Any,
        config: RoomConfig | None = None,
    ) -> None:
        self.code = code
        self.room_manager = room_manager
        self.room_config = config if config is not None else RoomConfig()
        self.game_config = GameConfigOptions()
        self.players: list[PlayerInRoom | None] = [PlayerInRoom(leader_session, leader_id)]
        self.id_map: dict[int, int] = {leader_id: 0}
        self.game: Game | None = None
        self.leader = leader_id
        self.player_count = 1
        self.closed = False

    def add_player(self, transient_id: int, session: Any) -> bytes:
        """Seat a player and return the room code; raises JoinRoomFailed otherwise."""
        if self.closed:
            raise JoinRoomFailed(JoinRoomError.INTERNAL_SERVER_ERROR)
        limit = self.room_config.max_player_count
        error: JoinRoomError | None = None
        if self.game is not None:
            error = JoinRoomError.GAME_IN_PROGRESS
        elif self.player_count >= limit:
            error = JoinRoomError.ROOM_FULL
        elif transient_id in self.id_map:
            error = JoinRoomError.ALREADY_IN_ROOM
        else:
            entry = PlayerInRoom(session, transient_id)
            free = next((i for i, slot in enumerate(self.players) if slot is None), None)
            if free is None:
                self.id_map[transient_id] = len(self.players)
                self.players.append(entry)
            else:
                self.players[free] = entry
                self.id_map[transient_id] = free
            self.player_count += 1
        if self.player_count >= limit:
            self.room_manager.mark_unavailable(self.code, _FULL)
        if error is not None:
            raise JoinRoomFailed(error)
        return self.code

    def remove_player(self, transient_id: int, reason: RemoveReason) -> None:
        """Take a player out; the room closes once nobody is left."""
        if self.closed:
            return
        index = self.id_map.pop(transient_id, None)
        if index is None:
            return
        self.player_count -= 1
        player = None
        if index < len(self.players):
            player, self.players[index] = self.players[index], None
        # A player who asked to leave has already cleared its own room.
        if reason is not RemoveReason.LEAVE_REQUESTED and player is not None:
            player.session.clear_room(reason)
        if self.player_count == 0:
            self._stop()

    def close(self) -> None:
        self._stop()

    def _stop(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.game is not None:
            self.game.on_end(self)
        notice = OutgoingMessage.remove_from_room(RemoveReason.ROOM_CLOSED)
        for player in self.players:
            if player is not None:
                player.session.send_message(notice)
        self.room_manager.on_room_closed(self.code)

    def reconnect(self, replacee: int, new_id: int, new_session: Any) -> None:
        """Move a player's slot to the session it reconnected on and restore its state."""
        if self.closed:
            return
        index = self.id_map.pop(replacee, None)
        if index is None or index >= len(self.players):
            return
        if self.players[index] is not None and self.game is not None:
            new_session.restore_state(self.code, self.game.serialized_state(index))
        self.id_map[new_id] = index
        self.players[index] = PlayerInRoom(new_session, new_id)

    def request_start(self, transient_id: int) -> None:
        """Start a game; in a private room only the leader may do so."""
        if self.game is not None:
            raise StartGameFailed(StartGameError.GAME_ALREADY_RUNNING)
        if not self.room_config.public and self.leader != transient_id:
            raise StartGameFailed(StartGameError.NOT_LEADER)
        self._start_game()

    def _start_game(self) -> None:
        game = Game(self.players, self.game_config.mode)
        game.on_begin(self)
        self.game = game
        self.room_manager.mark_unavailable(self.code, _GAME_STARTED)
        self.notify_clients(OutgoingMessage.game_started(), None)

    def notify_clients(self, message: OutgoingMessage, target: int | None = None) -> None:
        """Send to one seated player by index, or to every seated player."""
        if target is None:
            for player in self.players:
                if player is not None:
                    player.session.send_message(message)
            return
        if not 0 <= target < len(self.players):
            raise IndexError(f"target {target} doesn't exist")
        player = self.players[target]
        if player is None:
            raise ValueError(f"target {target} is not an active player")
        player.session.send_message(message)

    def get_id(self, index: int) -> int | None:
        if not 0 <= index < len(self.players):
            return None
        player = self.players[index]
        return None if player is None else player.transient_id