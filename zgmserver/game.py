"""Game state shared by all game modes, and the standard mode's turn logic."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence

from .messages import OutgoingMessage


class _Player(Protocol):
    transient_id: int


class GameMode(Enum):
    STANDARD = "Standard"


@dataclass(frozen=True)
class SerializedState:
    """Game state sent to a client so it can restore its view after reconnecting."""

    word: str
    time_remaining: int | None
    turn: int
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "time_remaining": self.time_remaining,
            "turn": self.turn,
            "score": self.score,
        }


@dataclass
class PlayerState:
    """Per-player game state."""

    id: int
    score: int = 0
    alive: bool = True


@dataclass
class GameState:
    """State common to all game modes.

    ``deadline`` is the ``time.monotonic()`` value at which the running timer fires.
    """

    player_data: list[PlayerState | None] = field(default_factory=list)
    word: str = ""
    turn: int = 0
    deadline: float | None = None


@dataclass(frozen=True)
class WordInput:
    word: str


class Game:
    """A game played in a room, driven by the room through its hooks."""

    def __init__(
        self, players: Sequence[_Player | None], mode: GameMode = GameMode.STANDARD
    ) -> None:
        self.mode = mode
        self.state = GameState(
            player_data=[
                None if player is None else PlayerState(player.transient_id)
                for player in players
            ]
        )
        self.running = False
        self.paused = False

    def get_state(self, player: int) -> SerializedState:
        state = self.state
        time_remaining = None
        if state.deadline is not None:
            time_remaining = int(max(0.0, state.deadline - time.monotonic()))
        if not 0 <= player < len(state.player_data):
            raise IndexError(f"no data exists for player {player}")
        data = state.player_data[player]
        if data is None:
            raise ValueError(f"player slot {player} is empty")
        return SerializedState(
            word=state.word,
            time_remaining=time_remaining,
            turn=state.turn,
            score=data.score,
        )

    def serialized_state(self, player: int) -> str:
        """The player's state as compact JSON."""
        return json.dumps(self.get_state(player).to_dict(), separators=(",", ":"))

    def on_begin(self, room: Any) -> None:
        self.running = True
        self.paused = False

    def on_end(self, room: Any) -> None:
        self.running = False
        self.paused = False

    def on_pause(self, room: Any) -> None:
        self.paused = True

    def on_resume(self, room: Any) -> None:
        self.paused = False

    def on_input(self, room: Any, game_input: WordInput) -> bool:
        """Offer input to the game; returns whether the game is accepting input."""
        if not isinstance(game_input, WordInput):
            raise TypeError(f"unsupported game input: {game_input!r}")
        return self.running and not self.paused


class StandardGame:
    """Turn handling for the standard game mode."""

    def next_turn(self, state: GameState, room: Any) -> None:
        def alive(entry: PlayerState | None) -> bool:
            return entry is not None and entry.alive

        following = next(
            (pos for pos, entry in enumerate(state.player_data[state.turn:]) if alive(entry)),
            None,
        )
        if following is None:
            following = next(
                (pos for pos, entry in enumerate(state.player_data) if alive(entry)), None
            )
            if following is None:
                raise RuntimeError("everyone cannot be dead")
        state.turn = following
        player_id = room.get_id(state.turn)
        if player_id is None:
            raise LookupError(f"no player at index {state.turn}")
        room.notify_clients(OutgoingMessage.turn_update(player_id), None)