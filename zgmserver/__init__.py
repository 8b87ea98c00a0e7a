"""Multiplayer game server: sessions, rooms and matchmaking over a WebSocket."""

__version__ = "0.1.0"