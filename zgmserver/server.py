"""HTTP server exposing the websocket endpoint for game clients."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from aiohttp import WSMsgType, web

from .rooms import RoomManager
from .session import HB_CHECK_INTERVAL, RECONNECTION_TIME_LIMIT, Session
from .sessions import SessionManager

log = logging.getLogger(__name__)

SESSION_MANAGER = web.AppKey("session_manager", SessionManager)
ROOM_MANAGER = web.AppKey("room_manager", RoomManager)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


async def _write(ws: web.WebSocketResponse, outbox: asyncio.Queue) -> None:
    while True:
        text = await outbox.get()
        if text is None:
            break
        try:
            await ws.send_str(text)
        except ConnectionResetError:
            return
    await ws.close()


async def _heartbeat(session: Session) -> None:
    loop = asyncio.get_running_loop()
    timer: asyncio.TimerHandle | None = None
    try:
        while not session.closed:
            await asyncio.sleep(HB_CHECK_INTERVAL)
            if session.is_stale():
                if timer is None:
                    timer = loop.call_later(RECONNECTION_TIME_LIMIT, session.stop)
            elif timer is not None:
                timer.cancel()
                timer = None
    finally:
        if timer is not None:
            timer.cancel()


async def _socket(request: web.Request) -> web.WebSocketResponse:
    ws = web.WebSocketResponse(autoping=False)
    await ws.prepare(request)
    outbox: asyncio.Queue = asyncio.Queue()
    session = Session(
        request.app[SESSION_MANAGER],
        request.app[ROOM_MANAGER],
        send=outbox.put_nowait,
        on_close=lambda: outbox.put_nowait(None),
    )
    writer = asyncio.create_task(_write(ws, outbox))
    heartbeat = asyncio.create_task(_heartbeat(session))
    try:
        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                session.touch()
                try:
                    session.handle_text(msg.data)
                except RuntimeError as exc:
                    log.error("%s", exc)
                    break
            elif msg.type == WSMsgType.PING:
                session.touch()
                await ws.pong(msg.data)
            elif msg.type == WSMsgType.PONG:
                session.touch()
            elif msg.type == WSMsgType.ERROR:
                log.error("%s", ws.exception())
            if session.closed:
                break
    finally:
        heartbeat.cancel()
        session.stop()
        await writer
        await ws.close()
    return ws


def create_app() -> web.Application:
    """Build the application with fresh session and room managers."""
    app = web.Application()
    app[SESSION_MANAGER] = SessionManager()
    app[ROOM_MANAGER] = RoomManager()
    app.router.add_get("/ws", _socket)
    return app


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the game server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    web.run_app(create_app(), host=args.host, port=args.port)
    return 0