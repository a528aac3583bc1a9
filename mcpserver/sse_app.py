"""HTTP server that carries MCP sessions over server-sent events.

A client opens ``GET /sse`` and receives an ``endpoint`` event naming its
session. It then posts JSON-RPC messages to ``POST /sse?sessionId=<id>``.
Every response from that session's router comes back on the event stream
as a ``message`` event.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import secrets
import sys
from collections.abc import AsyncIterator
from contextlib import suppress
from typing import Callable, Optional, Sequence

import aiohttp
from aiohttp import web
from aiohttp.http_exceptions import HttpProcessingError

from .codec import JsonRpcFrameCodec
from .counter import CounterRouter
from .errors import ServerError
from .router import Router, RouterService
from .server import ByteTransport, Server

logger = logging.getLogger(__name__)

BIND_HOST = "127.0.0.1"
BIND_PORT = 8000
BODY_BYTES_LIMIT = 1 << 22
SSE_PATH = "/sse"


def session_id() -> str:
    """Return a fresh random session identifier in lower-case hex."""
    return f"{secrets.randbits(128):016x}"


def _format_event(event: str, data: str) -> bytes:
    lines = data.splitlines() or [""]
    body = "".join(f"data: {line}\n" for line in lines)
    return f"event: {event}\n{body}\n".encode("utf-8")


class _FrameChannel:
    """Writer end for the server; yields each complete line it receives."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._codec = JsonRpcFrameCodec()
        self._queue: asyncio.Queue[Optional[bytes]] = asyncio.Queue()

    def write(self, data: bytes) -> None:
        self._buffer.extend(data)
        while (frame := self._codec.decode(self._buffer)) is not None:
            self._queue.put_nowait(frame)

    async def drain(self) -> None:
        return None

    def close(self) -> None:
        self._queue.put_nowait(None)

    async def frames(self) -> AsyncIterator[bytes]:
        while (frame := await self._queue.get()) is not None:
            yield frame


class SseApp:
    """Holds the open sessions and builds the web application serving them."""

    def __init__(self, router_factory: Callable[[], Router] = CounterRouter) -> None:
        self.router_factory = router_factory
        self.sessions: dict[str, asyncio.StreamReader] = {}

    def build(self) -> web.Application:
        """Return an application routing GET and POST on ``/sse``."""
        app = web.Application()
        app.router.add_get(SSE_PATH, self._sse_handler)
        app.router.add_post(SSE_PATH, self._post_event_handler)
        return app

    async def _run_session(
        self, session: str, inbound: asyncio.StreamReader, outbound: _FrameChannel
    ) -> None:
        server = Server(RouterService(self.router_factory()))
        try:
            await server.run(ByteTransport(inbound, outbound))
        except ServerError as exc:
            logger.error("server run error: %s", exc)
        finally:
            self.sessions.pop(session, None)
            outbound.close()

    async def _sse_handler(self, request: web.Request) -> web.StreamResponse:
        session = session_id()
        logger.info("sse connection session=%s", session)
        inbound = asyncio.StreamReader(limit=BODY_BYTES_LIMIT + 1)
        outbound = _FrameChannel()
        self.sessions[session] = inbound

        response = web.StreamResponse(
            headers={"Content-Type": "text/event-stream", "Cache-Control": "no-cache"}
        )
        await response.prepare(request)
        task = asyncio.create_task(self._run_session(session, inbound, outbound))
        try:
            await response.write(_format_event("endpoint", f"?sessionId={session}"))
            async for frame in outbound.frames():
                try:
                    message = frame.decode("utf-8")
                except UnicodeDecodeError as exc:
                    logger.error("invalid outgoing frame: %s", exc)
                    break
                await response.write(_format_event("message", message))
        finally:
            self.sessions.pop(session, None)
            if not inbound.at_eof():
                inbound.feed_eof()
            if not task.done():
                task.cancel()
        with suppress(ConnectionError):
            await response.write_eof()
        return response

    async def _post_event_handler(self, request: web.Request) -> web.Response:
        session = request.query.get("sessionId")
        if session is None:
            return web.Response(status=web.HTTPBadRequest.status_code)
        inbound = self.sessions.get(session)
        if inbound is None or inbound.at_eof():
            return web.Response(status=web.HTTPNotFound.status_code)

        declared = request.content_length
        if declared is not None and declared > BODY_BYTES_LIMIT:
            return web.Response(status=web.HTTPRequestEntityTooLarge.status_code)

        body = bytearray()
        try:
            async for chunk in request.content.iter_any():
                body.extend(chunk)
                if len(body) > BODY_BYTES_LIMIT:
                    return web.Response(status=web.HTTPRequestEntityTooLarge.status_code)
        except (OSError, HttpProcessingError, aiohttp.ClientPayloadError):
            return web.Response(status=web.HTTPBadRequest.status_code)

        if inbound.at_eof() or self.sessions.get(session) is not inbound:
            return web.Response(status=web.HTTPInternalServerError.status_code)
        inbound.feed_data(bytes(body) + b"\n")
        return web.Response(status=web.HTTPAccepted.status_code)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mcp-sse-server",
        description="Serve the counter router to MCP clients over server-sent events.",
    )
    parser.add_argument("--host", default=BIND_HOST, help=f"address to bind (default: {BIND_HOST})")
    parser.add_argument(
        "--port", type=int, default=BIND_PORT, help=f"port to bind (default: {BIND_PORT})"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger.debug("listening on %s:%s", args.host, args.port)
    web.run_app(SseApp(CounterRouter).build(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())