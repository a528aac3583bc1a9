"""Serve the counter router over standard input and output."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Sequence

from .counter import CounterRouter
from .errors import ServerError
from .router import RouterService
from .server import ByteTransport, Server

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "mcp-server.log"


class _StdinReader:
    async def readline(self) -> bytes:
        return await asyncio.to_thread(sys.stdin.buffer.readline)


class _StdoutWriter:
    def __init__(self) -> None:
        self._stream = sys.stdout.buffer

    def write(self, data: bytes) -> Any:
        return self._stream.write(data)

    async def drain(self) -> None:
        self._stream.flush()


async def serve(reader: Any, writer: Any) -> None:
    """Answer requests read from ``reader`` with a fresh counter router until end of input."""
    server = Server(RouterService(CounterRouter()))
    transport = ByteTransport(reader, writer)
    logger.info("Server initialized and ready to handle requests")
    await server.run(transport)


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(log_dir / LOG_FILE_NAME, when="midnight", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s [%(thread)d] %(filename)s:%(lineno)d %(message)s"
        )
    )
    return handler


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mcp-counter-server",
        description="Serve the counter router over standard input and output.",
    )
    parser.add_argument(
        "--log-dir", default="logs", help="directory for the daily log file (default: logs)"
    )
    args = parser.parse_args(argv)

    handler = _file_handler(Path(args.log_dir))
    root = logging.getLogger()
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    try:
        logger.info("Starting MCP server")
        asyncio.run(serve(_StdinReader(), _StdoutWriter()))
    except ServerError as exc:
        logger.error("Server stopped: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)
        handler.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())