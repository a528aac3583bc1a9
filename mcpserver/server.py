"""Newline-delimited JSON-RPC transport and the server loop that drives a service."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol

from .errors import (
    InvalidMessageError,
    ServerError,
    TransportError,
    TransportIoError,
    TransportJsonError,
    TransportProtocolError,
    TransportUtf8Error,
)
from .protocol import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    PARSE_ERROR,
    ErrorData,
    JsonRpcError,
    JsonRpcMessage,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_message,
)

logger = logging.getLogger(__name__)


class _Reader(Protocol):
    async def readline(self) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes) -> Any: ...

    async def drain(self) -> None: ...


class _Service(Protocol):
    async def call(self, request: JsonRpcRequest) -> JsonRpcResponse: ...


class ByteTransport:
    """Reads and writes one JSON-RPC message per line.

    The reader needs an awaitable ``readline()``; the writer needs ``write()``
    and an awaitable ``drain()``, as asyncio streams provide.
    """

    def __init__(self, reader: _Reader, writer: _Writer) -> None:
        self.reader = reader
        self.writer = writer

    async def read_message(self) -> Optional[JsonRpcMessage]:
        """Read the next message.

        Returns None for a message that carries no method, result or error.
        Raises EOFError at the end of input and a TransportError for a line
        that cannot be read or is not a valid message.
        """
        try:
            raw = await self.reader.readline()
        except (OSError, ValueError) as exc:
            raise TransportIoError(exc) from exc
        if not raw:
            raise EOFError("end of input")

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TransportUtf8Error(exc) from exc
        logger.info("incoming message: %s", line)

        try:
            value = json.loads(line)
        except json.JSONDecodeError as exc:
            raise TransportJsonError(exc) from exc
        if not isinstance(value, dict):
            raise InvalidMessageError("Message must be a JSON object")
        if value.get("jsonrpc") != JSONRPC_VERSION:
            raise InvalidMessageError("Missing or invalid jsonrpc version")
        try:
            return parse_message(value)
        except ValueError as exc:
            raise TransportJsonError(exc) from exc

    def __aiter__(self) -> "ByteTransport":
        return self

    async def __anext__(self) -> Optional[JsonRpcMessage]:
        """Return the next message; a TransportError leaves the stream usable."""
        try:
            return await self.read_message()
        except EOFError:
            raise StopAsyncIteration from None

    async def write_message(self, message: JsonRpcMessage) -> None:
        """Write a message as one compact JSON line and flush it."""
        payload = json.dumps(message.to_dict(), separators=(",", ":"), ensure_ascii=False)
        self.writer.write(payload.encode("utf-8"))
        self.writer.write(b"\n")
        await self.writer.drain()


def transport_error_data(error: TransportError) -> ErrorData:
    """Return the JSON-RPC error reported for a transport failure."""
    if isinstance(error, (TransportJsonError, InvalidMessageError)):
        code = PARSE_ERROR
    elif isinstance(error, TransportProtocolError):
        code = INVALID_REQUEST
    else:
        code = INTERNAL_ERROR
    return ErrorData(code=code, message=str(error))


def _to_json(message: Any) -> str:
    try:
        return json.dumps(message.to_dict(), separators=(",", ":"))
    except (TypeError, ValueError):
        return "Failed to serialize message"


class Server:
    """Answers each request read from a transport with the service's response."""

    def __init__(self, service: _Service) -> None:
        self.service = service

    async def _send(self, transport: ByteTransport, message: JsonRpcMessage) -> None:
        try:
            await transport.write_message(message)
        except OSError as exc:
            raise ServerError(f"Transport error: {TransportIoError(exc)}") from exc

    async def _answer(self, request: JsonRpcRequest) -> JsonRpcResponse:
        logger.info(
            "Received request id=%r method=%r json=%s",
            request.id,
            request.method,
            _to_json(request),
        )
        try:
            return await self.service.call(request)
        except Exception as exc:  # any service failure becomes an error response
            error_msg = str(exc)
            logger.error("Request processing failed: %s", error_msg)
            return JsonRpcResponse(
                id=request.id,
                error=ErrorData(code=INTERNAL_ERROR, message=error_msg),
            )

    async def run(self, transport: ByteTransport) -> None:
        """Serve until the transport reaches end of input.

        Raises ServerError when a message cannot be written.
        """
        logger.info("Server started")
        while True:
            try:
                message = await transport.read_message()
            except EOFError:
                break
            except TransportError as exc:
                await self._send(transport, JsonRpcError(id=None, error=transport_error_data(exc)))
                continue

            if not isinstance(message, JsonRpcRequest):
                continue

            response = await self._answer(message)
            logger.info("Sending response id=%r json=%s", response.id, _to_json(response))
            await self._send(transport, response)