import asyncio
import json

import pytest

from mcpserver.errors import (
    InvalidMessageError,
    ServerError,
    TransportIoError,
    TransportJsonError,
    TransportProtocolError,
    TransportUtf8Error,
)
from mcpserver.protocol import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
)
from mcpserver.server import ByteTransport, Server, transport_error_data


class _Writer:
    def __init__(self):
        self.buffer = bytearray()

    def write(self, data):
        self.buffer.extend(data)

    async def drain(self):
        return None

    def lines(self):
        return [json.loads(line) for line in self.buffer.decode().splitlines()]


class _BrokenWriter:
    def write(self, data):
        raise BrokenPipeError("pipe closed")

    async def drain(self):
        return None


class _EchoService:
    async def call(self, request):
        return JsonRpcResponse(id=request.id, result={"method": request.method})


class _FailingService:
    async def call(self, request):
        raise RuntimeError("boom")


def _transport(data, writer=None):
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return ByteTransport(reader, writer if writer is not None else _Writer())


@pytest.mark.asyncio
async def test_read_request():
    transport = _transport(b'{"jsonrpc":"2.0","id":7,"method":"tools/list","params":{"a":1}}\n')
    message = await transport.read_message()
    assert message == JsonRpcRequest(id=7, method="tools/list", params={"a": 1})


@pytest.mark.asyncio
async def test_read_notification():
    transport = _transport(b'{"jsonrpc":"2.0","method":"notifications/initialized"}\n')
    message = await transport.read_message()
    assert message == JsonRpcNotification(method="notifications/initialized")


@pytest.mark.asyncio
async def test_eof_raises():
    transport = _transport(b"")
    with pytest.raises(EOFError):
        await transport.read_message()


@pytest.mark.asyncio
async def test_non_object_is_invalid():
    transport = _transport(b"[1,2]\n")
    with pytest.raises(InvalidMessageError) as info:
        await transport.read_message()
    assert str(info.value) == "Invalid message format: Message must be a JSON object"


@pytest.mark.asyncio
async def test_wrong_version_is_invalid():
    transport = _transport(b'{"jsonrpc":"1.0","id":1,"method":"x"}\n')
    with pytest.raises(InvalidMessageError) as info:
        await transport.read_message()
    assert str(info.value) == "Invalid message format: Missing or invalid jsonrpc version"


@pytest.mark.asyncio
async def test_bad_json():
    transport = _transport(b"{not json\n")
    with pytest.raises(TransportJsonError):
        await transport.read_message()


@pytest.mark.asyncio
async def test_bad_utf8():
    transport = _transport(b"\xff\xfe\n")
    with pytest.raises(TransportUtf8Error):
        await transport.read_message()


@pytest.mark.asyncio
async def test_nil_message_reads_as_none():
    transport = _transport(b'{"jsonrpc":"2.0"}\n')
    assert await transport.read_message() is None


@pytest.mark.asyncio
async def test_iteration_stops_at_eof():
    transport = _transport(
        b'{"jsonrpc":"2.0","id":1,"method":"a"}\n{"jsonrpc":"2.0","id":2,"method":"b"}\n'
    )
    methods = [message.method async for message in transport]
    assert methods == ["a", "b"]


@pytest.mark.asyncio
async def test_write_message_is_compact_line():
    writer = _Writer()
    transport = _transport(b"", writer)
    await transport.write_message(JsonRpcResponse(id=1, result={"ok": True}))
    assert bytes(writer.buffer) == b'{"jsonrpc":"2.0","id":1,"result":{"ok":true}}\n'


@pytest.mark.parametrize(
    "error, code",
    [
        (TransportJsonError("x"), PARSE_ERROR),
        (InvalidMessageError("x"), PARSE_ERROR),
        (TransportProtocolError("x"), INVALID_REQUEST),
        (TransportIoError("x"), INTERNAL_ERROR),
        (TransportUtf8Error("x"), INTERNAL_ERROR),
    ],
)
def test_transport_error_data(error, code):
    data = transport_error_data(error)
    assert data.code == code
    assert data.message == str(error)


@pytest.mark.asyncio
async def test_server_answers_requests():
    writer = _Writer()
    transport = _transport(
        b'{"jsonrpc":"2.0","id":3,"method":"ping"}\n{"jsonrpc":"2.0","id":4,"method":"pong"}\n',
        writer,
    )
    await Server(_EchoService()).run(transport)
    assert writer.lines() == [
        {"jsonrpc": "2.0", "id": 3, "result": {"method": "ping"}},
        {"jsonrpc": "2.0", "id": 4, "result": {"method": "pong"}},
    ]


@pytest.mark.asyncio
async def test_service_failure_becomes_internal_error():
    writer = _Writer()
    transport = _transport(b'{"jsonrpc":"2.0","id":5,"method":"ping"}\n', writer)
    await Server(_FailingService()).run(transport)
    (line,) = writer.lines()
    assert line["id"] == 5
    assert line["error"] == {"code": INTERNAL_ERROR, "message": "boom"}


@pytest.mark.asyncio
async def test_notifications_are_ignored():
    writer = _Writer()
    transport = _transport(
        b'{"jsonrpc":"2.0","method":"notice"}\n{"jsonrpc":"2.0","id":1,"result":{}}\n', writer
    )
    await Server(_EchoService()).run(transport)
    assert writer.buffer == bytearray()


@pytest.mark.asyncio
async def test_parse_error_is_reported_and_loop_continues():
    writer = _Writer()
    transport = _transport(b'garbage\n{"jsonrpc":"2.0","id":9,"method":"ping"}\n', writer)
    await Server(_EchoService()).run(transport)
    first, second = writer.lines()
    assert first["error"]["code"] == PARSE_ERROR
    assert "id" not in first
    assert second["id"] == 9


@pytest.mark.asyncio
async def test_write_failure_raises_server_error():
    transport = _transport(b'{"jsonrpc":"2.0","id":1,"method":"ping"}\n', _BrokenWriter())
    with pytest.raises(ServerError):
        await Server(_EchoService()).run(transport)