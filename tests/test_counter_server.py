import io
import json
import sys

import pytest

from mcpserver.counter_server import main, serve
from mcpserver.protocol import PARSE_ERROR


class _LineReader:
    def __init__(self, *lines: bytes) -> None:
        self._lines = list(lines)

    async def readline(self) -> bytes:
        return self._lines.pop(0) if self._lines else b""


class _Collector:
    def __init__(self) -> None:
        self.data = bytearray()

    def write(self, data: bytes) -> None:
        self.data.extend(data)

    async def drain(self) -> None:
        pass

    def messages(self) -> list:
        return [json.loads(line) for line in bytes(self.data).splitlines()]


def _line(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8") + b"\n"


def _call(request_id: int, tool: str) -> bytes:
    return _line(
        {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "tools/call",
            "params": {"name": tool, "arguments": {}},
        }
    )


@pytest.mark.asyncio
async def test_serve_counts_across_requests():
    writer = _Collector()
    reader = _LineReader(_call(1, "increment"), _call(2, "increment"), _call(3, "get_value"))
    await serve(reader, writer)
    messages = writer.messages()
    assert [message["id"] for message in messages] == [1, 2, 3]
    texts = [message["result"]["content"][0]["text"] for message in messages]
    assert int(texts[1]) == int(texts[0]) + 1
    assert texts[2] == texts[1]


@pytest.mark.asyncio
async def test_serve_reports_parse_error_and_continues():
    writer = _Collector()
    reader = _LineReader(b"not json\n", _call(7, "get_value"))
    await serve(reader, writer)
    error, answer = writer.messages()
    assert error["error"]["code"] == PARSE_ERROR
    assert "id" not in error
    assert answer["id"] == 7


@pytest.mark.asyncio
async def test_serve_ignores_notifications():
    writer = _Collector()
    reader = _LineReader(_line({"jsonrpc": "2.0", "method": "notifications/initialized"}))
    await serve(reader, writer)
    assert writer.data == bytearray()


def test_main_serves_stdin_and_logs(monkeypatch, tmp_path):
    request = _line({"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    stdin = io.TextIOWrapper(io.BytesIO(request))
    stdout_bytes = io.BytesIO()
    stdout = io.TextIOWrapper(stdout_bytes)
    monkeypatch.setattr(sys, "stdin", stdin)
    monkeypatch.setattr(sys, "stdout", stdout)

    assert main(["--log-dir", str(tmp_path)]) == 0

    lines = stdout_bytes.getvalue().splitlines()
    assert len(lines) == 1
    response = json.loads(lines[0])
    assert response["result"]["serverInfo"]["name"] == "counter"
    assert (tmp_path / "mcp-server.log").exists()