# mcpserver

A small asyncio framework for writing Model Context Protocol (MCP) servers.

It gives you:

- **`ByteTransport`** (`mcpserver.server`): reads newline-delimited JSON-RPC
  2.0 messages from a reader with an awaitable `readline()` and writes
  messages, one compact JSON line each, to a writer with `write()` and an
  awaitable `drain()` (asyncio streams fit both). It can also be iterated
  with `async for`.
- **`Server`** (`mcpserver.server`): reads messages from a transport until
  end of input, hands each request to a service and writes back the
  response. Unreadable or malformed lines are answered with a JSON-RPC error
  whose id is null (`-32700` for JSON and format errors, `-32600` for
  protocol errors, `-32603` for anything else). Responses, notifications and
  errors sent by the client are ignored. If the service raises, the request
  is answered with a `-32603` error carrying the exception text. `run` raises
  `ServerError` only when a message cannot be written.
- **`Router`** (`mcpserver.router`): an abstract base class you subclass to
  expose tools, resources and prompts. It already answers `initialize`,
  `tools/list`, `tools/call`, `resources/list`, `resources/read`,
  `prompts/list` and `prompts/get`.
- **`RouterService`** (`mcpserver.router`): dispatches requests by method name
  to a router; an unknown method is answered with a `-32601` "method not
  found" error.
- **`CapabilitiesBuilder`** (`mcpserver.router`): builds the
  `ServerCapabilities` a router advertises.
- **`mcpserver.protocol`**: dataclasses for the JSON-RPC messages and MCP
  structures (`Tool`, `Resource`, `Prompt`, `PromptArgument`, the capability
  types), each with `to_dict()`, plus `parse_message()` and
  `text_content()`.

## Installation

```
pip install mcpserver
```

For running the test suite:

```
pip install "mcpserver[test]"
```

## Writing a server

Subclass `Router` and fill in what your server offers:

```python
from mcpserver.errors import UnknownPromptError, UnknownResourceError, UnknownToolError
from mcpserver.protocol import Tool, text_content
from mcpserver.router import CapabilitiesBuilder, Router


class EchoRouter(Router):
    def name(self):
        return "echo"

    def instructions(self):
        return "Repeats whatever message it is given."

    def capabilities(self):
        return CapabilitiesBuilder().with_tools(False).build()

    async def list_tools(self):
        return [
            Tool(
                "echo",
                "Echo the message back",
                {"type": "object", "properties": {"message": {"type": "string"}}},
            )
        ]

    async def call_tool(self, tool_name, arguments):
        if tool_name != "echo":
            raise UnknownToolError(f"Tool {tool_name} not found")
        return [text_content((arguments or {}).get("message", ""))]

    async def list_resources(self):
        return []

    async def read_resource(self, uri):
        raise UnknownResourceError(f"Resource {uri} not found")

    async def list_prompts(self):
        return []

    async def get_prompt(self, prompt_name, params):
        raise UnknownPromptError(f"Prompt {prompt_name} not found")
```

Then serve it over any reader and writer:

```python
from mcpserver.router import RouterService
from mcpserver.server import ByteTransport, Server

server = Server(RouterService(EchoRouter()))
await server.run(ByteTransport(reader, writer))
```

How the built-in handlers behave:

- `initialize` reports protocol version `2024-11-05`, the router's
  capabilities, its name with version `0.1.0`, and its instructions when
  they are not `None`.
- A tool that raises `ToolError` does not fail the request: the error text
  is returned as the tool's content with `isError` set to `true`.
- `resources/read` returns the text as a single `text/plain` content item.
  An `UnknownResourceError` becomes a `-32600` error; any other
  `ResourceError` becomes a `-32603` "Unknown resource error".
- Missing parameters, a missing `name` or `uri`, or a missing `arguments`
  object for `prompts/get` give a `-32602` error.

### Prompt arguments

`prompts/get` looks up the prompt by name (`-32600` if there is none), then
checks the arguments before filling in its template:

- every argument the prompt marks as required must be present and be a
  non-empty string;
- argument keys must be 1–1000 bytes of UTF-8, values at most 1000;
- keys and values may not contain `../`, `//`, `\\`, `<script>`, `{{` or `}}`;
- the prompt text may be at most 10000 bytes of UTF-8.

Each `{name}` placeholder in the prompt text is then replaced with the
argument's value. The filled text is returned as the description and as a
single user message.

## Included servers

### Counter over standard input and output

```
mcpserver-counter [--log-dir DIR]
```

Runs `CounterRouter` (from `mcpserver.counter`) on stdin/stdout and logs to
`DIR/mcp-server.log` (default `logs/`), rotated daily. It offers the tools
`increment`, `decrement` and `get_value` on a counter that starts at 0, two
text resources (`str:////Users/to/some/path/` and `memo://insights`) and a
prompt, `example_prompt`, that takes one required argument, `message`.
`mcpserver.counter_server.serve(reader, writer)` runs the same server over
any reader and writer.

### Counter over server-sent events

```
mcpserver-sse [--host HOST] [--port PORT]
```

Starts an HTTP server, by default on `127.0.0.1:8000`, built by `SseApp`
from `mcpserver.sse_app`:

- `GET /sse` opens an event stream. The first event, `endpoint`, carries
  `?sessionId=<id>`; every message the session's server writes follows as a
  `message` event.
- `POST /sse?sessionId=<id>` sends one JSON-RPC message to that session and
  gives `202` when accepted. A missing `sessionId` gives `400`, an unknown or
  closed session `404`, a body over 4 MiB `413`, and a body that cannot be
  read `400`.

Each connection gets its own router from the factory given to `SseApp`
(`CounterRouter` by default), so each has its own counter.

## Other pieces

- `mcpserver.codec.JsonRpcFrameCodec.decode(buffer)` removes and returns the
  first newline-terminated frame from a `bytearray`, or `None` if none is
  complete.
- `mcpserver.calculator.calculator(x, y, operation)` supports `add`,
  `subtract`, `multiply` and `divide` (truncating toward zero); it raises
  `ToolExecutionError` on division by zero and `InvalidToolParametersError`
  for an unknown operation.
- `mcpserver.errors` holds the exception hierarchy;
  `RouterError.to_error_data()` turns a routing error into the JSON-RPC error
  object sent to the client.

## What this package does not do

- It is a server framework only: there is no MCP client.
- Requests are handled one at a time, with no time limit on a request.
- It never sends notifications, and resource subscriptions are not
  supported, whatever the capabilities advertise.
- List results are not paginated.