"""JSON-RPC message types and MCP protocol structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def _without_none(pairs: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in pairs.items() if value is not None}


@dataclass
class ErrorData:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"code": self.code, "message": self.message, "data": self.data})


@dataclass
class JsonRpcRequest:
    id: Optional[int]
    method: str
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method, "params": self.params}
        )


@dataclass
class JsonRpcResponse:
    id: Optional[int]
    result: Any = None
    error: Optional[ErrorData] = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "jsonrpc": self.jsonrpc,
                "id": self.id,
                "result": self.result,
                "error": self.error.to_dict() if self.error is not None else None,
            }
        )


@dataclass
class JsonRpcNotification:
    method: str
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"jsonrpc": self.jsonrpc, "method": self.method, "params": self.params})


@dataclass
class JsonRpcError:
    id: Optional[int]
    error: ErrorData
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error.to_dict()})


JsonRpcMessage = Union[JsonRpcRequest, JsonRpcResponse, JsonRpcNotification, JsonRpcError]


def _parse_id(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ValueError(f"invalid id: {raw!r}")
    return raw


def _parse_error(raw: Any) -> ErrorData:
    if not isinstance(raw, Mapping):
        raise ValueError("error must be an object")
    code = raw.get("code")
    message = raw.get("message")
    if isinstance(code, bool) or not isinstance(code, int):
        raise ValueError("error code must be an integer")
    if not isinstance(message, str):
        raise ValueError("error message must be a string")
    return ErrorData(code=code, message=message, data=raw.get("data"))


def parse_message(value: Any) -> Optional[JsonRpcMessage]:
    """Build a message from a decoded JSON value.

    Returns None for a message that carries no method, result or error.
    Raises ValueError when the value does not have the shape of a message.
    """
    if not isinstance(value, Mapping):
        raise ValueError("message must be a JSON object")
    jsonrpc = value.get("jsonrpc")
    if not isinstance(jsonrpc, str):
        raise ValueError("missing field `jsonrpc`")
    message_id = _parse_id(value.get("id"))

    if value.get("error") is not None:
        return JsonRpcError(id=message_id, error=_parse_error(value["error"]), jsonrpc=jsonrpc)
    if value.get("result") is not None:
        return JsonRpcResponse(id=message_id, result=value["result"], jsonrpc=jsonrpc)

    method = value.get("method")
    if method is None:
        return None
    if not isinstance(method, str):
        raise ValueError("method must be a string")
    params = value.get("params")
    if message_id is None:
        return JsonRpcNotification(method=method, params=params, jsonrpc=jsonrpc)
    return JsonRpcRequest(id=message_id, method=method, params=params, jsonrpc=jsonrpc)


@dataclass
class ToolsCapability:
    list_changed: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"listChanged": self.list_changed})


@dataclass
class PromptsCapability:
    list_changed: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"listChanged": self.list_changed})


@dataclass
class ResourcesCapability:
    subscribe: Optional[bool] = None
    list_changed: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none({"subscribe": self.subscribe, "listChanged": self.list_changed})


@dataclass
class ServerCapabilities:
    tools: Optional[ToolsCapability] = None
    prompts: Optional[PromptsCapability] = None
    resources: Optional[ResourcesCapability] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "prompts": self.prompts.to_dict() if self.prompts else None,
                "resources": self.resources.to_dict() if self.resources else None,
                "tools": self.tools.to_dict() if self.tools else None,
            }
        )


@dataclass
class Tool:
    name: str
    description: str
    input_schema: Any = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass
class Resource:
    uri: str
    name: str
    mime_type: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "uri": self.uri,
                "name": self.name,
                "description": self.description,
                "mimeType": self.mime_type,
            }
        )


@dataclass
class PromptArgument:
    name: str
    description: Optional[str] = None
    required: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {"name": self.name, "description": self.description, "required": self.required}
        )


@dataclass
class Prompt:
    name: str
    description: Optional[str] = None
    arguments: Optional[list[PromptArgument]] = None

    def to_dict(self) -> dict[str, Any]:
        return _without_none(
            {
                "name": self.name,
                "description": self.description,
                "arguments": (
                    [argument.to_dict() for argument in self.arguments]
                    if self.arguments is not None
                    else None
                ),
            }
        )


def text_content(text: str) -> dict[str, Any]:
    """Return a text content item."""
    return {"type": "text", "text": text}