"""Routing of MCP requests onto a router's tools, resources and prompts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional

from .errors import (
    InvalidParamsError,
    MethodNotFoundError,
    PromptError,
    PromptNotFoundError,
    ResourceError,
    RouterInternalError,
    ToolError,
    router_error_from_resource_error,
)
from .protocol import (
    JsonRpcRequest,
    JsonRpcResponse,
    Prompt,
    PromptsCapability,
    Resource,
    ResourcesCapability,
    ServerCapabilities,
    Tool,
    ToolsCapability,
    text_content,
)

PROTOCOL_VERSION = "2024-11-05"
SERVER_VERSION = "0.1.0"

MAX_PROMPT_LENGTH = 10000
MAX_ARGUMENT_LENGTH = 1000
DANGEROUS_PATTERNS = ("../", "//", "\\\\", "<script>", "{{", "}}")


class CapabilitiesBuilder:
    """Collects the capabilities a router advertises."""

    def __init__(self) -> None:
        self.tools: Optional[ToolsCapability] = None
        self.prompts: Optional[PromptsCapability] = None
        self.resources: Optional[ResourcesCapability] = None

    def with_tools(self, list_changed: bool) -> "CapabilitiesBuilder":
        """Enable the tools capability."""
        self.tools = ToolsCapability(list_changed=list_changed)
        return self

    def with_prompts(self, list_changed: bool) -> "CapabilitiesBuilder":
        """Enable the prompts capability."""
        self.prompts = PromptsCapability(list_changed=list_changed)
        return self

    def with_resources(self, subscribe: bool, list_changed: bool) -> "CapabilitiesBuilder":
        """Enable the resources capability."""
        self.resources = ResourcesCapability(subscribe=subscribe, list_changed=list_changed)
        return self

    def build(self) -> ServerCapabilities:
        """Return the configured capabilities."""
        return ServerCapabilities(tools=self.tools, prompts=self.prompts, resources=self.resources)


def _require_params(request: JsonRpcRequest) -> Any:
    if request.params is None:
        raise InvalidParamsError("Missing parameters")
    return request.params


def _string_field(params: Any, key: str, missing: str) -> str:
    value = params.get(key) if isinstance(params, Mapping) else None
    if not isinstance(value, str):
        raise InvalidParamsError(missing)
    return value


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _check_prompt_arguments(arguments: Mapping[str, Any]) -> None:
    for key, value in arguments.items():
        if not key or _byte_length(key) > MAX_ARGUMENT_LENGTH:
            raise InvalidParamsError("Argument keys must be between 1-1000 characters")
        value_str = value if isinstance(value, str) else ""
        if _byte_length(value_str) > MAX_ARGUMENT_LENGTH:
            raise InvalidParamsError("Argument values must not exceed 1000 characters")
        for pattern in DANGEROUS_PATTERNS:
            if pattern in key or pattern in value_str:
                raise InvalidParamsError(
                    f"Arguments contain potentially unsafe pattern: {pattern}"
                )


class Router(ABC):
    """Supplies tools, resources and prompts and answers MCP requests with them."""

    @abstractmethod
    def name(self) -> str:
        """Return the server name reported on initialization."""

    @abstractmethod
    def instructions(self) -> Optional[str]:
        """Return the instructions reported on initialization."""

    @abstractmethod
    def capabilities(self) -> ServerCapabilities:
        """Return the capabilities reported on initialization."""

    @abstractmethod
    async def list_tools(self) -> list[Tool]:
        """Return every tool."""

    @abstractmethod
    async def call_tool(self, tool_name: str, arguments: Any) -> list[dict[str, Any]]:
        """Run a tool and return its content items; raise ToolError on failure."""

    @abstractmethod
    async def list_resources(self) -> list[Resource]:
        """Return every resource."""

    @abstractmethod
    async def read_resource(self, uri: str) -> str:
        """Return a resource's text; raise ResourceError on failure."""

    @abstractmethod
    async def list_prompts(self) -> list[Prompt]:
        """Return every prompt."""

    @abstractmethod
    async def get_prompt(self, prompt_name: str, params: Any) -> str:
        """Return a prompt's template text; raise PromptError on failure."""

    def create_response(self, request_id: Optional[int]) -> JsonRpcResponse:
        """Return an empty response for the given request id."""
        return JsonRpcResponse(id=request_id)

    def _respond(self, request: JsonRpcRequest, result: dict[str, Any]) -> JsonRpcResponse:
        response = self.create_response(request.id)
        response.result = result
        return response

    async def handle_initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        result: dict[str, Any] = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self.capabilities().to_dict(),
            "serverInfo": {"name": self.name(), "version": SERVER_VERSION},
        }
        instructions = self.instructions()
        if instructions is not None:
            result["instructions"] = instructions
        return self._respond(request, result)

    async def handle_tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        tools = await self.list_tools()
        return self._respond(request, {"tools": [tool.to_dict() for tool in tools]})

    async def handle_tools_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = _require_params(request)
        name = _string_field(params, "name", "Missing tool name")
        arguments = params.get("arguments")
        try:
            content = await self.call_tool(name, arguments)
            result: dict[str, Any] = {"content": list(content)}
        except ToolError as err:
            result = {"content": [text_content(str(err))], "isError": True}
        return self._respond(request, result)

    async def handle_resources_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        resources = await self.list_resources()
        return self._respond(
            request, {"resources": [resource.to_dict() for resource in resources]}
        )

    async def handle_resources_read(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = _require_params(request)
        uri = _string_field(params, "uri", "Missing resource URI")
        try:
            text = await self.read_resource(uri)
        except ResourceError as err:
            raise router_error_from_resource_error(err) from err
        contents = [{"uri": uri, "mimeType": "text/plain", "text": text}]
        return self._respond(request, {"contents": contents})

    async def handle_prompts_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        prompts = await self.list_prompts()
        return self._respond(request, {"prompts": [prompt.to_dict() for prompt in prompts]})

    async def handle_prompts_get(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = _require_params(request)
        prompt_name = _string_field(params, "name", "Missing prompt name")
        arguments = params.get("arguments")
        if not isinstance(arguments, Mapping):
            raise InvalidParamsError("Missing arguments object")

        prompts = await self.list_prompts()
        prompt = next((p for p in prompts if p.name == prompt_name), None)
        if prompt is None:
            raise PromptNotFoundError(f"Prompt '{prompt_name}' not found")

        for argument in prompt.arguments or ():
            if argument.required:
                value = arguments.get(argument.name)
                if not isinstance(value, str) or not value:
                    raise InvalidParamsError(f"Missing required argument: '{argument.name}'")

        try:
            description = await self.get_prompt(prompt_name, params)
        except PromptError as err:
            raise RouterInternalError(str(err)) from err

        _check_prompt_arguments(arguments)

        if _byte_length(description) > MAX_PROMPT_LENGTH:
            raise RouterInternalError("Prompt description exceeds maximum allowed length")

        filled = description
        for key, value in arguments.items():
            filled = filled.replace(f"{{{key}}}", value if isinstance(value, str) else "")

        messages = [{"role": "user", "content": text_content(filled)}]
        return self._respond(request, {"description": filled, "messages": messages})


class RouterService:
    """Dispatches each request to the router handler for its method."""

    def __init__(self, router: Router) -> None:
        self.router = router
        self._handlers: dict[str, Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]] = {
            "initialize": router.handle_initialize,
            "tools/list": router.handle_tools_list,
            "tools/call": router.handle_tools_call,
            "resources/list": router.handle_resources_list,
            "resources/read": router.handle_resources_read,
            "prompts/list": router.handle_prompts_list,
            "prompts/get": router.handle_prompts_get,
        }

    async def call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Answer a request; raises RouterError when its handler fails."""
        handler = self._handlers.get(request.method)
        if handler is None:
            response = self.router.create_response(request.id)
            response.error = MethodNotFoundError(request.method).to_error_data()
            return response
        return await handler(request)