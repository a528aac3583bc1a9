"""A router exposing a shared counter through tools, plus sample resources and a prompt."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from .errors import UnknownPromptError, UnknownResourceError, UnknownToolError
from .protocol import (
    Prompt,
    PromptArgument,
    Resource,
    ServerCapabilities,
    Tool,
    text_content,
)
from .router import CapabilitiesBuilder, Router

CWD_URI = "str:////Users/to/some/path/"
MEMO_URI = "memo://insights"

_RESOURCE_TEXTS = {
    CWD_URI: "/Users/to/some/path/",
    MEMO_URI: "Business Intelligence Memo\n\nAnalysis has revealed 5 key insights ...",
}

_PROMPT_TEMPLATES = {
    "example_prompt": "This is an example prompt with your message here: '{message}'",
}

_INSTRUCTIONS = (
    "This server provides a counter tool that can increment and decrement values. "
    "The counter starts at 0 and can be modified using the 'increment' and 'decrement' "
    "tools. Use 'get_value' to check the current count."
)


def _empty_schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


def _text_resource(uri: str, name: str) -> Resource:
    return Resource(uri=uri, name=name, mime_type="text/plain")


class CounterRouter(Router):
    """Keeps one integer, starting at 0, that tools raise, lower and report."""

    def __init__(self) -> None:
        self._value = 0

    async def increment(self) -> int:
        """Add one to the counter and return the new value."""
        self._value += 1
        return self._value

    async def decrement(self) -> int:
        """Subtract one from the counter and return the new value."""
        self._value -= 1
        return self._value

    async def get_value(self) -> int:
        """Return the counter's current value."""
        return self._value

    def name(self) -> str:
        return "counter"

    def instructions(self) -> Optional[str]:
        return _INSTRUCTIONS

    def capabilities(self) -> ServerCapabilities:
        return (
            CapabilitiesBuilder()
            .with_tools(False)
            .with_resources(False, False)
            .with_prompts(False)
            .build()
        )

    async def list_tools(self) -> list[Tool]:
        return [
            Tool("increment", "Increment the counter by 1", _empty_schema()),
            Tool("decrement", "Decrement the counter by 1", _empty_schema()),
            Tool("get_value", "Get the current counter value", _empty_schema()),
        ]

    async def call_tool(self, tool_name: str, arguments: Any) -> list[dict[str, Any]]:
        operations: dict[str, Callable[[], Awaitable[int]]] = {
            "increment": self.increment,
            "decrement": self.decrement,
            "get_value": self.get_value,
        }
        operation = operations.get(tool_name)
        if operation is None:
            raise UnknownToolError(f"Tool {tool_name} not found")
        return [text_content(str(await operation()))]

    async def list_resources(self) -> list[Resource]:
        return [
            _text_resource(CWD_URI, "cwd"),
            _text_resource(MEMO_URI, "memo-name"),
        ]

    async def read_resource(self, uri: str) -> str:
        try:
            return _RESOURCE_TEXTS[uri]
        except KeyError:
            raise UnknownResourceError(f"Resource {uri} not found") from None

    async def list_prompts(self) -> list[Prompt]:
        return [
            Prompt(
                name="example_prompt",
                description=(
                    "This is an example prompt that takes one required agrument, message"
                ),
                arguments=[
                    PromptArgument(
                        name="message",
                        description="A message to put in the prompt",
                        required=True,
                    )
                ],
            )
        ]

    async def get_prompt(self, prompt_name: str, params: Any) -> str:
        try:
            return _PROMPT_TEMPLATES[prompt_name]
        except KeyError:
            raise UnknownPromptError(f"Prompt {prompt_name} not found") from None