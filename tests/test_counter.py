import pytest

from mcpserver.counter import CounterRouter
from mcpserver.errors import (
    InvalidParamsError,
    ResourceNotFoundError,
    UnknownPromptError,
    UnknownResourceError,
    UnknownToolError,
)
from mcpserver.protocol import JsonRpcRequest, text_content
from mcpserver.router import RouterService


@pytest.mark.asyncio
async def test_counter_starts_at_zero_and_increments():
    router = CounterRouter()
    assert await router.get_value() == 0
    first = await router.increment()
    assert await router.get_value() == first
    second = await router.increment()
    assert second == first + 1


@pytest.mark.asyncio
async def test_decrement_undoes_increment():
    router = CounterRouter()
    before = await router.get_value()
    await router.increment()
    assert await router.decrement() == before


@pytest.mark.asyncio
async def test_call_tool_returns_text_content():
    router = CounterRouter()
    content = await router.call_tool("increment", {})
    value = await router.get_value()
    assert content == [text_content(str(value))]
    assert await router.call_tool("get_value", {}) == content


@pytest.mark.asyncio
async def test_call_unknown_tool_raises():
    router = CounterRouter()
    with pytest.raises(UnknownToolError) as info:
        await router.call_tool("nope", {})
    assert info.value.detail == "Tool nope not found"


@pytest.mark.asyncio
async def test_list_tools_names():
    tools = await CounterRouter().list_tools()
    assert [tool.name for tool in tools] == ["increment", "decrement", "get_value"]
    assert all(tool.input_schema["type"] == "object" for tool in tools)


@pytest.mark.asyncio
async def test_read_resources():
    router = CounterRouter()
    assert await router.read_resource("str:////Users/to/some/path/") == "/Users/to/some/path/"
    memo = await router.read_resource("memo://insights")
    assert memo.startswith("Business Intelligence Memo\n\n")
    uris = [resource.uri for resource in await router.list_resources()]
    assert uris == ["str:////Users/to/some/path/", "memo://insights"]


@pytest.mark.asyncio
async def test_read_unknown_resource_raises():
    with pytest.raises(UnknownResourceError):
        await CounterRouter().read_resource("memo://missing")


@pytest.mark.asyncio
async def test_get_unknown_prompt_raises():
    with pytest.raises(UnknownPromptError):
        await CounterRouter().get_prompt("missing", {})


def test_capabilities_all_disabled_list_changes():
    caps = CounterRouter().capabilities().to_dict()
    assert caps == {
        "prompts": {"listChanged": False},
        "resources": {"subscribe": False, "listChanged": False},
        "tools": {"listChanged": False},
    }


@pytest.mark.asyncio
async def test_initialize_through_service():
    service = RouterService(CounterRouter())
    response = await service.call(JsonRpcRequest(id=1, method="initialize"))
    assert response.id == 1
    assert response.result["serverInfo"]["name"] == "counter"
    assert response.result["instructions"].startswith("This server provides a counter tool")


@pytest.mark.asyncio
async def test_unknown_tool_through_service_is_error_result():
    service = RouterService(CounterRouter())
    request = JsonRpcRequest(id=2, method="tools/call", params={"name": "nope", "arguments": {}})
    response = await service.call(request)
    assert response.result["isError"] is True
    assert "Tool nope not found" in response.result["content"][0]["text"]


@pytest.mark.asyncio
async def test_prompt_filled_through_service():
    service = RouterService(CounterRouter())
    request = JsonRpcRequest(
        id=3,
        method="prompts/get",
        params={"name": "example_prompt", "arguments": {"message": "hello there!"}},
    )
    response = await service.call(request)
    expected = "This is an example prompt with your message here: 'hello there!'"
    assert response.result["description"] == expected
    assert response.result["messages"][0]["content"]["text"] == expected


@pytest.mark.asyncio
async def test_prompt_missing_required_argument_through_service():
    service = RouterService(CounterRouter())
    request = JsonRpcRequest(
        id=4, method="prompts/get", params={"name": "example_prompt", "arguments": {}}
    )
    with pytest.raises(InvalidParamsError):
        await service.call(request)


@pytest.mark.asyncio
async def test_unknown_resource_through_service():
    service = RouterService(CounterRouter())
    request = JsonRpcRequest(id=5, method="resources/read", params={"uri": "memo://missing"})
    with pytest.raises(ResourceNotFoundError) as info:
        await service.call(request)
    assert info.value.detail == "Resource memo://missing not found"