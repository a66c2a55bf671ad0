from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from shop_assistant.llm_core import ChatTurn, ToolCall, UpstreamUnavailableError
from shop_assistant.llm_impl import GeminiGateway
from shop_assistant.llm_impl.gemini.adapter import NO_CANDIDATES_MESSAGE, GeminiTurnAdapter

CATALOG = [
    {
        "name": "search_products",
        "description": "Searches for products.",
        "parameters": {
            "type": "object",
            "properties": {"query": {"type": "string", "description": "The search query"}},
            "required": ["query"],
            "additionalProperties": False,
        },
    },
    {"name": "get_user_products", "description": "Lists saved products.", "parameters": {"type": "object", "properties": {}}},
]


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def test_to_contents_groups_tool_results() -> None:
    first = ToolCall(name="search_products", arguments={"query": "iPhone"})
    second = ToolCall(name="get_user_products", arguments={})
    turns = [
        ChatTurn.user("find iPhone"),
        ChatTurn.model("Searching now.", [first, second]),
        ChatTurn.tool("search_products", {"count": 0, "products": []}, first.call_id),
        ChatTurn.tool("get_user_products", {"count": 0}, second.call_id),
        ChatTurn.model("Nothing found."),
    ]

    contents = GeminiTurnAdapter.to_contents(turns)

    assert [c.role for c in contents] == ["user", "model", "user", "model"]
    model_parts = contents[1].parts or []
    assert model_parts[0].text == "Searching now."
    assert model_parts[1].function_call is not None
    assert model_parts[1].function_call.name == "search_products"
    assert model_parts[1].function_call.args == {"query": "iPhone"}
    result_parts = contents[2].parts or []
    assert [p.function_response.name for p in result_parts if p.function_response] == [
        "search_products",
        "get_user_products",
    ]


def test_to_tool_strips_unsupported_keys() -> None:
    tool = GeminiTurnAdapter.to_tool(CATALOG)

    assert tool is not None
    declarations = tool.function_declarations or []
    assert [d.name for d in declarations] == ["search_products", "get_user_products"]
    assert declarations[0].parameters is not None
    assert declarations[1].parameters is None
    assert GeminiTurnAdapter.to_tool([]) is None


def test_to_reply_parses_text_and_calls() -> None:
    response = make_response(
        types.Part(text="Let me look. "),
        types.Part(text="internal reasoning", thought=True),
        types.Part(function_call=types.FunctionCall(name="search_products", args={"query": "iPhone"})),
    )

    reply = GeminiTurnAdapter.to_reply(response)

    assert reply.text == "Let me look. "
    assert [(c.name, c.arguments) for c in reply.tool_calls] == [("search_products", {"query": "iPhone"})]


def test_to_reply_without_candidates() -> None:
    reply = GeminiTurnAdapter.to_reply(types.GenerateContentResponse(candidates=[]))
    assert reply.text == NO_CANDIDATES_MESSAGE
    assert reply.tool_calls == []


@pytest.mark.asyncio
async def test_gateway_sends_config_and_reuses_client_per_key() -> None:
    client = MagicMock()
    client.models.generate_content = AsyncMock(return_value=make_response(types.Part(text="Hi there!")))
    factory = MagicMock(return_value=client)
    gateway = GeminiGateway(model_name="gemini-2.0-flash", client_factory=factory)

    reply = await gateway.generate("hello", "You are a shop assistant.", [], CATALOG, "key-1")
    await gateway.generate("hello again", "You are a shop assistant.", [], [], "key-1")

    assert reply.text == "Hi there!"
    factory.assert_called_once_with("key-1")
    first_call = client.models.generate_content.call_args_list[0].kwargs
    assert first_call["model"] == "gemini-2.0-flash"
    config = first_call["config"]
    assert config.system_instruction == "You are a shop assistant."
    assert config.tools is not None
    assert config.automatic_function_calling.disable is True
    second_config = client.models.generate_content.call_args_list[1].kwargs["config"]
    assert second_config.tools is None


@pytest.mark.asyncio
async def test_gateway_missing_key_message() -> None:
    factory = MagicMock()
    gateway = GeminiGateway(client_factory=factory)

    reply = await gateway.generate("hello", None, [], [], None)

    assert reply.text == "Please provide a Gemini API key in settings to use the AI assistant."
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_gateway_maps_connection_errors() -> None:
    client = MagicMock()
    client.models.generate_content = AsyncMock(side_effect=ConnectionError("network down"))
    gateway = GeminiGateway(client_factory=MagicMock(return_value=client))

    with pytest.raises(UpstreamUnavailableError):
        await gateway.generate("hello", None, [], [], "key")


@pytest.mark.asyncio
async def test_gateway_closes_evicted_clients() -> None:
    created: List[MagicMock] = []

    def factory(api_key: str) -> MagicMock:
        client = MagicMock()
        client.models.generate_content = AsyncMock(return_value=make_response(types.Part(text="ok")))
        client.aclose = AsyncMock()
        created.append(client)
        return client

    gateway = GeminiGateway(client_factory=factory, max_clients=2)

    for key in ("key-1", "key-2", "key-3", "key-1"):
        await gateway.generate("hello", None, [], [], key)

    assert len(gateway._clients) == 2
    assert len(created) == 4
    assert created[0].aclose.await_count == 1
    assert created[1].aclose.await_count == 1
    assert created[2].aclose.await_count == 0
