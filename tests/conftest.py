import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

import pytest
from dotenv import find_dotenv, load_dotenv

from shop_assistant.llm_core import (
    AssistantSettings,
    ChatTurn,
    LLMGateway,
    ModelReply,
    Product,
    ToolCapability,
    ToolExecutionResult,
    ToolSpec,
)
from shop_assistant.product_tools import InMemoryProductCatalog, StaticSearchSource

# Tests never need real keys, but a local .env may tune logging or models
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)


class ScriptedGateway(LLMGateway):
    """Gateway replaying scripted replies and recording every request it receives."""

    upstream_errors = (ConnectionError,)

    def __init__(
        self,
        replies: Sequence[Union[ModelReply, BaseException]] = (),
        default: Optional[ModelReply] = None,
        request_timeout: float = 5.0,
        delay: float = 0.0,
    ) -> None:
        super().__init__(request_timeout=request_timeout)
        self.delay = delay
        self.replies = list(replies)
        self.default = default if default is not None else ModelReply(text="Nothing more to add.")
        self.requests: List[Dict[str, Any]] = []

    async def _generate_impl(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        self.requests.append(
            {"system_prompt": system_prompt, "turns": list(turns), "tool_catalog": tool_catalog, "credentials": credentials}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.replies:
            return self.default
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class StubTool(ToolCapability):
    """Tool whose behaviour is delegated to an async callable, usually an AsyncMock."""

    def __init__(self, name: str, handler: Callable[[Dict[str, Any]], Awaitable[ToolExecutionResult]]) -> None:
        self._spec = ToolSpec(name=name, description=f"Stub tool {name}")
        self.handler = handler

    @property
    def spec(self) -> ToolSpec:
        return self._spec

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        return await self.handler(arguments)


@pytest.fixture
def products() -> List[Product]:
    return [
        Product(id=1, name="Apple iPhone 15 128GB", price=349990, store_name="eMAG", user_id="user-1"),
        Product(id=2, name="Apple iPhone 15 Pro 256GB", price=499990, store_name="Media Markt", user_id="user-1"),
        Product(id=3, name="Apple iPhone 14 128GB Blue", price=289990, store_name="eMAG", user_id="user-2"),
        Product(id=4, name="Samsung Galaxy S24", price=319990, store_name="Alza", user_id="user-2"),
    ]


@pytest.fixture
def catalog(products: List[Product]) -> InMemoryProductCatalog:
    return InMemoryProductCatalog(products)


@pytest.fixture
def search_source(products: List[Product]) -> StaticSearchSource:
    return StaticSearchSource(products)


@pytest.fixture
def settings() -> AssistantSettings:
    return AssistantSettings(tool_retry_delay=0.0)


@pytest.fixture
def scripted_gateway() -> Callable[..., ScriptedGateway]:
    return ScriptedGateway


@pytest.fixture
def stub_tool() -> Callable[..., StubTool]:
    return StubTool
