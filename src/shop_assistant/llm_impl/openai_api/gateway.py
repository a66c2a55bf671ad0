from typing import Any, Callable, Dict, Iterable, List, Optional, cast

import openai
from openai import AsyncOpenAI

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.gateway import ClientPool, LLMGateway, ModelReply
from shop_assistant.llm_core.messages import ChatTurn
from .adapter import OpenAITurnAdapter

logger = get_logger(__name__)


def default_client_factory(api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key)


async def close_client(client: AsyncOpenAI) -> None:
    await client.close()


class OpenAIGateway(LLMGateway):
    """
    LLMGateway backed by OpenAI chat completions.
    """

    missing_credentials_message = "Please provide an OpenAI API key in settings to use the AI assistant."
    upstream_errors = (openai.APIError, ConnectionError)

    def __init__(
        self,
        model_name: str = "gpt-4o-mini",
        temp: float = 0.9,
        max_tokens: int = 2048,
        top_p: float = 0.95,
        request_timeout: float = 120.0,
        client_factory: Callable[[str], AsyncOpenAI] = default_client_factory,
        max_retries: int = 0,
        max_clients: int = 16,
    ):
        """
        Initializes the OpenAI gateway.

        Args:
            model_name: The OpenAI model identifier.
            temp: The temperature for text generation.
            max_tokens: The maximum number of tokens to generate in the response.
            top_p: Nucleus sampling parameter.
            request_timeout: Upper bound in seconds for one request.
            client_factory: Builds an async client from an API key.
            max_retries: Retries after an upstream failure.
            max_clients: API keys whose clients are kept open at the same time.
        """
        super().__init__(request_timeout=request_timeout, max_retries=max_retries)
        self.model = model_name
        self.temperature = temp
        self.max_tokens = max_tokens
        self.top_p = top_p
        self._clients: ClientPool[AsyncOpenAI] = ClientPool(client_factory, close_client, max_clients)

    async def aclose(self) -> None:
        """Closes every pooled client."""
        await self._clients.aclose()

    async def _generate_impl(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        messages = OpenAITurnAdapter.to_messages(system_prompt, turns)
        tools = OpenAITurnAdapter.to_tools(tool_catalog)

        request: Dict[str, Any] = {
            "model": self.model,
            # The SDK expects a union of typed message params; plain dicts are structurally compatible
            "messages": cast(Iterable[Any], messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }
        if tools:
            request["tools"] = tools

        async with self._clients.lease(credentials) as client:
            response = await client.chat.completions.create(**request)
        return OpenAITurnAdapter.to_reply(response)
