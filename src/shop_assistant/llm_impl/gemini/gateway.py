from typing import Any, Callable, Dict, List, Optional

from google import genai
from google.genai import errors, types
from google.genai.client import AsyncClient

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.gateway import ClientPool, LLMGateway, ModelReply
from shop_assistant.llm_core.messages import ChatTurn
from .adapter import GeminiTurnAdapter

logger = get_logger(__name__)


def default_client_factory(api_key: str) -> AsyncClient:
    return genai.Client(api_key=api_key).aio


async def close_client(client: AsyncClient) -> None:
    await client.aclose()


class GeminiGateway(LLMGateway):
    """
    LLMGateway backed by Google's Gemini models.

    A client is created per API key through ``client_factory`` and reused for
    later requests with the same key. At most ``max_clients`` clients are kept;
    the least recently used one is closed when another key arrives.
    """

    missing_credentials_message = "Please provide a Gemini API key in settings to use the AI assistant."
    upstream_errors = (errors.APIError, ConnectionError)

    def __init__(
        self,
        model_name: str = "gemini-2.0-flash",
        temp: float = 0.9,
        max_tokens: int = 2048,
        top_p: float = 0.95,
        request_timeout: float = 120.0,
        client_factory: Callable[[str], AsyncClient] = default_client_factory,
        max_retries: int = 0,
        max_clients: int = 16,
    ):
        """
        Initializes the Gemini gateway.

        Args:
            model_name: The Gemini model identifier (e.g. 'gemini-2.0-flash').
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
        self._clients: ClientPool[AsyncClient] = ClientPool(client_factory, close_client, max_clients)
        logger.info(f"Initialized GeminiGateway with model='{model_name}', temp={temp}, max_tokens={max_tokens}")

    async def aclose(self) -> None:
        """Closes every pooled client."""
        await self._clients.aclose()

    def build_config(self, system_prompt: Optional[str], tool_catalog: List[Dict[str, Any]]) -> types.GenerateContentConfig:
        tool = GeminiTurnAdapter.to_tool(tool_catalog)
        return types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            top_p=self.top_p,
            tools=[tool] if tool else None,
            # The orchestrator runs the tools itself
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True) if tool else None,
        )

    async def _generate_impl(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        contents = GeminiTurnAdapter.to_contents(turns)
        logger.debug(f"Sending {len(contents)} content(s) to Gemini model '{self.model}' with {len(tool_catalog)} tool(s).")

        async with self._clients.lease(credentials) as client:
            response = await client.models.generate_content(
                model=self.model,
                contents=contents,  # type: ignore[arg-type]
                config=self.build_config(system_prompt, tool_catalog),
            )
        reply = GeminiTurnAdapter.to_reply(response)
        logger.debug(f"Gemini replied with {len(reply.text)} chars and {len(reply.tool_calls)} tool call(s).")
        return reply
