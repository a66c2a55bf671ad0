"""Provider-neutral LLM gateway used by the orchestrator."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, Field

from ..exceptions import UpstreamUnavailableError
from ..logger import get_logger
from ..messages import ChatTurn, Role, ToolCall

logger = get_logger(__name__)


class ModelReply(BaseModel):
    """Normalized model output: plain text plus zero or more tool call requests.

    Attributes:
        text: Concatenated text parts of the reply. May be empty.
        tool_calls: Tool invocations requested by the model, in reply order.
    """

    text: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class LLMGateway(ABC):
    """Abstract base class for provider gateways.

    ``generate`` owns the behaviour common to all providers: the credential
    short-circuit, the request timeout, optional retries and the mapping of
    provider failures to ``UpstreamUnavailableError``. Subclasses implement
    ``_generate_impl`` and list their SDK error types in ``upstream_errors``.
    """

    missing_credentials_message = "Please provide an API key in settings to use the AI assistant."
    upstream_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(self, request_timeout: float = 120.0, max_retries: int = 0, base_retry_delay: float = 1.0):
        self.request_timeout = request_timeout
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay

    async def aclose(self) -> None:
        """Releases provider connections. Gateways without pooled clients have nothing to release."""

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str],
        history: Sequence[ChatTurn],
        tool_catalog: Sequence[Dict[str, Any]],
        credentials: Optional[str],
    ) -> ModelReply:
        """
        Sends the conversation to the model and parses its reply.

        Args:
            prompt: The current prompt, sent as the final user turn.
            system_prompt: Persona and instructions for the model.
            history: Ordered conversation turns preceding the prompt.
            tool_catalog: Function declarations the model may call. Empty disables tools.
            credentials: Provider API key.

        Returns:
            The model's reply. Blank credentials yield a fixed message without any network call.

        Raises:
            UpstreamUnavailableError: If the provider fails or the request times out.
        """
        if not credentials or not credentials.strip():
            logger.warning("No API key provided; skipping model call.")
            return ModelReply(text=self.missing_credentials_message)

        turns = self.turns_for_request(history, prompt)
        return await self._execute_with_retry(system_prompt, turns, list(tool_catalog), credentials.strip())

    @staticmethod
    def turns_for_request(history: Sequence[ChatTurn], prompt: str) -> List[ChatTurn]:
        """History followed by the prompt as a user turn, unless the history already ends with it."""
        turns = list(history)
        if prompt and not (turns and turns[-1].is_plain_text and turns[-1].role == Role.USER and turns[-1].text == prompt):
            turns.append(ChatTurn.user(prompt))
        return turns

    async def _execute_with_retry(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        delay = self.base_retry_delay
        for attempt in range(self.max_retries + 1):
            try:
                return await self._call_once(system_prompt, turns, tool_catalog, credentials)
            except UpstreamUnavailableError as e:
                if attempt == self.max_retries:
                    raise
                logger.warning(f"API Error (Retry: {attempt + 1}/{self.max_retries}): {e}. Waiting {delay}s...")
                await asyncio.sleep(delay)
                delay *= 2  # Exponential backoff
        raise UpstreamUnavailableError(f"Failed to get response after {self.max_retries} retries.")

    async def _call_once(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        try:
            return await asyncio.wait_for(
                self._generate_impl(system_prompt, turns, tool_catalog, credentials),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError as exc:
            msg = f"LLM request timed out after {self.request_timeout} seconds."
            logger.error(msg)
            raise UpstreamUnavailableError(msg) from exc
        except self.upstream_errors as exc:
            logger.error(f"Error sending request to the LLM provider: {exc}", exc_info=True)
            raise UpstreamUnavailableError(str(exc)) from exc

    @abstractmethod
    async def _generate_impl(
        self, system_prompt: Optional[str], turns: List[ChatTurn], tool_catalog: List[Dict[str, Any]], credentials: str
    ) -> ModelReply:
        pass
