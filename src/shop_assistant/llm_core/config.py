"""Runtime settings for the assistant, loaded from the environment or a ``.env`` file."""

import os
from typing import Any, Dict, Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from .logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "SHOP_ASSISTANT_"


class AssistantSettings(BaseModel):
    """Tunables for the gateway, executor, orchestrator and memory.

    Attributes:
        provider: Which LLM backend to talk to.
        gemini_model: Gemini model identifier.
        openai_model: OpenAI model identifier.
        llm_timeout: Upper bound in seconds for one gateway request.
        llm_max_clients: Provider clients kept open at once, one per API key.
        temperature: Sampling temperature.
        max_output_tokens: Maximum tokens generated per reply.
        top_p: Nucleus sampling parameter.
        max_iterations: Total model calls allowed per orchestrator run.
        parallel_tools: Run the tool calls of one model turn concurrently.
        tool_max_attempts: Attempts per tool call before giving up.
        tool_retry_delay: First backoff delay in seconds, doubled after each failure.
        tool_time_budget: Optional bound in seconds for one tool call including retries.
        cache_ttl: Lifetime in seconds of cached tool results.
        cache_max_entries: Capacity of the tool result cache.
        history_limit: Turns loaded from memory per run.
        memory_max_turns: Turns retained per conversation by the in-memory store.
        duplicate_window: Seconds within which an identical user turn is not saved twice.
    """

    provider: Literal["gemini", "openai"] = "gemini"
    gemini_model: str = "gemini-2.0-flash"
    openai_model: str = "gpt-4o-mini"
    llm_timeout: float = Field(default=120.0, gt=0)
    llm_max_clients: int = Field(default=16, ge=1)
    temperature: float = Field(default=0.9, ge=0, le=2)
    max_output_tokens: int = Field(default=2048, gt=0)
    top_p: float = Field(default=0.95, gt=0, le=1)

    max_iterations: int = Field(default=5, ge=1)
    parallel_tools: bool = False

    tool_max_attempts: int = Field(default=3, ge=1)
    tool_retry_delay: float = Field(default=0.5, ge=0)
    tool_time_budget: Optional[float] = Field(default=None, gt=0)
    cache_ttl: float = Field(default=300.0, gt=0)
    cache_max_entries: int = Field(default=1024, ge=1)

    history_limit: int = Field(default=50, ge=0)
    memory_max_turns: int = Field(default=100, ge=1)
    duplicate_window: float = Field(default=5.0, ge=0)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides: Any) -> "AssistantSettings":
        """Build settings from ``SHOP_ASSISTANT_*`` environment variables.

        A ``.env`` file is loaded first when one is found; variables already set
        in the process environment take precedence.

        Args:
            env_file: Explicit path to a ``.env`` file. Searched for when omitted.
            **overrides: Values that win over the environment.

        Returns:
            The validated settings.
        """
        path = env_file or find_dotenv(usecwd=True)
        if path:
            logger.debug(f"Loading environment from {path}")
            load_dotenv(path, override=False)

        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        values.update(overrides)
        return cls.model_validate(values)
