"""Wiring of settings, gateway, tools, executor and memory into an orchestrator."""

from typing import Optional

from shop_assistant.llm_core import (
    AssistantSettings,
    LLMGateway,
    MetricsTable,
    ToolExecutor,
    ToolResultCache,
    get_logger,
)
from shop_assistant.llm_impl import GeminiGateway, OpenAIGateway
from shop_assistant.memory import ConversationMemory, InMemoryConversationMemory
from shop_assistant.orchestration import ConversationOrchestrator
from shop_assistant.product_tools import ProductCatalog, ProductSearchSource, build_default_registry

logger = get_logger(__name__)


def build_gateway(settings: AssistantSettings) -> LLMGateway:
    """Gateway for the configured provider."""
    if settings.provider == "openai":
        return OpenAIGateway(
            model_name=settings.openai_model,
            temp=settings.temperature,
            max_tokens=settings.max_output_tokens,
            top_p=settings.top_p,
            request_timeout=settings.llm_timeout,
            max_clients=settings.llm_max_clients,
        )
    return GeminiGateway(
        model_name=settings.gemini_model,
        temp=settings.temperature,
        max_tokens=settings.max_output_tokens,
        top_p=settings.top_p,
        request_timeout=settings.llm_timeout,
        max_clients=settings.llm_max_clients,
    )


def build_orchestrator(
    search_source: ProductSearchSource,
    catalog: ProductCatalog,
    settings: Optional[AssistantSettings] = None,
    memory: Optional[ConversationMemory] = None,
    gateway: Optional[LLMGateway] = None,
) -> ConversationOrchestrator:
    """
    Assemble a ready-to-use orchestrator.

    Args:
        search_source: Backend of the ``search_products`` tool.
        catalog: Backend of the stored-product tools.
        settings: Tunables. Read from the environment when omitted.
        memory: Conversation store. An in-memory store is created when omitted.
        gateway: LLM backend. Built from ``settings.provider`` when omitted.

    Returns:
        The orchestrator with all shopping tools registered.
    """
    settings = settings or AssistantSettings.from_env()
    registry = build_default_registry(search_source, catalog)
    executor = ToolExecutor(
        registry,
        metrics=MetricsTable(),
        cache=ToolResultCache(ttl=settings.cache_ttl, max_entries=settings.cache_max_entries),
        max_attempts=settings.tool_max_attempts,
        base_retry_delay=settings.tool_retry_delay,
    )
    if memory is None:
        memory = InMemoryConversationMemory(
            max_turns=settings.memory_max_turns, duplicate_window=settings.duplicate_window
        )
    gateway = gateway or build_gateway(settings)
    logger.info(f"Built orchestrator using {type(gateway).__name__} with {len(registry)} tools")
    return ConversationOrchestrator(gateway, executor, registry=registry, memory=memory, settings=settings)
