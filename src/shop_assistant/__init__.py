"""Shop Assistant - a tool-calling conversation engine for product search."""

from .llm_core import (
    AssistantSettings,
    ChatRequest,
    ChatTurn,
    ConversationalResponse,
    LLMGateway,
    ModelReply,
    Product,
    ToolCall,
    ToolExecutionResult,
    ToolExecutor,
    ToolRegistry,
    setup_logging,
)
from .llm_impl import GeminiGateway, OpenAIGateway
from .memory import ConversationMemory, InMemoryConversationMemory
from .orchestration import ConversationOrchestrator
from .product_tools import InMemoryProductCatalog, StaticSearchSource, build_default_registry
from .factory import build_gateway, build_orchestrator

__all__ = [
    "AssistantSettings",
    "ChatRequest",
    "ChatTurn",
    "ConversationalResponse",
    "LLMGateway",
    "ModelReply",
    "Product",
    "ToolCall",
    "ToolExecutionResult",
    "ToolExecutor",
    "ToolRegistry",
    "setup_logging",
    "GeminiGateway",
    "OpenAIGateway",
    "ConversationMemory",
    "InMemoryConversationMemory",
    "ConversationOrchestrator",
    "InMemoryProductCatalog",
    "StaticSearchSource",
    "build_default_registry",
    "build_gateway",
    "build_orchestrator",
]
