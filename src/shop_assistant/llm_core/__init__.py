"""Public exports for the core abstractions: turns, models, tools, gateway and utilities."""

from .logger import get_logger, setup_logging
from .exceptions import (
    ErrorKind,
    ShopAssistantError,
    ToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolValidationError,
    ToolExecutionError,
    GatewayError,
    UpstreamUnavailableError,
)
from .messages import ChatTurn, Role, ToolCall, ToolResultContent
from .models import Product, ChatRequest, ConversationalResponse, dedupe_products, products_from_payload
from .config import AssistantSettings
from .tools import (
    ToolCapability,
    FunctionTool,
    ToolKind,
    ToolSpec,
    ToolExecutionResult,
    ToolRegistry,
    ToolExecutor,
    ToolResultCache,
    MetricsTable,
    MetricsSnapshot,
    DEFAULT_CACHEABLE_TOOLS,
    build_function_declarations,
)
from .gateway import LLMGateway, ModelReply

__all__ = [
    "get_logger",
    "setup_logging",
    "ErrorKind",
    "ShopAssistantError",
    "ToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolValidationError",
    "ToolExecutionError",
    "GatewayError",
    "UpstreamUnavailableError",
    "ChatTurn",
    "Role",
    "ToolCall",
    "ToolResultContent",
    "Product",
    "ChatRequest",
    "ConversationalResponse",
    "dedupe_products",
    "products_from_payload",
    "AssistantSettings",
    "ToolCapability",
    "FunctionTool",
    "ToolKind",
    "ToolSpec",
    "ToolExecutionResult",
    "ToolRegistry",
    "ToolExecutor",
    "ToolResultCache",
    "MetricsTable",
    "MetricsSnapshot",
    "DEFAULT_CACHEABLE_TOOLS",
    "build_function_declarations",
    "LLMGateway",
    "ModelReply",
]
