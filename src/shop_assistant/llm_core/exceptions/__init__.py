"""Export the error taxonomy used across tool execution and gateway paths."""

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

__all__ = [
    "ErrorKind",
    "ShopAssistantError",
    "ToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolValidationError",
    "ToolExecutionError",
    "GatewayError",
    "UpstreamUnavailableError",
]
