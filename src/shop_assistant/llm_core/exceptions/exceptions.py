"""
Error taxonomy and exception classes for the shop assistant engine.

Tool execution never raises: its outcomes are reported as ``ToolExecutionResult``
values tagged with an ``ErrorKind``. The exceptions below are raised only while
the tool catalog is being assembled and at the LLM gateway boundary.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification attached to every failed tool or gateway outcome."""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    # Never attached to a result: cancellation propagates as asyncio.CancelledError
    CANCELLED = "CANCELLED"


class ShopAssistantError(Exception):
    """Base exception for all engine errors."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str = "", kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ToolError(ShopAssistantError):
    """Base exception for tool-related errors."""

    pass


class ToolRegistrationError(ToolError):
    """Raised when a tool cannot be registered (name collision, frozen registry)."""

    kind = ErrorKind.INVALID_REQUEST


class ToolNotFoundError(ToolError):
    """Raised when a requested tool is not found in the registry."""

    kind = ErrorKind.NOT_FOUND


class ToolValidationError(ToolError):
    """Raised when tool parameters or definition are invalid."""

    kind = ErrorKind.INVALID_REQUEST


class ToolExecutionError(ToolError):
    """Raised inside a tool when it fails during execution."""

    kind = ErrorKind.EXECUTION_ERROR


class GatewayError(ShopAssistantError):
    """Base exception for LLM gateway failures."""

    pass


class UpstreamUnavailableError(GatewayError):
    """Raised when the LLM provider cannot be reached, times out or rejects the request."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
