"""Tool capabilities, registry, catalog building and execution."""

from .models import ToolExecutionResult, ToolKind, ToolSpec
from .capability import FunctionTool, ToolCapability
from .registry import ToolRegistry
from .schema import SchemaValidator, ToolParameterFactory, build_function_declarations
from .execution import (
    DEFAULT_CACHEABLE_TOOLS,
    MetricsSnapshot,
    MetricsTable,
    ToolExecutor,
    ToolMetrics,
    ToolResultCache,
)

__all__ = [
    "ToolExecutionResult",
    "ToolKind",
    "ToolSpec",
    "FunctionTool",
    "ToolCapability",
    "ToolRegistry",
    "SchemaValidator",
    "ToolParameterFactory",
    "build_function_declarations",
    "DEFAULT_CACHEABLE_TOOLS",
    "MetricsSnapshot",
    "MetricsTable",
    "ToolExecutor",
    "ToolMetrics",
    "ToolResultCache",
]
