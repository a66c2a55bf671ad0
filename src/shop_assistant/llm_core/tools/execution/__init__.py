from .cache import ToolResultCache, make_cache_key
from .metrics import MetricsSnapshot, MetricsTable, ToolMetrics
from .executor import DEFAULT_CACHEABLE_TOOLS, ToolExecutor

__all__ = [
    "ToolResultCache",
    "make_cache_key",
    "MetricsSnapshot",
    "MetricsTable",
    "ToolMetrics",
    "DEFAULT_CACHEABLE_TOOLS",
    "ToolExecutor",
]
