"""Per-tool execution counters shared by all conversations."""

import threading
from collections import deque
from typing import Deque, Dict

from pydantic import BaseModel, ConfigDict

LATENCY_WINDOW = 100


class MetricsSnapshot(BaseModel):
    """Consistent, read-only view of one tool's counters.

    Attributes:
        execution_count: Executions recorded (cache hits excluded).
        success_count: Executions that ended in success.
        failure_count: Executions that ended in failure.
        cache_hits: Calls answered from the result cache.
        average_latency_ms: Mean over the most recent latencies.
        success_rate: Percentage of successful executions.
    """

    model_config = ConfigDict(frozen=True)

    execution_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    cache_hits: int = 0
    average_latency_ms: float = 0.0
    success_rate: float = 0.0


class ToolMetrics:
    """Counters for one tool name. All updates take the instance lock."""

    def __init__(self, window: int = LATENCY_WINDOW) -> None:
        self._lock = threading.Lock()
        self._execution_count = 0
        self._success_count = 0
        self._failure_count = 0
        self._cache_hits = 0
        self._latencies_ms: Deque[float] = deque(maxlen=window)

    def record_execution(self, duration_ms: float, success: bool) -> None:
        with self._lock:
            self._execution_count += 1
            if success:
                self._success_count += 1
            else:
                self._failure_count += 1
            self._latencies_ms.append(duration_ms)

    def record_cache_hit(self) -> None:
        with self._lock:
            self._cache_hits += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            count = self._execution_count
            latencies = list(self._latencies_ms)
            return MetricsSnapshot(
                execution_count=count,
                success_count=self._success_count,
                failure_count=self._failure_count,
                cache_hits=self._cache_hits,
                average_latency_ms=sum(latencies) / len(latencies) if latencies else 0.0,
                success_rate=self._success_count / count * 100 if count else 0.0,
            )


class MetricsTable:
    """Owned map of tool name to ``ToolMetrics``, injected into the executor."""

    def __init__(self, window: int = LATENCY_WINDOW) -> None:
        self._window = window
        self._lock = threading.Lock()
        self._metrics: Dict[str, ToolMetrics] = {}

    def get(self, tool_name: str) -> ToolMetrics:
        """Return the metrics for ``tool_name``, creating them on first use."""
        with self._lock:
            metrics = self._metrics.get(tool_name)
            if metrics is None:
                metrics = self._metrics[tool_name] = ToolMetrics(self._window)
            return metrics

    def snapshot(self, tool_name: str) -> MetricsSnapshot:
        with self._lock:
            metrics = self._metrics.get(tool_name)
        return metrics.snapshot() if metrics else MetricsSnapshot()

    def snapshot_all(self) -> Dict[str, MetricsSnapshot]:
        with self._lock:
            items = list(self._metrics.items())
        return {name: metrics.snapshot() for name, metrics in items}
