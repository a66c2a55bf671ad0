"""Shared tool executor: resolution, caching, retry with backoff and metrics."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence

from ...exceptions import ErrorKind, ToolNotFoundError
from ...logger import get_logger
from ...messages import ToolCall
from ..capability import ToolCapability
from ..models import ToolExecutionResult
from ..registry import ToolRegistry
from .cache import ToolResultCache, make_cache_key
from .metrics import MetricsSnapshot, MetricsTable

logger = get_logger(__name__)

# Side-effect-free lookups. Search and comparison always run fresh.
DEFAULT_CACHEABLE_TOOLS: FrozenSet[str] = frozenset({"get_product_details", "get_user_products", "get_price_analytics"})


class ToolExecutor:
    """Executes tool calls on behalf of every conversation.

    One instance is shared by all concurrent orchestrator runs. Failures are
    always returned as ``ToolExecutionResult`` values; only cancellation
    propagates.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        metrics: Optional[MetricsTable] = None,
        cache: Optional[ToolResultCache[ToolExecutionResult]] = None,
        cacheable_tools: Iterable[str] = DEFAULT_CACHEABLE_TOOLS,
        max_attempts: int = 3,
        base_retry_delay: float = 0.5,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: Registry the tool names are resolved against.
            metrics: Metrics table to record into. A private one is created when omitted.
            cache: Result cache for cacheable tools. A default one is created when omitted.
            cacheable_tools: Names of the tools whose successful results may be cached.
            max_attempts: Attempts per call before giving up.
            base_retry_delay: Delay in seconds after the first failed attempt, doubled after each further one.
            sleep: Awaitable sleep used for backoff, injectable for tests.
            clock: Time source in seconds used for latency measurement.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.registry = registry
        self.metrics = metrics if metrics is not None else MetricsTable()
        self.cache: ToolResultCache[ToolExecutionResult] = cache if cache is not None else ToolResultCache()
        self.cacheable_tools = frozenset(cacheable_tools)
        self.max_attempts = max_attempts
        self.base_retry_delay = base_retry_delay
        self._sleep = sleep
        self._clock = clock

        logger.info(f"Initialized ToolExecutor with {len(registry)} tools: {', '.join(registry.names)}")

    async def execute(self, call: ToolCall, time_budget: Optional[float] = None) -> ToolExecutionResult:
        """
        Execute one tool call.

        Args:
            call: The tool call requested by the model.
            time_budget: Optional bound in seconds for the whole call, retries and backoff included.

        Returns:
            The tool's result, a cached result, or a structured failure.

        Raises:
            asyncio.CancelledError: If the surrounding task is cancelled.
        """
        started = self._clock()
        name = (call.name or "").strip()

        if not name:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "Tool name is required")

        try:
            tool = self.registry.resolve(name)
        except ToolNotFoundError:
            logger.warning(f"Tool not found: {name}")
            return ToolExecutionResult.fail(ErrorKind.NOT_FOUND, f"Tool '{name}' not found")

        metrics = self.metrics.get(name)
        cache_key = make_cache_key(name, call.arguments) if name in self.cacheable_tools else None

        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info(f"Cache hit for tool: {name}")
                metrics.record_cache_hit()
                return cached

        try:
            if time_budget is None:
                result = await self._run_with_retry(tool, call)
            else:
                result = await asyncio.wait_for(self._run_with_retry(tool, call), timeout=time_budget)
        except asyncio.TimeoutError:
            logger.warning(f"Tool '{name}' exceeded its time budget of {time_budget}s")
            result = ToolExecutionResult.fail(
                ErrorKind.UPSTREAM_UNAVAILABLE, f"Tool '{name}' did not finish within {time_budget} seconds"
            )

        if result.success and cache_key is not None:
            self.cache.set(cache_key, result)
            logger.debug(f"Cached result for tool: {name}")

        duration_ms = (self._clock() - started) * 1000
        metrics.record_execution(duration_ms, result.success)
        logger.info(f"Tool execution completed: {name}, success: {result.success}, duration: {duration_ms:.1f}ms")
        return result

    async def execute_many(
        self, calls: Sequence[ToolCall], time_budget: Optional[float] = None
    ) -> List[ToolExecutionResult]:
        """Execute a batch of tool calls concurrently. Results keep the input order."""
        logger.info(f"Executing {len(calls)} tools in parallel")
        return list(await asyncio.gather(*(self.execute(call, time_budget) for call in calls)))

    def metrics_for(self, tool_name: str) -> MetricsSnapshot:
        return self.metrics.snapshot(tool_name)

    def all_metrics(self) -> Dict[str, MetricsSnapshot]:
        return self.metrics.snapshot_all()

    async def _run_with_retry(self, tool: ToolCapability, call: ToolCall) -> ToolExecutionResult:
        """Run the tool up to ``max_attempts`` times with exponential backoff between attempts."""
        delay = self.base_retry_delay
        last_failure: Optional[ToolExecutionResult] = None

        for attempt in range(1, self.max_attempts + 1):
            logger.info(f"Executing tool: {tool.name} (attempt {attempt}/{self.max_attempts}) with arguments: {call.arguments}")
            try:
                result = await tool.execute(dict(call.arguments))
            except Exception as exc:
                if attempt == self.max_attempts:
                    logger.error(f"Error executing tool: {tool.name}", exc_info=True)
                    return ToolExecutionResult.fail(ErrorKind.EXECUTION_ERROR, str(exc) or type(exc).__name__)
                logger.warning(f"Error executing tool '{tool.name}' (attempt {attempt}): {exc}. Retrying in {delay}s")
            else:
                if result.success:
                    return result
                last_failure = result
                if attempt == self.max_attempts:
                    break
                logger.warning(f"Tool '{tool.name}' failed, retrying in {delay}s: {result.error_message}")

            await self._sleep(delay)
            delay *= 2  # Exponential backoff

        message = last_failure.error_message if last_failure and last_failure.error_message else None
        return ToolExecutionResult.fail(ErrorKind.EXECUTION_FAILED, message or "Tool execution failed after retries")
