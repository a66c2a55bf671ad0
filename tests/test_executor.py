import asyncio
from typing import Any, Callable, List
from unittest.mock import AsyncMock

import pytest

from shop_assistant.llm_core import (
    ErrorKind,
    MetricsTable,
    ToolCall,
    ToolExecutionResult,
    ToolExecutor,
    ToolRegistry,
    ToolResultCache,
)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_executor(*tools: Any, **kwargs: Any) -> ToolExecutor:
    registry = ToolRegistry(tools).freeze()
    return ToolExecutor(registry, **kwargs)


@pytest.mark.asyncio
async def test_successful_call_records_metrics(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(return_value=ToolExecutionResult.ok({"count": 0, "products": []}))
    executor = make_executor(stub_tool("search_products", handler))

    result = await executor.execute(ToolCall(name="search_products", arguments={"query": "iPhone"}))

    assert result.success
    handler.assert_awaited_once_with({"query": "iPhone"})
    snapshot = executor.metrics_for("search_products")
    assert snapshot.execution_count == 1
    assert snapshot.success_count == 1
    assert snapshot.success_rate == 100.0


@pytest.mark.asyncio
async def test_unknown_and_blank_tool_names() -> None:
    executor = make_executor()

    missing = await executor.execute(ToolCall(name="does_not_exist"))
    blank = await executor.execute(ToolCall(name="  "))

    assert missing.error_code == ErrorKind.NOT_FOUND
    assert "does_not_exist" in (missing.error_message or "")
    assert blank.error_code == ErrorKind.INVALID_REQUEST
    assert executor.all_metrics() == {}


@pytest.mark.asyncio
async def test_reported_failures_are_retried_with_backoff(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(return_value=ToolExecutionResult.fail(ErrorKind.NOT_FOUND, "Product with ID 9 not found"))
    sleep = RecordingSleep()
    executor = make_executor(stub_tool("get_product_details", handler), sleep=sleep)

    result = await executor.execute(ToolCall(name="get_product_details", arguments={"productId": 9}))

    assert handler.await_count == 3
    assert sleep.delays == [0.5, 1.0]
    assert not result.success
    assert result.error_code == ErrorKind.EXECUTION_FAILED
    assert result.error_message == "Product with ID 9 not found"
    snapshot = executor.metrics_for("get_product_details")
    assert snapshot.execution_count == 1
    assert snapshot.failure_count == 1


@pytest.mark.asyncio
async def test_two_failures_then_success(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(
        side_effect=[
            ToolExecutionResult.fail(ErrorKind.UPSTREAM_UNAVAILABLE, "store timeout"),
            ToolExecutionResult.fail(ErrorKind.UPSTREAM_UNAVAILABLE, "store timeout"),
            ToolExecutionResult.ok({"query": "iPhone", "count": 0, "products": []}),
        ]
    )
    sleep = RecordingSleep()
    executor = make_executor(stub_tool("search_products", handler), sleep=sleep)

    result = await executor.execute(ToolCall(name="search_products", arguments={"query": "iPhone"}))

    assert result.success
    assert handler.await_count == 3
    assert sleep.delays == [0.5, 1.0]
    snapshot = executor.metrics_for("search_products")
    assert snapshot.execution_count == 1
    assert snapshot.success_count == 1
    assert snapshot.failure_count == 0


@pytest.mark.asyncio
async def test_fault_on_last_attempt_is_an_execution_error(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(side_effect=RuntimeError("scraper down"))
    sleep = RecordingSleep()
    executor = make_executor(stub_tool("search_products", handler), sleep=sleep)

    result = await executor.execute(ToolCall(name="search_products", arguments={"query": "x"}))

    assert handler.await_count == 3
    assert sleep.delays == [0.5, 1.0]
    assert result.error_code == ErrorKind.EXECUTION_ERROR
    assert result.error_message == "scraper down"


@pytest.mark.asyncio
async def test_fault_then_success(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(side_effect=[RuntimeError("flaky"), ToolExecutionResult.ok({"ok": True})])
    sleep = RecordingSleep()
    executor = make_executor(stub_tool("search_products", handler), sleep=sleep, base_retry_delay=0.25)

    result = await executor.execute(ToolCall(name="search_products"))

    assert result.success
    assert sleep.delays == [0.25]
    assert executor.metrics_for("search_products").success_count == 1


@pytest.mark.asyncio
async def test_single_attempt_does_not_sleep(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(return_value=ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "bad"))
    sleep = RecordingSleep()
    executor = make_executor(stub_tool("t", handler), sleep=sleep, max_attempts=1)

    result = await executor.execute(ToolCall(name="t"))

    assert sleep.delays == []
    assert result.error_code == ErrorKind.EXECUTION_FAILED


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        make_executor(max_attempts=0)


@pytest.mark.asyncio
async def test_cacheable_tool_results_are_reused(stub_tool: Callable[..., Any]) -> None:
    handler = AsyncMock(return_value=ToolExecutionResult.ok({"id": 1, "name": "iPhone"}))
    executor = make_executor(stub_tool("get_product_details", handler))

    first = await executor.execute(ToolCall(name="get_product_details", arguments={"productId": 1}))
    second = await executor.execute(ToolCall(name="get_product_details", arguments={"productId": 1}))

    assert handler.await_count == 1
    assert first == second
    snapshot = executor.metrics_for("get_product_details")
    assert snapshot.execution_count == 1
    assert snapshot.cache_hits == 1
    assert snapshot.success_count + snapshot.failure_count == snapshot.execution_count


@pytest.mark.asyncio
async def test_cached_results_expire(stub_tool: Callable[..., Any]) -> None:
    now = [0.0]
    cache: ToolResultCache[ToolExecutionResult] = ToolResultCache(ttl=300, clock=lambda: now[0])
    handler = AsyncMock(return_value=ToolExecutionResult.ok({"id": 1}))
    executor = make_executor(stub_tool("get_product_details", handler), cache=cache)
    call = ToolCall(name="get_product_details", arguments={"productId": 1})

    await executor.execute(call)
    now[0] = 301.0
    await executor.execute(call)

    assert handler.await_count == 2
    assert executor.metrics_for("get_product_details").cache_hits == 0


@pytest.mark.asyncio
async def test_failures_and_uncacheable_tools_are_not_cached(stub_tool: Callable[..., Any]) -> None:
    search = AsyncMock(return_value=ToolExecutionResult.ok({"products": []}))
    details = AsyncMock(return_value=ToolExecutionResult.fail(ErrorKind.NOT_FOUND, "missing"))
    executor = make_executor(
        stub_tool("search_products", search), stub_tool("get_product_details", details), max_attempts=1
    )

    for _ in range(2):
        await executor.execute(ToolCall(name="search_products", arguments={"query": "a"}))
        await executor.execute(ToolCall(name="get_product_details", arguments={"productId": 5}))

    assert search.await_count == 2
    assert details.await_count == 2
    assert len(executor.cache) == 0


@pytest.mark.asyncio
async def test_time_budget_bounds_the_call(stub_tool: Callable[..., Any]) -> None:
    async def slow(arguments: Any) -> ToolExecutionResult:
        await asyncio.sleep(5)
        return ToolExecutionResult.ok({})

    executor = make_executor(stub_tool("slow", slow))

    result = await executor.execute(ToolCall(name="slow"), time_budget=0.01)

    assert result.error_code == ErrorKind.UPSTREAM_UNAVAILABLE
    assert executor.metrics_for("slow").failure_count == 1


@pytest.mark.asyncio
async def test_cancellation_propagates(stub_tool: Callable[..., Any]) -> None:
    started = asyncio.Event()

    async def blocked(arguments: Any) -> ToolExecutionResult:
        started.set()
        await asyncio.Event().wait()
        return ToolExecutionResult.ok({})

    executor = make_executor(stub_tool("blocked", blocked))
    task = asyncio.create_task(executor.execute(ToolCall(name="blocked")))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    snapshot = executor.metrics_for("blocked")
    assert snapshot.execution_count == 0
    assert snapshot.failure_count == 0


@pytest.mark.asyncio
async def test_execute_many_keeps_order_and_shares_metrics(stub_tool: Callable[..., Any]) -> None:
    async def echo(arguments: Any) -> ToolExecutionResult:
        await asyncio.sleep(0.01 * arguments["delay"])
        return ToolExecutionResult.ok({"n": arguments["n"]})

    table = MetricsTable()
    executor = make_executor(stub_tool("echo", echo), metrics=table)
    calls = [ToolCall(name="echo", arguments={"n": n, "delay": 3 - n}) for n in range(3)]

    results = await executor.execute_many(calls)

    assert [r.result for r in results] == [{"n": 0}, {"n": 1}, {"n": 2}]
    assert table.snapshot("echo").execution_count == 3
