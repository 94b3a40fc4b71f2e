"""Tests for the pipeline lifecycle gate."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from rag_gateway.gateway import LifecycleGate, LifecycleState


@pytest.mark.asyncio
async def test_starts_uninitialized_and_does_not_touch_pipeline():
    initialize = AsyncMock()

    gate = LifecycleGate(initialize)

    assert gate.state is LifecycleState.uninitialized
    initialize.assert_not_called()


@pytest.mark.asyncio
async def test_ready_after_first_call_and_initializes_once():
    initialize = AsyncMock()
    gate = LifecycleGate(initialize)

    await gate.ensure_ready()
    await gate.ensure_ready()

    assert gate.state is LifecycleState.ready
    assert gate.is_ready
    initialize.assert_awaited_once()


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_attempt():
    release = asyncio.Event()
    calls = 0

    async def initialize():
        nonlocal calls
        calls += 1
        await release.wait()

    gate = LifecycleGate(initialize)
    waiters = [asyncio.create_task(gate.ensure_ready()) for _ in range(10)]
    await asyncio.sleep(0)

    assert gate.state is LifecycleState.initializing
    assert not any(w.done() for w in waiters)

    release.set()
    await asyncio.gather(*waiters)

    assert calls == 1
    assert gate.state is LifecycleState.ready


@pytest.mark.asyncio
async def test_concurrent_callers_all_receive_the_same_failure():
    release = asyncio.Event()
    error = RuntimeError("chroma unreachable")
    initialize = AsyncMock()

    async def fail():
        await release.wait()
        raise error

    initialize.side_effect = fail
    gate = LifecycleGate(initialize)
    waiters = [asyncio.create_task(gate.ensure_ready()) for _ in range(5)]
    await asyncio.sleep(0)
    release.set()

    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(r is error for r in results)
    assert initialize.await_count == 1
    assert gate.state is LifecycleState.failed
    assert gate.last_error is error


@pytest.mark.asyncio
async def test_failure_is_retried_on_next_call():
    initialize = AsyncMock(side_effect=[RuntimeError("boom"), None])
    gate = LifecycleGate(initialize)

    with pytest.raises(RuntimeError, match="boom"):
        await gate.ensure_ready()

    await gate.ensure_ready()

    assert gate.state is LifecycleState.ready
    assert gate.last_error is None
    assert initialize.await_count == 2


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_initialization():
    release = asyncio.Event()
    initialize = AsyncMock(side_effect=release.wait)
    gate = LifecycleGate(initialize)

    first = asyncio.create_task(gate.ensure_ready())
    second = asyncio.create_task(gate.ensure_ready())
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    release.set()
    await second

    assert gate.state is LifecycleState.ready
    initialize.assert_awaited_once()


@pytest.mark.asyncio
async def test_failure_with_no_remaining_waiters_is_retrieved():
    release = asyncio.Event()

    async def failing_initialize():
        await release.wait()
        raise RuntimeError("vector store unreachable")

    gate = LifecycleGate(failing_initialize)
    waiter = asyncio.create_task(gate.ensure_ready())
    await asyncio.sleep(0)
    attempt = gate._pending

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    release.set()
    await asyncio.wait([attempt])

    assert gate.state is LifecycleState.failed
    assert str(gate.last_error) == "vector store unreachable"
    # Retrieved by the gate, so asyncio has nothing to report when the task is collected
    assert attempt._log_traceback is False
