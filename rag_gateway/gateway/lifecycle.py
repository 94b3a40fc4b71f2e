"""Exactly-once, lazily triggered pipeline initialization."""

import asyncio
from enum import Enum
from typing import Awaitable, Callable

import structlog


logger = structlog.get_logger("gateway.lifecycle")


class LifecycleState(str, Enum):
    uninitialized = "uninitialized"
    initializing = "initializing"
    ready = "ready"
    failed = "failed"


def _retrieve_exception(task: asyncio.Task) -> None:
    # Waiters may all be gone; the failure is already logged and kept on the gate.
    if not task.cancelled():
        task.exception()


class LifecycleGate:
    """Guards the one-time initialization of the pipeline handle.

    The first caller that finds the gate not ready starts ``initialize`` in a
    task; every caller arriving while that task runs awaits the same task, so
    the pipeline sees a single attempt no matter how many calls race. A failed
    attempt is reported to all of its waiters and the next ``ensure_ready``
    starts a fresh one.
    """

    def __init__(self, initialize: Callable[[], Awaitable[None]]):
        self._initialize = initialize
        self._state = LifecycleState.uninitialized
        self._pending: asyncio.Task | None = None
        self.last_error: BaseException | None = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is LifecycleState.ready

    async def ensure_ready(self) -> None:
        """Return once the pipeline is initialized.

        Raises:
            Exception: Whatever the pipeline's ``initialize`` raised.
        """
        if self._state is LifecycleState.ready:
            return

        if self._pending is None:
            self._state = LifecycleState.initializing
            self._pending = asyncio.get_running_loop().create_task(self._run())
            self._pending.add_done_callback(_retrieve_exception)

        # shield: one waiter being cancelled must not cancel the shared attempt
        await asyncio.shield(self._pending)

    async def _run(self) -> None:
        logger.info("pipeline_initializing")
        try:
            await self._initialize()
        except Exception as e:
            self._state = LifecycleState.failed
            self.last_error = e
            logger.error("pipeline_initialization_failed", error=str(e) or e.__class__.__name__)
            raise
        else:
            self._state = LifecycleState.ready
            self.last_error = None
            logger.info("pipeline_ready")
        finally:
            self._pending = None
