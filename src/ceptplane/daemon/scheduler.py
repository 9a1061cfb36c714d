"""Single-slot deferred task for debounced tree refreshes."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger()


@dataclass
class DeferredTask:
    """Run ``callback`` once ``delay`` seconds after the last ``schedule()``.

    Scheduling while a call is pending cancels it and starts the wait over,
    so a burst of events produces a single call.
    """

    callback: Callable[[], Awaitable[None] | None]
    delay: float

    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _runs: int = field(default=0, init=False)

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def runs(self) -> int:
        return self._runs

    def schedule(self) -> None:
        """Schedule the callback, replacing any pending one."""
        loop = asyncio.get_running_loop()
        if self.pending:
            assert self._task is not None
            self._task.cancel()
            logger.debug("deferred_task_rescheduled", delay=self.delay)
        self._task = loop.create_task(self._run_later())

    async def _run_later(self) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return
        self._runs += 1
        try:
            result = self.callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error("deferred_task_failed", error=str(e), exc_info=True)

    async def flush(self) -> None:
        """Run a pending callback now instead of waiting out the delay."""
        if not self.pending:
            return
        self.cancel()
        self._runs += 1
        result = self.callback()
        if inspect.isawaitable(result):
            await result

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def close(self) -> None:
        """Cancel a pending call and wait for the task to unwind."""
        task = self._task
        self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
