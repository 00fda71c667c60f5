"""
Single-slot debounce timer on the asyncio event loop.

Scheduling always cancels whatever was pending, so at most one callback is
ever waiting and the last schedule wins. There is no queue.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Callable


class DebounceTimer:
    """Run a callback once the caller has been quiet for ``delay`` seconds."""

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._delay = delay
        self._active_task: asyncio.Task[None] | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a scheduled callback has not fired or been cancelled."""
        return self._active_task is not None and not self._active_task.done()

    def schedule(self, callback: Callable[[], None]) -> None:
        """Replace any pending callback with ``callback`` and restart the wait."""
        self.cancel()
        self._active_task = asyncio.get_running_loop().create_task(self._run(callback))

    def cancel(self) -> None:
        """Drop the pending callback, if any, without running it."""
        if self._active_task is not None and not self._active_task.done():
            self._active_task.cancel()
        self._active_task = None

    async def wait(self) -> None:
        """Wait for the pending callback to fire or be cancelled. Returns at once if idle."""
        task = self._active_task
        if task is None:
            return
        await asyncio.wait({task})

    async def _run(self, callback: Callable[[], None]) -> None:
        try:
            await asyncio.sleep(self._delay)
            # clear the slot before running so the callback may reschedule
            self._active_task = None
            callback()
        except asyncio.CancelledError:
            pass
        except (RuntimeError, OSError, ValueError):  # fmt: skip
            logger.exception("debounced callback failed")
