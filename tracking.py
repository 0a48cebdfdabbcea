"""Shared polling runtime for the message and transfer trackers."""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

Callback = Callable[[Any], Union[None, Awaitable[None]]]


@dataclass
class PollPolicy:
    """Polling cadence and budget for one tracker."""
    poll_interval: float
    max_attempts: int
    startup_delay: float = 0.0

    @property
    def deadline_minutes(self) -> int:
        """Total wait in whole minutes, as shown to users on timeout."""
        return round(self.max_attempts * self.poll_interval / 60)


async def invoke_callback(callback: Optional[Callback], value: Any) -> None:
    """Call a sync or async callback, logging anything it raises."""
    if callback is None:
        return
    try:
        if inspect.iscoroutinefunction(callback):
            await callback(value)
        else:
            result = callback(value)
            if inspect.isawaitable(result):
                await result
    except Exception as e:
        logger.error(f"Error in tracker callback: {e}", exc_info=True)


class Tracking:
    """Handle for one running tracker.

    Owns the tracker's task and its stopped flag. Once cancel() returns, the
    tracker emits nothing further, even if a poll that was already in flight
    completes afterwards.
    """

    def __init__(self, name: str):
        self.name = name
        self._stopped = False
        self._task: Optional[asyncio.Task] = None

    def attach(self, coro: Awaitable[None]) -> "Tracking":
        """Schedule the tracker coroutine on the running loop."""
        self._task = asyncio.get_running_loop().create_task(coro)
        return self

    @property
    def stopped(self) -> bool:
        return self._stopped

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Stop all future polls and emissions."""
        if self._stopped:
            return
        logger.debug(f"Cancelling {self.name}")
        self._stopped = True
        if self._task and not self._task.done():
            self._task.cancel()

    async def emit(self, callback: Optional[Callback], value: Any) -> bool:
        """Deliver a value unless the tracker was cancelled.

        Returns:
            False if the tracker is stopped and nothing was delivered
        """
        if self._stopped:
            return False
        await invoke_callback(callback, value)
        return True

    async def wait(self) -> None:
        """Wait until the tracker reaches a terminal state or is cancelled."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._stopped:
                raise
