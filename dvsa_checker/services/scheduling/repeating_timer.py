"""Cancellable repeating timer on the running event loop."""

import asyncio
from typing import Callable, Optional

from loguru import logger


class RepeatingTimer:
    """
    Calls ``callback`` every ``interval_seconds`` until cancelled.

    The first call happens one interval after ``start``. The callback must not
    block; long work belongs in a task it spawns itself. ``cancel`` is
    idempotent and safe to call from inside the callback.
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None], name: str = "timer"):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def is_armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_armed:
            logger.warning(f"Timer '{self.name}' already running")
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug(f"Timer '{self.name}' armed every {self.interval_seconds}s")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Timer '{self.name}' callback failed: {e}")

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Timer '{self.name}' cancelled")
