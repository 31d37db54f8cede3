"""Cancellable once-per-second tick sources for quiz sessions.

A ticker is started when a session enters its in-progress phase and stopped
on any exit from it. ``AsyncioTicker`` drives the callback from a task on
the running event loop. ``ManualTicker`` only records its state and lets the
caller fire ticks explicitly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

TickCallback = Callable[[], object]

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    """Periodic callback source owned by a single session."""

    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class AsyncioTicker:
    """Run ``callback`` every ``interval`` seconds from an asyncio task."""

    def __init__(self, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TickCallback) -> None:
        """Schedule the tick loop; requires a running event loop.

        Starting an already running ticker does nothing.
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self, callback: TickCallback) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                callback()
            except Exception:
                logger.exception("Tick callback failed")


class ManualTicker:
    """Ticker whose ticks are fired by the caller."""

    def __init__(self) -> None:
        self._callback: Optional[TickCallback] = None
        self.start_count = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        if self.running:
            return
        self._callback = callback
        self.start_count += 1

    def stop(self) -> None:
        self._callback = None

    def fire(self, times: int = 1) -> None:
        """Invoke the callback ``times`` times if still running."""

        for _ in range(times):
            if self._callback is None:
                return
            self._callback()
