"""
Cancellable deferred task.

``schedule()`` starts a countdown; calling it again before the quiet period
runs out cancels the previous countdown and starts a new one.  When a
countdown completes the callback runs.  From that point the callback is
never cancelled, and callbacks never overlap.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.delay = delay
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def pending(self) -> bool:
        """True while a countdown is running."""
        return self._task is not None and not self._task.done()

    def schedule(self) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._countdown())

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def flush(self) -> None:
        """Run a pending callback now instead of waiting for the quiet period."""
        if self.pending:
            self.cancel()
            await self._fire()
            return
        # Nothing scheduled; still wait for a callback that is already running.
        async with self._lock:
            pass

    async def _countdown(self) -> None:
        await asyncio.sleep(self.delay)
        # Past this point the write is in flight and must not be cancelled.
        self._task = None
        await self._fire()

    async def _fire(self) -> None:
        async with self._lock:
            try:
                await self._callback()
            except Exception:
                logger.exception("Deferred callback failed")
