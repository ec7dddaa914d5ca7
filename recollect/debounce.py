import asyncio
from collections.abc import Awaitable, Callable

from recollect.constants import SUGGESTION_DEBOUNCE_SECONDS


class Debouncer:
    """Coalesces bursts of calls so only the last one within `delay` runs.

    A call superseded by a newer one before its delay elapses returns None.
    """

    def __init__(self, delay: float = SUGGESTION_DEBOUNCE_SECONDS):
        self.delay = delay
        self._pending: asyncio.Task | None = None

    async def _delayed[T](self, fn: Callable[[], Awaitable[T]]) -> T:
        await asyncio.sleep(self.delay)
        return await fn()

    async def __call__[T](self, fn: Callable[[], Awaitable[T]]) -> T | None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        task = asyncio.create_task(self._delayed(fn))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return None
