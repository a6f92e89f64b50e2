"""DebounceScheduler — coalesces bursts of navigation signals."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from restarter.core.types import NavigationSignal

logger = logging.getLogger(__name__)

_DEFAULT_DELAY = 0.05  # seconds

Handler = Callable[[str, int], Awaitable[Any]]


class DebounceScheduler:
    """
    Cancel-and-rearm debounce.

    Every ``schedule()`` drops the armed timer and arms a new one, so only the
    last signal of a burst reaches the handler. The handler receives the
    generation captured when that last timer was armed, not the one live at
    fire time.
    """

    def __init__(self, handler: Handler, *, delay: float = _DEFAULT_DELAY) -> None:
        self._handler = handler
        self._delay = delay
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self.fired_count = 0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule(self, signal: NavigationSignal) -> None:
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self._delay, self._fire, signal)

    def cancel(self) -> bool:
        """Disarm the pending timer. Returns True if one was armed."""
        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        logger.debug("pending navigation handling cancelled")
        return True

    async def join(self) -> None:
        """Wait for handler invocations that have already fired."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self, signal: NavigationSignal) -> None:
        self._timer = None
        self.fired_count += 1
        task = asyncio.ensure_future(self._run(signal))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, signal: NavigationSignal) -> None:
        try:
            await self._handler(signal.reason, signal.observed_at_generation)
        except Exception:
            logger.exception("navigation handler failed (reason=%s)", signal.reason)
