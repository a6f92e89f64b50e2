"""Cancellable, generation-aware polling wait."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from restarter.core.state import EngineState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationToken:
    """
    Cooperative cancellation token.

    Valid while the live generation equals the captured one and every extra
    check still passes. Nothing is halted forcibly: waiters look at the
    token at their next checkpoint and give up.
    """

    def __init__(
        self,
        state: EngineState,
        generation: int,
        *checks: Callable[[], bool],
    ) -> None:
        self._state = state
        self._generation = generation
        self._checks = checks

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self) -> bool:
        if not self._state.is_current(self._generation):
            return False
        return all(check() for check in self._checks)


async def wait_for_element(
    find: Callable[[], Awaitable[T | None]],
    *,
    timeout: float,
    interval: float,
    token: GenerationToken | None = None,
) -> T | None:
    """
    Poll ``find`` every ``interval`` seconds until it returns something.

    Returns None on timeout, or as soon as ``token`` stops being current.
    A lookup that raises counts as "not found yet" and polling continues.
    """

    async def _poll() -> T | None:
        while True:
            if token is not None and not token.is_current():
                return None
            try:
                found = await find()
            except Exception:
                logger.debug("element lookup failed; retrying", exc_info=True)
                found = None
            if found is not None:
                return found
            await asyncio.sleep(interval)

    try:
        return await asyncio.wait_for(_poll(), timeout)
    except asyncio.TimeoutError:
        return None
