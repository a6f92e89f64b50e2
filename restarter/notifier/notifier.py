"""Notifier — transient acknowledgment with a show cooldown."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from restarter.notifier.renderer import ToastRenderer
from restarter.settings.cache import SettingsCache

logger = logging.getLogger(__name__)

_DEFAULT_COOLDOWN = 1.0  # seconds


class Notifier:
    """
    Shows a toast and hides it after the configured duration.

    After a toast is shown, further requests inside the cooldown window are
    dropped so rapid triggers do not stack animations. ``force=True`` ignores
    the user's show/hide preference but still obeys the cooldown.
    """

    def __init__(
        self,
        renderer: ToastRenderer,
        settings: SettingsCache,
        *,
        cooldown: float = _DEFAULT_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._renderer = renderer
        self._settings = settings
        self._cooldown = cooldown
        self._clock = clock
        self._cooldown_until: float | None = None
        self._hide_task: asyncio.Task | None = None
        self.shown_count = 0

    @property
    def cooling_down(self) -> bool:
        return self._cooldown_until is not None and self._clock() < self._cooldown_until

    @property
    def visible(self) -> bool:
        return self._hide_task is not None and not self._hide_task.done()

    async def show(self, message: str, *, force: bool = False) -> bool:
        """Return True when the toast was actually rendered."""
        if not force and not self._settings.show_notification:
            return False
        if self.cooling_down:
            logger.debug("toast suppressed (cooldown): %s", message)
            return False

        # Reserve the window so a concurrent request cannot render alongside this one
        previous_until = self._cooldown_until
        self._cooldown_until = self._clock() + self._cooldown
        style = self._settings.current.style
        try:
            await self._renderer.show(message, style)
        except Exception:
            logger.warning("toast render failed", exc_info=True)
            self._cooldown_until = previous_until
            return False

        self.shown_count += 1
        self._schedule_hide(style.duration_ms / 1000)
        return True

    async def close(self) -> None:
        if self._hide_task is not None:
            self._hide_task.cancel()
            try:
                await self._hide_task
            except asyncio.CancelledError:
                pass
            self._hide_task = None

    def _schedule_hide(self, delay: float) -> None:
        if self._hide_task is not None:
            self._hide_task.cancel()
        self._hide_task = asyncio.ensure_future(self._hide_after(delay))

    async def _hide_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            await self._renderer.hide()
        except Exception:
            logger.warning("toast hide failed", exc_info=True)
