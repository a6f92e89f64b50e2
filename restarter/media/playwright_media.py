"""Playwright-backed media element accessor."""

from __future__ import annotations

import itertools
import logging
from typing import Callable

from playwright.async_api import ElementHandle, Page

from restarter.core.events import Unsubscribe
from restarter.core.types import MediaEvent
from restarter.media.element import MediaAccessor, MediaElement

logger = logging.getLogger(__name__)

_BINDING = "__restarterMediaEvent"
_DEFAULT_SELECTOR = "video"

_LISTEN_ONCE_JS = """(el, [eventName, listenerId, binding]) => {
    el.addEventListener(eventName, () => {
        const fn = window[binding];
        if (typeof fn === 'function') {
            fn(listenerId);
        }
    }, { once: true });
}"""


class PlaywrightMediaAccessor(MediaAccessor):
    """
    Finds the page's ``<video>`` and relays its one-shot DOM events.

    Call ``install()`` once per page before using ``once()`` listeners.
    """

    def __init__(self, page: Page, *, selector: str = _DEFAULT_SELECTOR) -> None:
        self._page = page
        self._selector = selector
        self._ids = itertools.count(1)
        self._handlers: dict[int, Callable[[], None]] = {}
        self._installed = False

    async def install(self) -> None:
        if self._installed:
            return
        await self._page.expose_binding(_BINDING, self._on_event)
        self._installed = True

    async def find_element(self) -> MediaElement | None:
        handle = await self._page.query_selector(self._selector)
        if handle is None:
            return None
        return PlaywrightMediaElement(handle, self)

    def register(self, handler: Callable[[], None]) -> int:
        listener_id = next(self._ids)
        self._handlers[listener_id] = handler
        return listener_id

    def unregister(self, listener_id: int) -> None:
        self._handlers.pop(listener_id, None)

    def _on_event(self, source: object, listener_id: int) -> None:
        handler = self._handlers.pop(listener_id, None)
        if handler is None:
            return
        try:
            handler()
        except Exception:
            logger.exception("media event handler %d failed", listener_id)


class PlaywrightMediaElement(MediaElement):
    def __init__(self, handle: ElementHandle, accessor: PlaywrightMediaAccessor) -> None:
        self._handle = handle
        self._accessor = accessor

    async def get_position(self) -> float:
        value = await self._handle.evaluate("v => Number(v.currentTime)")
        return float("nan") if value is None else float(value)

    async def set_position(self, seconds: float) -> None:
        await self._handle.evaluate("(v, t) => { v.currentTime = t; }", seconds)

    async def is_playing(self) -> bool:
        return bool(await self._handle.evaluate("v => !v.paused && !v.ended"))

    async def once(self, event: MediaEvent, handler: Callable[[], None]) -> Unsubscribe:
        listener_id = self._accessor.register(handler)
        try:
            await self._handle.evaluate(
                _LISTEN_ONCE_JS, [event.dom_event, listener_id, _BINDING]
            )
        except Exception:
            self._accessor.unregister(listener_id)
            raise
        return lambda: self._accessor.unregister(listener_id)
