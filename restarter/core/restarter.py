"""Restarter — wires the components for one page."""

from __future__ import annotations

import logging
from typing import Any, Callable

from playwright.async_api import Page

from restarter.control.surface import ControlSurface
from restarter.core.state import EngineState
from restarter.core.targets import is_watch_url
from restarter.core.types import NavigationReason
from restarter.engine.reset_engine import ResetEngine
from restarter.media.element import MediaAccessor
from restarter.media.playwright_media import PlaywrightMediaAccessor
from restarter.navigation.aggregator import NavigationAggregator, NavigationSources
from restarter.navigation.playwright_sources import PlaywrightNavigationSources
from restarter.navigation.scheduler import DebounceScheduler
from restarter.notifier.notifier import Notifier
from restarter.notifier.renderer import PlaywrightToastRenderer, ToastRenderer
from restarter.settings.cache import SettingsCache
from restarter.settings.store import JsonFileSettingsStore, SettingsStore
from restarter.snapshot.restore import PositionRestorer
from restarter.snapshot.store import PositionSnapshotStore

logger = logging.getLogger(__name__)


class Restarter:
    """
    Resets playback to 0:00 once per watch-page navigation.

    Usage:
        restarter = await Restarter.attach(page)
        ...
        await restarter.stop()

    Or, with your own adapters:
        restarter = Restarter(store=..., media=..., renderer=..., locate=lambda: url)
        await restarter.start()
        sources = restarter.sources  # emit hints into these
    """

    def __init__(
        self,
        *,
        store: SettingsStore,
        media: MediaAccessor,
        renderer: ToastRenderer,
        locate: Callable[[], str],
        sources: NavigationSources | None = None,
        is_watched_target: Callable[[str], bool] = is_watch_url,
        debounce_delay: float = 0.05,
        element_timeout: float = 10.0,
        explicit_timeout: float = 8.0,
        poll_interval: float = 0.1,
        notify_cooldown: float = 1.0,
    ) -> None:
        self.state = EngineState()
        self.sources = sources if sources is not None else NavigationSources()
        self.settings = SettingsCache(store, self.state, area=store.area)
        self.snapshots = PositionSnapshotStore()
        self.notifier = Notifier(renderer, self.settings, cooldown=notify_cooldown)
        self.engine = ResetEngine(
            state=self.state,
            settings=self.settings,
            snapshots=self.snapshots,
            notifier=self.notifier,
            media=media,
            locate=locate,
            is_watched_target=is_watched_target,
            element_timeout=element_timeout,
            explicit_timeout=explicit_timeout,
            poll_interval=poll_interval,
        )
        self.scheduler = DebounceScheduler(self.engine.handle, delay=debounce_delay)
        self.aggregator = NavigationAggregator(self.state, self.scheduler.schedule)
        self.restorer = PositionRestorer(
            snapshots=self.snapshots,
            media=media,
            locate=locate,
            notifier=self.notifier,
            is_watched_target=is_watched_target,
            timeout=explicit_timeout,
            poll_interval=poll_interval,
        )
        self.control = ControlSurface(self.engine, self.restorer)
        self._started = False

        # Disabling must stop armed work at once, not just at the next guard
        self.settings.on_disabled(self.scheduler.cancel)

    @classmethod
    async def attach(
        cls,
        page: Page,
        *,
        store: SettingsStore | None = None,
        media_selector: str = "video",
        expose_control: bool = True,
        **kwargs: Any,
    ) -> Restarter:
        """Build Playwright adapters for ``page``, install them and start."""
        sources = PlaywrightNavigationSources(page)
        media = PlaywrightMediaAccessor(page, selector=media_selector)
        restarter = cls(
            store=store if store is not None else JsonFileSettingsStore(),
            media=media,
            renderer=PlaywrightToastRenderer(page),
            locate=lambda: page.url,
            sources=sources,
            **kwargs,
        )
        await media.install()
        await sources.install()
        if expose_control:
            await restarter.control.install(page)
        await restarter.start()
        return restarter

    async def start(self) -> None:
        if self._started:
            return
        await self.settings.load()
        self.settings.start()
        self.aggregator.attach_sources(self.sources)
        self._started = True
        self.aggregator.emit(NavigationReason.INITIAL)
        logger.debug("restarter started (enabled=%s)", self.settings.enabled)

    async def stop(self) -> None:
        self.scheduler.cancel()
        self.aggregator.detach_all()
        self.settings.stop()
        await self.scheduler.join()
        await self.engine.close()
        await self.notifier.close()
        self._started = False

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        return await self.control.dispatch(message)

    async def settle(self) -> None:
        """Wait until fired handling passes and their retry applies have finished."""
        await self.scheduler.join()
        await self.engine.join()
