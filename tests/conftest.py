"""Shared fakes and fixtures: in-process media element, toast renderer, location."""

from __future__ import annotations

import pytest

from restarter.core.events import EventEmitter, Unsubscribe, listen_once
from restarter.core.restarter import Restarter
from restarter.core.types import MediaEvent
from restarter.media.element import MediaAccessor, MediaElement
from restarter.notifier.renderer import ToastRenderer
from restarter.settings.model import NotificationStyle
from restarter.settings.store import MemorySettingsStore

WATCH_A = "https://www.youtube.com/watch?v=aaa"
WATCH_B = "https://www.youtube.com/watch?v=bbb"
HOME = "https://www.youtube.com/"


class FakeElement(MediaElement):
    def __init__(self, position: float = 0.0, playing: bool = False) -> None:
        self.position = position
        self.playing = playing
        self.writes: list[float] = []
        self.fail_next_writes = 0
        self._events = {event: EventEmitter(event.value) for event in MediaEvent}

    async def get_position(self) -> float:
        return self.position

    async def set_position(self, seconds: float) -> None:
        if self.fail_next_writes > 0:
            self.fail_next_writes -= 1
            raise RuntimeError("element rejected currentTime")
        self.writes.append(seconds)
        self.position = seconds

    async def is_playing(self) -> bool:
        return self.playing

    async def once(self, event, handler) -> Unsubscribe:
        return listen_once(self._events[event], handler)

    def fire(self, event: MediaEvent) -> None:
        self._events[event].emit()

    def listener_count(self, event: MediaEvent) -> int:
        return self._events[event].listener_count


class FakeMedia(MediaAccessor):
    def __init__(self, element: FakeElement | None = None) -> None:
        self.element = element
        self.lookups = 0
        self.fail_lookups = 0

    async def find_element(self) -> FakeElement | None:
        self.lookups += 1
        if self.fail_lookups > 0:
            self.fail_lookups -= 1
            raise RuntimeError("Execution context was destroyed")
        return self.element


class RecordingRenderer(ToastRenderer):
    def __init__(self) -> None:
        self.shown: list[tuple[str, NotificationStyle]] = []
        self.hidden = 0
        self.fail = False

    async def show(self, message: str, style: NotificationStyle) -> None:
        if self.fail:
            raise RuntimeError("renderer detached")
        self.shown.append((message, style))

    async def hide(self) -> None:
        self.hidden += 1

    @property
    def messages(self) -> list[str]:
        return [m for m, _ in self.shown]


class Location:
    """Stand-in for ``page.url``."""

    def __init__(self, url: str = WATCH_A) -> None:
        self.url = url

    def __call__(self) -> str:
        return self.url


def make_restarter(*, location, media, renderer, store=None, **kwargs) -> Restarter:
    options = dict(
        debounce_delay=0.01,
        element_timeout=0.2,
        explicit_timeout=0.2,
        poll_interval=0.01,
        notify_cooldown=0.0,
    )
    options.update(kwargs)
    return Restarter(
        store=store if store is not None else MemorySettingsStore(),
        media=media,
        renderer=renderer,
        locate=location,
        **options,
    )


@pytest.fixture
def location() -> Location:
    return Location()


@pytest.fixture
def element() -> FakeElement:
    return FakeElement(position=42.7)


@pytest.fixture
def media(element) -> FakeMedia:
    return FakeMedia(element)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
async def restarter(location, media, renderer, store):
    """A Restarter with settings loaded and subscribed, but no initial signal emitted."""
    r = make_restarter(location=location, media=media, renderer=renderer, store=store)
    await r.settings.load()
    r.settings.start()
    yield r
    await r.stop()
