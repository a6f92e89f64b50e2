"""Tests for the Notifier cooldown/preference logic and the toast renderers."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import RecordingRenderer
from restarter.core.state import EngineState
from restarter.notifier.notifier import Notifier
from restarter.notifier.renderer import (
    TOAST_ID,
    PlaywrightToastRenderer,
    horizontal_layout,
    toast_properties,
    toast_top_px,
)
from restarter.settings.cache import SettingsCache
from restarter.settings.model import NotificationStyle, ToastPosition
from restarter.settings.store import MemorySettingsStore


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def store():
    return MemorySettingsStore()


@pytest.fixture
async def settings(store):
    cache = SettingsCache(store, EngineState())
    await cache.load()
    cache.start()
    return cache


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def notifier(settings, clock):
    n = Notifier(RecordingRenderer(), settings, cooldown=1.0, clock=clock)
    yield n
    await n.close()


class TestNotifier:
    async def test_show_renders_with_current_style(self, notifier, settings):
        assert await notifier.show("hello") is True
        assert notifier._renderer.shown == [("hello", settings.current.style)]
        assert notifier.visible is True

    async def test_preference_off_suppresses_normal_requests(self, notifier, store):
        await store.set({"showToast": False})
        assert await notifier.show("hello") is False
        assert notifier._renderer.shown == []

    async def test_forced_request_ignores_preference(self, notifier, store):
        await store.set({"showToast": False})
        assert await notifier.show("error", force=True) is True

    async def test_cooldown_suppresses_even_forced_requests(self, notifier, clock):
        assert await notifier.show("first") is True
        clock.now += 0.5
        assert await notifier.show("second", force=True) is False
        clock.now += 0.6
        assert await notifier.show("third") is True
        assert notifier._renderer.messages == ["first", "third"]

    async def test_suppressed_by_preference_does_not_start_cooldown(self, notifier, store):
        await store.set({"showToast": False})
        await notifier.show("quiet")
        assert notifier.cooling_down is False

    async def test_renderer_failure_is_swallowed(self, notifier):
        notifier._renderer.fail = True
        assert await notifier.show("hello") is False
        assert notifier.shown_count == 0

    async def test_failed_render_does_not_start_cooldown(self, notifier, clock):
        notifier._renderer.fail = True
        assert await notifier.show("lost") is False
        assert notifier.cooling_down is False

        notifier._renderer.fail = False
        clock.now += 0.1
        assert await notifier.show("retry", force=True) is True
        assert notifier._renderer.messages == ["retry"]

    async def test_hide_runs_after_delay(self, notifier):
        await notifier.show("hello")
        notifier._schedule_hide(0.0)
        await asyncio.sleep(0.02)
        assert notifier._renderer.hidden == 1
        assert notifier.visible is False


class TestToastLayout:
    def test_top_offset_grows_with_scale(self):
        assert toast_top_px(1.0) == 22
        assert toast_top_px(1.5) == 33
        assert toast_top_px(2.0) == 44

    def test_horizontal_layout(self):
        assert horizontal_layout(ToastPosition.LEFT) == {"left": "18px", "right": "auto", "x": "0%"}
        assert horizontal_layout(ToastPosition.RIGHT)["right"] == "18px"
        assert horizontal_layout(ToastPosition.CENTER)["x"] == "-50%"

    def test_css_properties(self):
        props = toast_properties(NotificationStyle(scale=2.0, animation_duration_ms=300))
        assert props["--ytr-top"] == "44px"
        assert props["--ytr-anim-duration"] == "300ms"
        assert props["--ytr-bg"] == "#ff0033"


class TestPlaywrightToastRenderer:
    async def test_show_evaluates_in_page(self):
        page = AsyncMock()
        renderer = PlaywrightToastRenderer(page)

        await renderer.show("Playback reset", NotificationStyle(position=ToastPosition.LEFT))

        page.evaluate.assert_awaited_once()
        _, args = page.evaluate.await_args.args
        assert args["id"] == TOAST_ID
        assert args["message"] == "Playback reset"
        assert args["left"] == "18px"
        assert args["animate"] is True

    async def test_hide_targets_toast_element(self):
        page = AsyncMock()
        await PlaywrightToastRenderer(page).hide()
        assert page.evaluate.await_args.args[1] == TOAST_ID
