"""Tests for the position snapshot store, restore and target helpers."""

from __future__ import annotations

import math

import pytest

from conftest import HOME, WATCH_A, WATCH_B
from restarter.core.targets import canonical_target, format_time, is_watch_url
from restarter.core.types import RestoreFailure
from restarter.snapshot.restore import NO_SNAPSHOT_MESSAGE
from restarter.snapshot.store import PositionSnapshotStore


class TestTargets:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.youtube.com/watch?v=abc", True),
            ("https://www.youtube.com/watch?v=", True),
            ("https://www.youtube.com/watch?list=PL1", False),
            ("https://www.youtube.com/shorts/abc", False),
            ("https://m.youtube.com/watch?v=abc", False),
            ("not a url", False),
        ],
    )
    def test_is_watch_url(self, url, expected):
        assert is_watch_url(url) is expected

    def test_canonical_target_keeps_only_video_id(self):
        assert canonical_target("https://WWW.youtube.com/watch?v=abc&t=42s#frag") == (
            "https://www.youtube.com/watch?v=abc"
        )

    def test_canonical_target_for_other_pages(self):
        assert canonical_target("HTTPS://Example.COM/a?b=1#c") == "https://example.com/a?b=1"

    @pytest.mark.parametrize(
        "seconds,text",
        [(0, "00:00"), (59.99, "00:59"), (125.9, "02:05"), (3671, "61:11"), (-4, "00:00")],
    )
    def test_format_time(self, seconds, text):
        assert format_time(seconds) == text


class TestPositionSnapshotStore:
    def setup_method(self):
        self.store = PositionSnapshotStore()

    def test_record_and_get(self):
        assert self.store.record("t1", 12.5, saved_at=1.0) is True
        snap = self.store.get()
        assert (snap.target, snap.prior_position_seconds, snap.saved_at) == ("t1", 12.5, 1.0)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, "abc", None, True])
    def test_invalid_positions_are_rejected(self, bad):
        self.store.record("t1", 3.0)
        assert self.store.record("t1", bad) is False
        assert self.store.get().prior_position_seconds == 3.0

    def test_overwrite_not_merge(self):
        self.store.record("t1", 3.0)
        self.store.record("t2", 8.0)
        assert self.store.get_for_target("t1") is None
        assert self.store.get_for_target("t2").prior_position_seconds == 8.0

    def test_clear(self):
        self.store.record("t1", 3.0)
        self.store.clear()
        assert self.store.get() is None


class TestRestore:
    async def test_round_trip(self, restarter, element):
        element.position = 125.9
        await restarter.engine.handle("initial", restarter.state.generation)
        assert element.position == 0

        snap = restarter.restorer.snapshot_for_current_target()
        assert snap.prior_position_seconds == pytest.approx(125.9)
        assert restarter.restorer.describe().to_message() == {"ok": True, "timeText": "02:05"}

        generation = restarter.state.generation
        handled = restarter.state.last_handled_target
        result = await restarter.restorer.restore()

        assert result.ok is True
        assert result.restored_time_text == "02:05"
        assert element.position == pytest.approx(125.9)
        assert restarter.state.generation == generation
        assert restarter.state.last_handled_target == handled

    async def test_restore_is_repeatable(self, restarter, element):
        element.position = 30.0
        await restarter.engine.handle("initial", restarter.state.generation)

        first = await restarter.restorer.restore()
        element.position = 0.0
        second = await restarter.restorer.restore()

        assert first.ok and second.ok
        assert element.writes == [0, 30.0, 30.0]

    async def test_snapshot_belongs_to_its_target(self, restarter, location):
        await restarter.engine.handle("initial", restarter.state.generation)
        location.url = WATCH_B
        assert restarter.restorer.snapshot_for_current_target() is None

        location.url = HOME
        assert restarter.restorer.describe().to_message() == {"ok": False}

    async def test_no_snapshot(self, restarter):
        result = await restarter.restorer.restore()
        assert result.failure == RestoreFailure.NO_SNAPSHOT
        assert result.to_message() == {"ok": False, "message": NO_SNAPSHOT_MESSAGE}

    async def test_no_element(self, restarter, media):
        restarter.snapshots.record(canonical_target(WATCH_A), 10.0)
        media.element = None
        result = await restarter.restorer.restore()
        assert result.failure == RestoreFailure.NO_ELEMENT

    async def test_lookup_errors_report_no_element(self, restarter, media, renderer):
        restarter.snapshots.record(canonical_target(WATCH_A), 10.0)
        media.fail_lookups = 10**6

        result = await restarter.restorer.restore()

        assert result.failure == RestoreFailure.NO_ELEMENT
        assert result.ok is False
        assert renderer.shown == []

    async def test_apply_failed(self, restarter, element, renderer):
        restarter.snapshots.record(canonical_target(WATCH_A), 10.0)
        element.fail_next_writes = 1
        result = await restarter.restorer.restore()
        assert result.failure == RestoreFailure.APPLY_FAILED
        assert renderer.shown == []

    async def test_success_notification_respects_preference(self, restarter, store, renderer):
        restarter.snapshots.record(canonical_target(WATCH_A), 61.0)
        await store.set({"showToast": False})
        result = await restarter.restorer.restore()
        assert result.ok is True
        assert renderer.shown == []
