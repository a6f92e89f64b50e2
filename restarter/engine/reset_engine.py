"""ResetEngine — generation-gated, idempotent reset state machine."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from restarter.core.events import Unsubscribe
from restarter.core.state import EngineState
from restarter.core.targets import canonical_target, is_watch_url
from restarter.core.types import (
    ForceResetFailure,
    ForceResetResult,
    HandleResult,
    HandlingState,
    MediaEvent,
    SkipReason,
)
from restarter.core.waiting import GenerationToken, wait_for_element
from restarter.engine.apply import ApplySequence
from restarter.media.element import MediaAccessor, MediaElement
from restarter.notifier.notifier import Notifier
from restarter.settings.cache import SettingsCache
from restarter.snapshot.store import PositionSnapshotStore

logger = logging.getLogger(__name__)

_ELEMENT_TIMEOUT = 10.0  # seconds, passive path
_EXPLICIT_TIMEOUT = 8.0  # seconds, user-triggered actions
_POLL_INTERVAL = 0.1

_RETRY_POINTS = (MediaEvent.METADATA_LOADED, MediaEvent.PLAYBACK_STARTED)

FORCE_OK_MESSAGE = "Reset to 0:00"
FORCE_FAILED_MESSAGE = "Could not reset to 0:00"
NOT_WATCH_MESSAGE = "Not available on this page"
NO_VIDEO_MESSAGE = "Video not found"


class ResetEngine:
    """
    Consumes debounced navigation signals and resets playback once per target.

    Guards run in a fixed order: stale generation, disabled, not a watch
    page, re-enabled while playing, already handled. A pass that survives
    them claims the target, waits for the media element and hands it to an
    ApplySequence, which retries at metadata-loaded and playback-started.
    All passive failures end the pass quietly; only ``force_reset`` reports
    to the user on failure.
    """

    def __init__(
        self,
        *,
        state: EngineState,
        settings: SettingsCache,
        snapshots: PositionSnapshotStore,
        notifier: Notifier,
        media: MediaAccessor,
        locate: Callable[[], str],
        is_watched_target: Callable[[str], bool] = is_watch_url,
        element_timeout: float = _ELEMENT_TIMEOUT,
        explicit_timeout: float = _EXPLICIT_TIMEOUT,
        poll_interval: float = _POLL_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._state = state
        self._settings = settings
        self._snapshots = snapshots
        self._notifier = notifier
        self._media = media
        self._locate = locate
        self._is_watched = is_watched_target
        self._element_timeout = element_timeout
        self._explicit_timeout = explicit_timeout
        self._poll_interval = poll_interval
        self._clock = clock
        self._active: HandleResult | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Unsubscribe] = []

    @property
    def status(self) -> HandlingState:
        if self._active is None:
            return HandlingState.IDLE
        return self._active.state

    # ------------------------------------------------------------------
    # Passive path
    # ------------------------------------------------------------------

    async def handle(self, reason: str, scheduled_generation: int) -> HandleResult:
        result = HandleResult(reason=reason, generation=scheduled_generation)
        self._active = result
        try:
            return await self._handle(result)
        finally:
            if self._active is result:
                self._active = None

    async def _handle(self, result: HandleResult) -> HandleResult:
        generation = result.generation

        skip, target = self._admit(generation)
        if skip is not None:
            return self._drop(result, skip, target)

        if self._settings.resume_pending:
            # One-shot: whatever happens below, the next pass behaves normally
            self._settings.acknowledge_resume()
            if await self._is_playing_now():
                self._state.last_handled_target = target
                result.target = target
                return self._drop(result, SkipReason.RESUMED_WHILE_PLAYING, target)
            skip, target = self._admit(generation)
            if skip is not None:
                return self._drop(result, skip, target)

        if target == self._state.last_handled_target:
            return self._drop(result, SkipReason.ALREADY_HANDLED, target)

        self._state.last_handled_target = target
        result.target = target
        result.advance(HandlingState.AWAITING_TARGET)
        logger.debug("handle %s (reason=%s)", target, result.reason)

        token = GenerationToken(
            self._state,
            generation,
            lambda: self._settings.enabled,
            lambda: self._current_target() == target,
        )
        result.advance(HandlingState.AWAITING_MEDIA)
        element = await wait_for_element(
            self._media.find_element,
            timeout=self._element_timeout,
            interval=self._poll_interval,
            token=token,
        )
        if element is None:
            if token.is_current():
                logger.info("media element not found for %s (reason=%s)", target, result.reason)
                return self._drop(result, SkipReason.ELEMENT_TIMEOUT, target)
            skip, _ = self._admit(generation)
            return self._drop(result, skip or SkipReason.TARGET_CHANGED, target)

        result.advance(HandlingState.APPLYING)
        sequence = ApplySequence(
            element=element,
            target=target,
            generation=generation,
            state=self._state,
            settings=self._settings,
            snapshots=self._snapshots,
            notifier=self._notifier,
            on_target=lambda: self._current_target() == target,
            clock=self._clock,
        )
        result.sequence = sequence

        # Listen first: an event fired during the immediate apply still triggers its retry
        await self._arm_retries(element, sequence)
        await sequence.apply("immediate")

        result.advance(HandlingState.DONE)
        return result

    async def _is_playing_now(self) -> bool:
        try:
            element = await self._media.find_element()
            return element is not None and await element.is_playing()
        except Exception:
            logger.debug("playing-state check failed; treating as paused", exc_info=True)
            return False

    def _admit(self, generation: int) -> tuple[SkipReason | None, str | None]:
        """Guards 1-3. Returns (skip reason, canonical target)."""
        if not self._state.is_current(generation):
            return SkipReason.STALE_GENERATION, None
        if not self._settings.enabled:
            return SkipReason.DISABLED, None
        url = self._locate()
        if not self._is_watched(url):
            return SkipReason.TARGET_NOT_WATCHED, None
        return None, canonical_target(url)

    def _drop(self, result: HandleResult, skip: SkipReason, target: str | None) -> HandleResult:
        logger.debug(
            "skip (%s) target=%s reason=%s generation=%d/%d",
            skip.value,
            target,
            result.reason,
            result.generation,
            self._state.generation,
        )
        return result.skip(skip)

    async def _arm_retries(self, element: MediaElement, sequence: ApplySequence) -> None:
        # Retry points of an older pass must not fire into this one
        self._detach_listeners()
        for event in _RETRY_POINTS:
            try:
                unsubscribe = await element.once(event, self._retry_callback(sequence, event))
            except Exception:
                logger.warning("could not listen for %s", event.value, exc_info=True)
                continue
            self._listeners.append(unsubscribe)

    def _retry_callback(self, sequence: ApplySequence, event: MediaEvent) -> Callable[[], None]:
        def callback() -> None:
            self._spawn(sequence.apply(event.value))

        return callback

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _current_target(self) -> str:
        return canonical_target(self._locate())

    # ------------------------------------------------------------------
    # Explicit path
    # ------------------------------------------------------------------

    async def force_reset(self) -> ForceResetResult:
        """
        Zero the position now, bypassing debounce, enablement and idempotency.

        Always reports the outcome through the forced notifier path. Neither
        the generation nor the last handled target is touched.
        """
        url = self._locate()
        if not self._is_watched(url):
            await self._notifier.show(NOT_WATCH_MESSAGE, force=True)
            return ForceResetResult(ok=False, reason=ForceResetFailure.NOT_WATCH)

        element = await wait_for_element(
            self._media.find_element,
            timeout=self._explicit_timeout,
            interval=self._poll_interval,
        )
        if element is None:
            await self._notifier.show(NO_VIDEO_MESSAGE, force=True)
            return ForceResetResult(ok=False, reason=ForceResetFailure.NO_VIDEO)

        target = canonical_target(url)
        try:
            before = await element.get_position()
            self._snapshots.record(target, before, saved_at=self._clock())
            await element.set_position(0)
        except Exception:
            logger.warning("force reset failed for %s", target, exc_info=True)
            await self._notifier.show(FORCE_FAILED_MESSAGE, force=True)
            return ForceResetResult(ok=False, reason=ForceResetFailure.FAILED)

        await self._notifier.show(FORCE_OK_MESSAGE, force=True)
        return ForceResetResult(ok=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def join(self) -> None:
        """Wait for retry-point applies that are already running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _detach_listeners(self) -> None:
        for unsubscribe in self._listeners:
            unsubscribe()
        self._listeners.clear()

    async def close(self) -> None:
        self._detach_listeners()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
