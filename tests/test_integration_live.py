"""
Live browser integration tests for Restarter.

Run with:
    pytest tests/test_integration_live.py -m integration -v -s

These are excluded from the default `pytest tests/` run because they need a
Playwright-controlled Chromium. No network is used: every www.youtube.com
request is fulfilled from a local page whose <video> reports a scripted
currentTime, so the tests never depend on real media loading.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from playwright.async_api import Browser, Page, Route, async_playwright

from restarter import Restarter
from restarter.settings.store import MemorySettingsStore

pytestmark = pytest.mark.integration

_WATCH_A = "https://www.youtube.com/watch?v=aaa"
_WATCH_B = "https://www.youtube.com/watch?v=bbb"

# currentTime is backed by window.__t so the test can position the "video"
_PAGE = """<!doctype html>
<html>
  <body>
    <video id="player"></video>
    <script>
      window.__t = 37;
      Object.defineProperty(document.getElementById('player'), 'currentTime', {
        get() { return window.__t; },
        set(value) { window.__t = value; },
      });
    </script>
  </body>
</html>"""


async def _serve_watch_page(route: Route) -> None:
    await route.fulfill(status=200, content_type="text/html", body=_PAGE)


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def browser() -> AsyncGenerator[Browser, None]:
    async with async_playwright() as pw:
        b = await pw.chromium.launch(
            headless=True,
            args=["--no-sandbox", "--disable-dev-shm-usage"],
        )
        yield b
        await b.close()


@pytest_asyncio.fixture
async def page(browser: Browser) -> AsyncGenerator[Page, None]:
    context = await browser.new_context()
    p = await context.new_page()
    await p.route("https://www.youtube.com/**", _serve_watch_page)
    await p.goto(_WATCH_A)
    yield p
    await context.close()


@pytest_asyncio.fixture
async def restarter(page: Page) -> AsyncGenerator[Restarter, None]:
    r = await Restarter.attach(page, store=MemorySettingsStore())
    yield r
    await r.stop()


async def _wait_for_zero(page: Page) -> None:
    await page.wait_for_function("() => window.__t === 0", timeout=5_000)


# ─────────────────────────────────────────────────────────────────────────────
# Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestLiveReset:
    async def test_initial_watch_page_is_reset(self, page: Page, restarter: Restarter):
        await _wait_for_zero(page)
        await restarter.settle()

        snap = restarter.snapshots.get()
        assert snap is not None
        assert snap.prior_position_seconds == 37
        assert await page.query_selector("#ytr-toast") is not None

    async def test_push_state_navigation_resets_again(self, page: Page, restarter: Restarter):
        await _wait_for_zero(page)
        await restarter.settle()

        await page.evaluate("() => { window.__t = 50; history.pushState({}, '', '/watch?v=bbb'); }")
        await _wait_for_zero(page)
        await restarter.settle()

        assert page.url == _WATCH_B
        response = await page.evaluate("() => window.__restarterControl({ type: 'GET_SNAPSHOT' })")
        assert response == {"ok": True, "timeText": "00:50"}

    async def test_restore_from_page(self, page: Page, restarter: Restarter):
        await _wait_for_zero(page)
        await restarter.settle()

        response = await page.evaluate("() => window.__restarterControl({ type: 'RESTORE_TIME' })")

        assert response == {"ok": True, "restoredTimeText": "00:37"}
        assert await page.evaluate("() => window.__t") == 37
