"""Navigation hint sources wired into a live page through Playwright."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from restarter.core.types import NavigationReason
from restarter.navigation.aggregator import NavigationSources

logger = logging.getLogger(__name__)

_BINDING = "__restarterNavigationHint"

# Runs in every document of the page. Guarded so a second evaluation is a no-op.
_HOOK_SCRIPT = """(() => {
    if (window.__restarterHooked) {
        return;
    }
    window.__restarterHooked = true;

    const report = (reason) => {
        const fn = window['%(binding)s'];
        if (typeof fn === 'function') {
            fn(reason);
        }
    };

    const originalPushState = history.pushState;
    const originalReplaceState = history.replaceState;

    history.pushState = function (...args) {
        const result = originalPushState.apply(this, args);
        report('history.pushState');
        return result;
    };

    history.replaceState = function (...args) {
        const result = originalReplaceState.apply(this, args);
        report('history.replaceState');
        return result;
    };

    window.addEventListener('popstate', () => report('popstate'));
    window.addEventListener('yt-navigate-finish', () => report('yt-navigate-finish'));

    let mutationQueued = false;
    const observer = new MutationObserver(() => {
        if (mutationQueued) {
            return;
        }
        mutationQueued = true;
        requestAnimationFrame(() => {
            mutationQueued = false;
            report('mutation');
        });
    });

    const start = () => observer.observe(document.documentElement, { childList: true, subtree: true });
    if (document.documentElement) {
        start();
    } else {
        document.addEventListener('DOMContentLoaded', start, { once: true });
    }
})();""" % {"binding": _BINDING}


class PlaywrightNavigationSources(NavigationSources):
    """
    NavigationSources fed from an in-page hook script.

    The script patches the history API (call-through first), listens for
    back/forward and the app's navigate-finish event, observes DOM
    mutations, and reports each hint through one exposed binding.
    """

    def __init__(self, page: Page) -> None:
        super().__init__()
        self._page = page
        self._installed = False
        self._routes = {
            NavigationReason.HISTORY_PUSH.value: self.history_push,
            NavigationReason.HISTORY_REPLACE.value: self.history_replace,
            NavigationReason.POPSTATE.value: self.popstate,
            NavigationReason.NAVIGATE_FINISH.value: self.navigate_finish,
            NavigationReason.MUTATION.value: self.mutation,
        }

    async def install(self) -> None:
        if self._installed:
            return
        await self._page.expose_binding(_BINDING, self._on_hint)
        await self._page.add_init_script(script=_HOOK_SCRIPT)
        # The current document was loaded before the init script existed
        await self._page.evaluate(_HOOK_SCRIPT)
        self._installed = True

    def _on_hint(self, source: object, reason: str) -> None:
        emitter = self._routes.get(reason)
        if emitter is None:
            logger.debug("ignoring unknown navigation hint %r", reason)
            return
        emitter.emit()
