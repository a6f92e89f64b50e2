"""Control surface — request/response entry points for an external panel."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from playwright.async_api import Page

from restarter.engine.reset_engine import ResetEngine
from restarter.snapshot.restore import PositionRestorer

logger = logging.getLogger(__name__)

_BINDING = "__restarterControl"


class MessageType(str, Enum):
    GET_SNAPSHOT = "GET_SNAPSHOT"
    RESTORE_TIME = "RESTORE_TIME"
    FORCE_RESET = "FORCE_RESET"


class ControlSurface:
    """
    Serves GET_SNAPSHOT / RESTORE_TIME / FORCE_RESET requests.

    Requests are plain dicts (``{"type": "RESTORE_TIME"}``) and so are the
    responses, so any transport that moves JSON can sit in front of this.
    """

    def __init__(self, engine: ResetEngine, restorer: PositionRestorer) -> None:
        self._engine = engine
        self._restorer = restorer

    async def dispatch(self, message: Any) -> dict[str, Any] | None:
        """Return the response dict, or None for messages this surface does not serve."""
        if not isinstance(message, dict):
            return None
        try:
            kind = MessageType(message.get("type"))
        except ValueError:
            logger.debug("ignoring control message %r", message.get("type"))
            return None

        if kind == MessageType.GET_SNAPSHOT:
            return self._restorer.describe().to_message()
        if kind == MessageType.RESTORE_TIME:
            return (await self._restorer.restore()).to_message()
        return (await self._engine.force_reset()).to_message()

    async def install(self, page: Page) -> None:
        """Expose ``dispatch`` to the page as ``window.__restarterControl(message)``."""
        await page.expose_function(_BINDING, self.dispatch)
