"""Abstract media element accessor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from restarter.core.events import Unsubscribe
from restarter.core.types import MediaEvent


class MediaElement(ABC):
    """The page's media element, as far as the reset engine needs it."""

    @abstractmethod
    async def get_position(self) -> float: ...

    @abstractmethod
    async def set_position(self, seconds: float) -> None: ...

    @abstractmethod
    async def is_playing(self) -> bool: ...

    @abstractmethod
    async def once(self, event: MediaEvent, handler: Callable[[], None]) -> Unsubscribe:
        """Call ``handler`` the first time ``event`` fires, then detach."""


class MediaAccessor(ABC):
    @abstractmethod
    async def find_element(self) -> MediaElement | None: ...
