"""Toast renderers — draw and remove the transient acknowledgment."""

from __future__ import annotations

from abc import ABC, abstractmethod

from playwright.async_api import Page

from restarter.settings.model import NotificationStyle, ToastPosition

TOAST_ID = "ytr-toast"

# Pushes the toast below the host's top bar as it grows
_TOP_BASE_PX = 22
_TOP_PER_SCALE_PX = 22


def toast_top_px(scale: float) -> int:
    return round(_TOP_BASE_PX + (scale - 1) * _TOP_PER_SCALE_PX)


def horizontal_layout(position: ToastPosition) -> dict[str, str]:
    """left/right/translate-x for the toast anchor."""
    if position == ToastPosition.LEFT:
        return {"left": "18px", "right": "auto", "x": "0%"}
    if position == ToastPosition.RIGHT:
        return {"left": "auto", "right": "18px", "x": "0%"}
    return {"left": "50%", "right": "auto", "x": "-50%"}


def toast_properties(style: NotificationStyle) -> dict[str, str]:
    """CSS custom properties the toast stylesheet reads."""
    return {
        "--ytr-x": horizontal_layout(style.position)["x"],
        "--ytr-scale": str(style.scale),
        "--ytr-top": f"{toast_top_px(style.scale)}px",
        "--ytr-bg": style.bg_color,
        "--ytr-fg": style.text_color,
        "--ytr-anim-duration": f"{style.animation_duration_ms}ms",
    }


class ToastRenderer(ABC):
    @abstractmethod
    async def show(self, message: str, style: NotificationStyle) -> None: ...

    @abstractmethod
    async def hide(self) -> None: ...


_SHOW_JS = """({ id, message, left, right, props, animate }) => {
    let el = document.getElementById(id);
    if (!el) {
        el = document.createElement('div');
        el.id = id;
        el.className = 'ytr-toast';
        el.setAttribute('role', 'status');
        el.setAttribute('aria-live', 'polite');
        document.documentElement.appendChild(el);
    }
    el.textContent = message;
    el.style.left = left;
    el.style.right = right;
    for (const [name, value] of Object.entries(props)) {
        el.style.setProperty(name, value);
    }
    el.classList.remove('ytr-toast--anim-drop');
    void el.offsetWidth;
    if (animate) {
        el.classList.add('ytr-toast--anim-drop');
    }
    el.classList.add('ytr-toast--show');
}"""

_HIDE_JS = """(id) => {
    const el = document.getElementById(id);
    if (el) {
        el.classList.remove('ytr-toast--show');
    }
}"""


class PlaywrightToastRenderer(ToastRenderer):
    """Renders the toast as a single ``role=status`` element injected into the page."""

    def __init__(self, page: Page, *, element_id: str = TOAST_ID) -> None:
        self._page = page
        self._element_id = element_id

    async def show(self, message: str, style: NotificationStyle) -> None:
        layout = horizontal_layout(style.position)
        await self._page.evaluate(
            _SHOW_JS,
            {
                "id": self._element_id,
                "message": message,
                "left": layout["left"],
                "right": layout["right"],
                "props": toast_properties(style),
                "animate": style.animation_enabled,
            },
        )

    async def hide(self) -> None:
        await self._page.evaluate(_HIDE_JS, self._element_id)
