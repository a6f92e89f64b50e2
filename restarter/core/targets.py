"""Watch-page detection, target identity and time formatting."""

from __future__ import annotations

import math
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

_WATCH_HOST = "www.youtube.com"
_WATCH_PATH = "/watch"


def is_watch_url(url: str) -> bool:
    """True for ``https://www.youtube.com/watch?v=...`` style URLs."""
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except (TypeError, ValueError, AttributeError):
        return False
    if host != _WATCH_HOST or parsed.path != _WATCH_PATH:
        return False
    return "v" in parse_qs(parsed.query, keep_blank_values=True)


def canonical_target(url: str) -> str:
    """
    Reduce a URL to the identity the reset engine deduplicates on.

    Watch pages collapse to their video id so query noise added by
    replaceState (``t=``, ``pp=``, playlist index) is not a new target.
    """
    url = url.strip()
    if is_watch_url(url):
        video_id = parse_qs(urlparse(url).query, keep_blank_values=True)["v"][0]
        return f"https://{_WATCH_HOST}{_WATCH_PATH}?{urlencode({'v': video_id})}"
    parsed = urlparse(url)
    return urlunparse(
        (
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path,
            parsed.params,
            parsed.query,
            "",
        )
    )


def format_time(seconds: float) -> str:
    """``mm:ss`` of the whole seconds; minutes are not wrapped into hours."""
    s = max(0, math.floor(seconds))
    return f"{s // 60:02d}:{s % 60:02d}"
