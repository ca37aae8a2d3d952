"""Epoch-millisecond clock helpers.

Telemetry stamps (``updated_at``, ``last_seen``) are integer epoch
milliseconds written by brain firmware, so all comparisons stay in ms.
"""

from __future__ import annotations

import time


def now_ms() -> int:
    """Return current timestamp in milliseconds."""
    return int(time.time() * 1000)


def age_ms(stamp: int, now: int | None = None) -> int:
    """Milliseconds elapsed since ``stamp``; negative when the stamp is ahead of ``now``."""
    if now is None:
        now = now_ms()
    return now - stamp


__all__ = ["now_ms", "age_ms"]
