"""Millisecond wall-clock helpers."""

from __future__ import annotations

import time

_POLL_SECONDS = 0.0001


def now_ms() -> int:
    """Current wall-clock time in whole milliseconds."""
    return time.time_ns() // 1_000_000


def wait_ms(start: int, duration: int) -> None:
    """Block until ``duration`` milliseconds have passed since ``start``."""
    while now_ms() - start < duration:
        time.sleep(_POLL_SECONDS)