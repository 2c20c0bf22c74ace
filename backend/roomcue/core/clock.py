"""Millisecond wall clock used when callers do not pass an explicit `now`."""

import time


def now_ms() -> float:
    return time.time() * 1000.0
