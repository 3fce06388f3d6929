"""
Time-related utilities for the application.

Object keys embed epoch milliseconds, so key generation takes an injectable
clock rather than reading the wall clock directly.
"""

import time
from datetime import datetime, timezone
from typing import Protocol


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00
    """
    return datetime.now(timezone.utc).isoformat()


class Clock(Protocol):
    """Source of epoch milliseconds."""

    def now_millis(self) -> int: ...


class SystemClock:
    """Wall clock backed by ``time.time_ns``."""

    def now_millis(self) -> int:
        return time.time_ns() // 1_000_000
