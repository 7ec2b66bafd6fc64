"""Clock helpers.

Time-dependent components take one of these as a constructor argument so
tests can substitute a fake.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime

MsClock = Callable[[], int]
DatetimeClock = Callable[[], datetime]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def ms_to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=UTC)
