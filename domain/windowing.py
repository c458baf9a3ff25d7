"""
Domain: Trailing time windows over timestamped events (pure).

A trailing window of length W ending at `now` contains every event with
timestamp >= now - W. Events stamped after `now` (clock skew) are counted;
the window has no upper bound.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Iterable, TypeVar

from .time import require_utc_timestamp

T = TypeVar("T")


def window_start(now: datetime, window: timedelta) -> datetime:
    require_utc_timestamp("now", now)
    if window <= timedelta(0):
        raise ValueError("window must be a positive duration")
    return now - window


def count_in_trailing_window(
    items: Iterable[T],
    timestamp_of: Callable[[T], datetime],
    now: datetime,
    window: timedelta,
) -> int:
    """Count items whose timestamp falls inside the trailing window."""

    cutoff = window_start(now, window)
    return sum(1 for item in items if timestamp_of(item) >= cutoff)
