from __future__ import annotations

from datetime import datetime, timedelta

from devkit.timezone import parse_timestamp

DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=5)


def is_online(
    last_seen: str | datetime | None,
    now: datetime,
    freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
) -> bool:
    """Single online policy shared by workers, municipalities and presence views."""
    seen_at = parse_timestamp(last_seen)
    if seen_at is None:
        return False
    return now - seen_at < freshness_window
