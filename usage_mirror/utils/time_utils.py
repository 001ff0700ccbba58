"""
Calendar and wall-clock helpers.

The engine only reasons about calendar days and hour-of-day values already
present on the records.  The timezone used to read a ``created_at`` hour is
always passed in explicitly; nothing here consults the host's local zone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from usage_mirror.utils.rounding import round_half_up

# Late-night window is [22:00, 06:00)
LATE_NIGHT_START_HOUR = 22
LATE_NIGHT_END_HOUR = 6


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Turn an IANA timezone name into a ``tzinfo``.

    An empty or ``None`` name yields ``None`` (read timestamps on their own
    wall clock).  Unknown names raise ``ValueError``.
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"Invalid timezone '{name}'. Use IANA timezone identifiers."
        )


def local_hour(timestamp: datetime, tz: tzinfo | None = None) -> int:
    """Return the wall-clock hour of ``timestamp``.

    Naive timestamps are taken as already local.  Aware timestamps are
    converted to ``tz`` when one is given.
    """
    if tz is not None and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    return timestamp.hour


def is_late_night(timestamp: datetime | None, tz: tzinfo | None = None) -> bool:
    """True when ``timestamp`` falls in the late-night window.

    Records without a timestamp never count as late-night.
    """
    if timestamp is None:
        return False
    hour = local_hour(timestamp, tz)
    return hour >= LATE_NIGHT_START_HOUR or hour < LATE_NIGHT_END_HOUR


def week_start(day: date) -> date:
    """Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def day_gap(earlier: date, later: date) -> int:
    """Whole days from ``earlier`` to ``later``."""
    return (later - earlier).days


def format_minutes(minutes: float | None) -> str:
    """Format a minute count as e.g. ``"2 hrs 15 mins"`` or ``"45 mins"``."""
    if not minutes:
        return "0 mins"

    total = round_half_up(abs(minutes))
    hours, mins = divmod(total, 60)

    hour_part = f"{hours} {'hr' if hours == 1 else 'hrs'}"
    min_part = f"{mins} {'min' if mins == 1 else 'mins'}"

    if hours == 0:
        return min_part
    if mins == 0:
        return hour_part
    return f"{hour_part} {min_part}"
