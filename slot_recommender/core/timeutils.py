# slot_recommender/core/timeutils.py
from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from typing import Callable

import pytz

Clock = Callable[[], datetime]


def localize(tz: tzinfo, naive: datetime) -> datetime:
    """
    Attach `tz` to a naive wall-clock datetime.

    pytz zones must go through ``localize`` to pick the right UTC offset;
    fixed-offset zones can simply be attached.
    """
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def wall_clock(reference: datetime, day: date, at: time) -> datetime:
    """
    Build `day` at wall-clock time `at` in the timezone of `reference`.
    """
    return localize(reference.tzinfo or timezone.utc, datetime.combine(day, at))


def parse_hhmm(value: str) -> time:
    hour, minute = (int(part) for part in value.split(":", 1))
    return time(hour, minute)


def fractional_hour(moment: datetime) -> float:
    return moment.hour + moment.minute / 60.0


def sunday_based_weekday(moment: datetime | date) -> int:
    """
    Day number with 0 = Sunday ... 6 = Saturday (the convention used by
    meeting preferences).
    """
    return (moment.weekday() + 1) % 7


def ensure_utc(moment: datetime) -> datetime:
    """
    Normalize to aware UTC. Naive values (e.g. read back from SQLite) are
    assumed to already be UTC.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def system_clock(timezone_name: str = "UTC") -> Clock:
    """
    Clock returning the current time in the named timezone.
    """
    tz = pytz.timezone(timezone_name)

    def _now() -> datetime:
        return datetime.now(tz)

    return _now
