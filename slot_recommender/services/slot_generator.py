# slot_recommender/services/slot_generator.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import List

from slot_recommender.core.config import Settings
from slot_recommender.core.timeutils import sunday_based_weekday, wall_clock
from slot_recommender.schemas.meeting_request import MeetingRequest

_WEEKEND = {0, 6}  # Sunday, Saturday


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Tunables for slot generation and ranking.
    """

    business_hours_start: int = 8
    business_hours_end: int = 18
    slot_interval_minutes: int = 30
    horizon_days: int = 7
    max_suggested_slots: int = 5
    min_slot_score: int = 20

    @classmethod
    def from_settings(cls, settings: Settings) -> "SchedulerConfig":
        return cls(
            business_hours_start=settings.BUSINESS_HOURS_START,
            business_hours_end=settings.BUSINESS_HOURS_END,
            slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
            horizon_days=settings.SCHEDULING_HORIZON_DAYS,
            max_suggested_slots=settings.MAX_SUGGESTED_SLOTS,
            min_slot_score=settings.MIN_SLOT_SCORE,
        )


@dataclass(frozen=True)
class CandidateSlot:
    """
    Raw ``[start, end)`` candidate window.
    """

    start: datetime
    end: datetime


def _close_of_day(reference: datetime, day, end_hour: int) -> datetime:
    if end_hour >= 24:
        return wall_clock(reference, day + timedelta(days=1), time(0, 0))
    return wall_clock(reference, day, time(end_hour, 0))


def generate_candidate_slots(
    request: MeetingRequest,
    now: datetime,
    config: SchedulerConfig | None = None,
) -> List[CandidateSlot]:
    """
    Enumerate fixed-length candidate windows on a business-hours grid.

    Rules
    -----
    - Days: `config.horizon_days` days starting with the day of `now`.
    - Saturday/Sunday are skipped unless listed in
      ``request.preferences.preferred_days`` (0 = Sunday ... 6 = Saturday).
    - Starts: every `slot_interval_minutes` from `business_hours_start` up to
      but excluding `business_hours_end`, in `now`'s timezone.
    - A window is dropped if it ends after the business-hours close or
      starts before `now`.

    Overlapping windows are kept; the result is ordered by start time.
    """
    config = config or SchedulerConfig()
    duration = timedelta(minutes=request.duration_minutes)
    step = timedelta(minutes=config.slot_interval_minutes)

    preferred_days = set()
    if request.preferences and request.preferences.preferred_days:
        preferred_days = set(request.preferences.preferred_days)

    slots: List[CandidateSlot] = []

    for offset in range(config.horizon_days):
        day = (now + timedelta(days=offset)).date()
        weekday = sunday_based_weekday(day)
        if weekday in _WEEKEND and weekday not in preferred_days:
            continue

        day_open = wall_clock(now, day, time(config.business_hours_start, 0))
        day_close = _close_of_day(now, day, config.business_hours_end)

        slot_start = day_open
        while slot_start < day_close:
            slot_end = slot_start + duration
            if slot_end <= day_close and slot_start >= now:
                slots.append(CandidateSlot(start=slot_start, end=slot_end))
            slot_start += step

    return slots
