# tests/test_slot_generator.py
from datetime import datetime, timedelta

import pytz

from slot_recommender.schemas.meeting_request import MeetingPreferences, MeetingRequest
from slot_recommender.services.slot_generator import (
    SchedulerConfig,
    generate_candidate_slots,
)

# Monday
MONDAY_7AM = pytz.utc.localize(datetime(2026, 10, 19, 7, 0))


def _request(duration: int = 30, preferences: MeetingPreferences | None = None) -> MeetingRequest:
    return MeetingRequest(
        organizer_id="user-1",
        title="Planning",
        participants=["alice@example.com"],
        duration_minutes=duration,
        preferences=preferences,
    )


def test_generates_weekday_grid_over_horizon():
    """
    From Monday 07:00 with a 7-day horizon: five weekdays, 20 half-hour
    starts per day between 08:00 and 17:30.
    """
    slots = generate_candidate_slots(_request(), MONDAY_7AM)

    assert len(slots) == 100
    assert slots[0].start == pytz.utc.localize(datetime(2026, 10, 19, 8, 0))
    assert slots[-1].start == pytz.utc.localize(datetime(2026, 10, 23, 17, 30))
    assert slots[-1].end == pytz.utc.localize(datetime(2026, 10, 23, 18, 0))
    assert all(s.start.weekday() < 5 for s in slots)
    assert [s.start for s in slots] == sorted(s.start for s in slots)


def test_windows_never_end_after_close():
    slots = generate_candidate_slots(_request(duration=60), MONDAY_7AM)

    # 08:00 .. 17:00 starts: 19 per weekday
    assert len(slots) == 5 * 19
    for slot in slots:
        assert slot.end - slot.start == timedelta(minutes=60)
        close = slot.start.replace(hour=18, minute=0)
        assert slot.end <= close


def test_windows_never_start_before_now():
    now = pytz.utc.localize(datetime(2026, 10, 19, 10, 15))

    slots = generate_candidate_slots(_request(), now)

    monday = [s for s in slots if s.start.date() == now.date()]
    assert monday[0].start == pytz.utc.localize(datetime(2026, 10, 19, 10, 30))
    assert len(monday) == 15
    assert all(s.start >= now for s in slots)


def test_weekend_included_only_when_preferred():
    """
    Day numbers use 0 = Sunday ... 6 = Saturday.
    """
    default_slots = generate_candidate_slots(_request(), MONDAY_7AM)
    saturday_slots = generate_candidate_slots(
        _request(preferences=MeetingPreferences(preferred_days=[6])),
        MONDAY_7AM,
    )

    assert not any(s.start.weekday() == 5 for s in default_slots)
    saturdays = [s for s in saturday_slots if s.start.weekday() == 5]
    assert len(saturdays) == 20
    assert not any(s.start.weekday() == 6 for s in saturday_slots)


def test_grid_follows_timezone_of_now():
    tz = pytz.timezone("America/New_York")
    now = tz.localize(datetime(2026, 10, 19, 7, 0))

    slots = generate_candidate_slots(_request(), now)

    assert slots[0].start.hour == 8
    assert slots[0].start.utcoffset() == timedelta(hours=-4)


def test_duration_longer_than_business_day_yields_nothing():
    assert generate_candidate_slots(_request(duration=11 * 60), MONDAY_7AM) == []


def test_config_controls_grid():
    config = SchedulerConfig(
        business_hours_start=9,
        business_hours_end=12,
        slot_interval_minutes=60,
        horizon_days=1,
    )

    slots = generate_candidate_slots(_request(), MONDAY_7AM, config)

    assert [s.start.hour for s in slots] == [9, 10, 11]
