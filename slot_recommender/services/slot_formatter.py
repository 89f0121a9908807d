# slot_recommender/services/slot_formatter.py
from __future__ import annotations

import logging
from datetime import datetime

import pytz

from slot_recommender.core.timeutils import ensure_utc
from slot_recommender.schemas.calendar_event import CalendarEvent, CalendarEventRead
from slot_recommender.schemas.time_slot import (
    FormattedSlotTimes,
    MeetingTimeSlot,
    SuggestedSlotRead,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%a %b %d %Y"
TIME_FORMAT = "%I:%M %p"


def _resolve_timezone(name: str | None):
    if not name:
        return pytz.utc
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown display timezone %r, formatting slots in UTC", name)
        return pytz.utc


def _format_times(start: datetime, end: datetime, timezone_name: str | None) -> FormattedSlotTimes:
    local_start = ensure_utc(start).astimezone(_resolve_timezone(timezone_name))
    return FormattedSlotTimes(
        start=ensure_utc(start).isoformat(),
        end=ensure_utc(end).isoformat(),
        date=local_start.strftime(DATE_FORMAT),
        time=local_start.strftime(TIME_FORMAT),
    )


def format_slot(slot: MeetingTimeSlot, timezone_name: str | None = "UTC") -> SuggestedSlotRead:
    """
    Render a scored slot for the HTTP API.

    ISO timestamps are always UTC; the human-readable date/time strings use
    `timezone_name` (the request's preferences timezone).
    """
    return SuggestedSlotRead(
        id=slot.id,
        start_time=ensure_utc(slot.start_time),
        end_time=ensure_utc(slot.end_time),
        score=slot.score,
        confidence=round(slot.confidence * 100),
        reasoning=slot.reasoning,
        conflicts=list(slot.participant_conflicts),
        availability_summary=slot.availability_summary,
        optimal_factors=list(slot.optimal_factors),
        formatted=_format_times(slot.start_time, slot.end_time, timezone_name),
    )


def format_event(event: CalendarEvent, timezone_name: str | None = "UTC") -> CalendarEventRead:
    return CalendarEventRead(
        **event.model_dump(exclude={"start_time", "end_time"}),
        start_time=ensure_utc(event.start_time),
        end_time=ensure_utc(event.end_time),
        formatted=_format_times(event.start_time, event.end_time, timezone_name),
    )
