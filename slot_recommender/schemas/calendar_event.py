# slot_recommender/schemas/calendar_event.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from slot_recommender.schemas.time_slot import FormattedSlotTimes


class CalendarEvent(BaseModel):
    """
    Calendar event stored for a confirmed meeting slot.
    """

    id: str
    meeting_request_id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: str | None = Field(
        None,
        description="Organizer's custom message sent with the confirmation.",
        examples=["Looking forward to it!"],
    )
    agenda: str | None = None
    location: str | None = None
    status: str = Field("confirmed", examples=["confirmed"])


class CalendarEventRead(CalendarEvent):
    """
    Calendar event as returned by the HTTP API.
    """

    formatted: FormattedSlotTimes
