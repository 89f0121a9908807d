# slot_recommender/schemas/time_slot.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AvailabilitySummary(BaseModel):
    """
    Per-slot participant counts by availability status.
    """

    total_participants: int = Field(..., examples=[3])
    available_participants: int = Field(..., examples=[2])
    busy_participants: int = Field(..., examples=[1])
    tentative_participants: int = Field(..., examples=[0])


class MeetingTimeSlot(BaseModel):
    """
    A scored candidate meeting window.
    """

    id: str = Field(..., description="Identifier assigned by the id provider.")
    start_time: datetime
    end_time: datetime
    score: int = Field(..., ge=0, le=100, description="Bounded 0-100 slot score.", examples=[85])
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="How much real (vs. default) availability data backed the score.",
        examples=[0.9],
    )
    reasoning: str = Field(
        ...,
        description="Human-readable notes joined with '; '.",
        examples=["Good availability for all participants"],
    )
    participant_conflicts: list[str] = Field(default_factory=list)
    availability_summary: AvailabilitySummary
    optimal_factors: list[str] = Field(
        default_factory=list,
        description="Short tags explaining positive scoring contributions.",
        examples=[["Morning slot (high productivity)", "Weekday (better attendance)"]],
    )


class FormattedSlotTimes(BaseModel):
    """
    Display strings for a slot, rendered in the request timezone.
    """

    start: str = Field(..., description="ISO-8601 start (UTC).", examples=["2026-10-20T09:00:00+00:00"])
    end: str = Field(..., description="ISO-8601 end (UTC).", examples=["2026-10-20T09:30:00+00:00"])
    date: str = Field(..., examples=["Tue Oct 20 2026"])
    time: str = Field(..., examples=["09:00 AM"])


class SuggestedSlotRead(BaseModel):
    """
    A suggested slot as returned by the HTTP API.
    """

    id: str
    start_time: datetime
    end_time: datetime
    score: int
    confidence: int = Field(..., ge=0, le=100, description="Confidence as a percentage.", examples=[90])
    reasoning: str
    conflicts: list[str]
    availability_summary: AvailabilitySummary
    optimal_factors: list[str]
    formatted: FormattedSlotTimes
