# slot_recommender/schemas/participant.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AvailabilityStatus(str, Enum):
    """
    Status of a participant for a given time interval.
    """

    FREE = "free"
    BUSY = "busy"
    TENTATIVE = "tentative"
    OUT_OF_OFFICE = "out_of_office"


class ParticipantRole(str, Enum):
    """
    Informational role of a participant. Has no effect on scoring.
    """

    ORGANIZER = "organizer"
    REQUIRED = "required"
    OPTIONAL = "optional"
    PRESENTER = "presenter"
    OBSERVER = "observer"


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """
    Strict interior overlap of two half-open intervals.

    Touching endpoints (``a_end == b_start``) do not overlap.
    """
    return a_start < b_end and b_start < a_end


class AvailabilitySlot(BaseModel):
    """
    Half-open ``[start, end)`` interval tagged with an availability status.
    """

    start: datetime = Field(..., description="Inclusive start of the interval.")
    end: datetime = Field(..., description="Exclusive end of the interval.")
    status: AvailabilityStatus = Field(
        ...,
        description="free / busy / tentative / out_of_office",
        examples=["busy"],
    )

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(self.start, self.end, start, end)


class ParticipantConstraints(BaseModel):
    """
    Per-participant scheduling constraints.

    Only `no_meetings_before` / `no_meetings_after` are evaluated when scoring.
    The remaining fields are carried through untouched.
    """

    no_meetings_before: str | None = Field(
        None,
        pattern=HHMM_PATTERN,
        description="Earliest acceptable meeting start (HH:MM).",
        examples=["09:00"],
    )
    no_meetings_after: str | None = Field(
        None,
        pattern=HHMM_PATTERN,
        description="Latest acceptable meeting start (HH:MM).",
        examples=["17:00"],
    )
    max_meetings_per_day: int | None = Field(None, ge=0)
    preferred_meeting_length: int | None = Field(None, ge=0)
    break_between_meetings: int | None = Field(
        None,
        ge=0,
        description="Minimum break between meetings in minutes (not enforced).",
    )


class Participant(BaseModel):
    """
    A resolved meeting participant.

    Participants are derived fresh on every scheduling call and are never
    persisted as first-class entities.
    """

    email: str
    name: str | None = None
    role: ParticipantRole = ParticipantRole.REQUIRED
    timezone: str = "UTC"
    availability: list[AvailabilitySlot] = Field(default_factory=list)
    constraints: ParticipantConstraints = Field(default_factory=ParticipantConstraints)
    is_registered: bool = Field(
        False,
        description="True when the email matched a registered user record.",
    )
