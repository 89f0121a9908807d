# slot_recommender/schemas/meeting_request.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from slot_recommender.schemas.participant import HHMM_PATTERN


class MeetingType(str, Enum):
    ONE_ON_ONE = "one_on_one"
    TEAM = "team"
    INTERVIEW = "interview"
    PRESENTATION = "presentation"
    WORKSHOP = "workshop"
    STANDUP = "standup"


class MeetingPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class LocationType(str, Enum):
    IN_PERSON = "in_person"
    VIDEO_CALL = "video_call"
    PHONE = "phone"
    HYBRID = "hybrid"


class MeetingStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"


class TimeWindow(BaseModel):
    """
    A wall-clock window within a day, e.g. 09:00-12:00.
    """

    start: str = Field(..., pattern=HHMM_PATTERN, examples=["09:00"])
    end: str = Field(..., pattern=HHMM_PATTERN, examples=["17:00"])


class MeetingPreferences(BaseModel):
    """
    Organizer's scheduling preferences.

    Day numbers use 0 = Sunday ... 6 = Saturday. Only `preferred_days`
    (weekend inclusion) and `timezone` (display formatting) influence the
    engine; the other fields are persisted with the request.
    """

    preferred_times: list[TimeWindow] | None = None
    avoid_times: list[TimeWindow] | None = None
    preferred_days: list[int] | None = Field(
        None,
        description="Days to include (0 = Sunday ... 6 = Saturday).",
        examples=[[1, 2, 3]],
    )
    avoid_days: list[int] | None = None
    timezone: str = Field("UTC", description="IANA timezone used to format suggested slots.")
    max_participants: int | None = Field(None, ge=1)
    require_all_participants: bool = True


class MeetingRequest(BaseModel):
    """
    Input to the scheduling engine.

    Immutable once created. Field values are not range-checked here so the
    engine can report invalid requests as a distinct result variant.
    """

    model_config = ConfigDict(frozen=True)

    organizer_id: str
    title: str
    participants: list[str]
    duration_minutes: int
    meeting_type: MeetingType = MeetingType.TEAM
    priority: MeetingPriority = MeetingPriority.MEDIUM
    location_type: LocationType = LocationType.VIDEO_CALL
    location_details: str | None = None
    agenda: str | None = None
    preparation_time: int = 0
    buffer_time: int = 15
    preferences: MeetingPreferences | None = None


# --------------------------------------------------------------------------
# API payloads
# --------------------------------------------------------------------------

class ScheduleMeetingPayload(BaseModel):
    """
    Body of POST /meetings/schedule.
    """

    organizer_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Identifier of the user organizing the meeting.",
        examples=["user-42"],
    )
    title: str = Field(..., min_length=1, max_length=200, examples=["Sprint planning"])
    participants: list[EmailStr] = Field(
        ...,
        min_length=1,
        description="Participant email addresses.",
        examples=[["alice@example.com", "bob@example.com"]],
    )
    duration: int = Field(
        ...,
        ge=15,
        le=480,
        description="Meeting length in minutes (15 minutes to 8 hours).",
        examples=[30],
    )
    meeting_type: MeetingType = MeetingType.TEAM
    priority: MeetingPriority = MeetingPriority.MEDIUM
    location_type: LocationType = LocationType.VIDEO_CALL
    location_details: str | None = Field(None, max_length=500)
    agenda: str | None = Field(None, max_length=2000)
    preparation_time: int = Field(0, ge=0, le=120, description="Minutes needed before the meeting.")
    buffer_time: int = Field(15, ge=0, le=60, description="Minutes of buffer after the meeting.")
    preferences: MeetingPreferences | None = None

    def to_meeting_request(self) -> MeetingRequest:
        return MeetingRequest(
            organizer_id=self.organizer_id,
            title=self.title,
            participants=[str(p) for p in self.participants],
            duration_minutes=self.duration,
            meeting_type=self.meeting_type,
            priority=self.priority,
            location_type=self.location_type,
            location_details=self.location_details,
            agenda=self.agenda,
            preparation_time=self.preparation_time,
            buffer_time=self.buffer_time,
            preferences=self.preferences,
        )


class ConfirmSlotPayload(BaseModel):
    """
    Body of POST /meetings/{request_id}/confirm.
    """

    organizer_id: str = Field(..., min_length=1, max_length=64)
    selected_slot_id: str = Field(..., min_length=1)
    custom_message: str | None = Field(None, max_length=500)


class SelectedSlot(BaseModel):
    """
    Summary of the confirmed slot stored on the meeting request.
    """

    slot_id: str
    start_time: datetime
    end_time: datetime
    confirmed_at: datetime


class MeetingRequestRead(BaseModel):
    """
    Public representation of a persisted meeting request.
    """

    id: str
    organizer_id: str
    title: str
    participants: list[str]
    duration_minutes: int
    meeting_type: MeetingType
    priority: MeetingPriority
    location_type: LocationType
    location_details: str | None = None
    agenda: str | None = None
    preparation_time: int = 0
    buffer_time: int = 15
    preferences: MeetingPreferences | None = None
    status: MeetingStatus
    selected_slot: SelectedSlot | None = None
    created_at: datetime
    updated_at: datetime


class MeetingRequestSummary(BaseModel):
    """
    Row of GET /meetings.
    """

    id: str
    title: str
    participants: list[str]
    duration_minutes: int
    meeting_type: MeetingType
    priority: MeetingPriority
    status: MeetingStatus
    suggested_slots_count: int = Field(
        ...,
        description="Number of candidate slots stored for this request.",
        examples=[5],
    )
    created_at: datetime
    updated_at: datetime
