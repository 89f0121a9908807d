# slot_recommender/schemas/scheduling.py
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from slot_recommender.schemas.calendar_event import CalendarEventRead
from slot_recommender.schemas.meeting_request import MeetingRequestRead
from slot_recommender.schemas.time_slot import MeetingTimeSlot, SuggestedSlotRead


class SchedulingDifficulty(str, Enum):
    """
    Four-level classification derived from the best score achieved.
    """

    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    VERY_DIFFICULT = "very_difficult"


class SchedulingAnalysis(BaseModel):
    """
    Aggregate view over all slots that survived the score floor.
    """

    total_slots_analyzed: int = Field(
        ...,
        description="Number of scored slots above the score floor.",
        examples=[42],
    )
    total_candidates_generated: int = Field(
        ...,
        description="Number of raw candidate windows produced by the slot generator.",
        examples=[90],
    )
    best_score: int = Field(..., examples=[100])
    average_score: int = Field(..., examples=[78])
    scheduling_difficulty: SchedulingDifficulty
    recommendations: list[str] = Field(default_factory=list)


class ParticipantFeedback(BaseModel):
    """
    Per-participant view over all ranked slots.
    """

    availability_rate: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Fraction of ranked slots in which the participant has no conflict.",
        examples=[0.75],
    )
    constraints_met: bool = Field(
        True,
        description="Placeholder; constraint satisfaction is not verified at this stage.",
    )
    suggested_alternatives: list[str] | None = None


class SchedulingResult(BaseModel):
    """
    Successful scheduling run with at least one viable slot.
    """

    outcome: Literal["scheduled"] = "scheduled"
    meeting_request_id: str
    suggested_slots: list[MeetingTimeSlot] = Field(
        ...,
        description="Top slots sorted by score, highest first.",
    )
    analysis: SchedulingAnalysis
    participant_feedback: dict[str, ParticipantFeedback]


class NoViableSlotsResult(BaseModel):
    """
    Every generated candidate scored at or below the floor (or none were generated).
    """

    outcome: Literal["no_viable_slots"] = "no_viable_slots"
    meeting_request_id: str
    total_candidates_generated: int
    scheduling_difficulty: SchedulingDifficulty = SchedulingDifficulty.VERY_DIFFICULT
    recommendations: list[str] = Field(default_factory=list)


class InvalidRequestResult(BaseModel):
    """
    The request was rejected before any lookup, generation or persistence.
    """

    outcome: Literal["invalid_request"] = "invalid_request"
    errors: list[str]


SchedulingOutcome = Annotated[
    Union[SchedulingResult, NoViableSlotsResult, InvalidRequestResult],
    Field(discriminator="outcome"),
]


# --------------------------------------------------------------------------
# API responses
# --------------------------------------------------------------------------

class ScheduleMeetingResponse(BaseModel):
    """
    Response of POST /meetings/schedule for both `scheduled` and
    `no_viable_slots` outcomes.
    """

    message: str = Field(..., examples=["Meeting scheduling analysis completed"])
    outcome: Literal["scheduled", "no_viable_slots"]
    meeting_request_id: str
    suggested_slots: list[SuggestedSlotRead]
    analysis: SchedulingAnalysis | None = None
    scheduling_difficulty: SchedulingDifficulty
    recommendations: list[str]
    participant_feedback: dict[str, ParticipantFeedback] = Field(default_factory=dict)


class MeetingRequestDetail(BaseModel):
    """
    Response of GET /meetings/{request_id}.
    """

    meeting: MeetingRequestRead
    suggested_slots: list[SuggestedSlotRead]


class ConfirmSlotResponse(BaseModel):
    """
    Response of POST /meetings/{request_id}/confirm.
    """

    message: str = Field(..., examples=["Meeting slot confirmed successfully"])
    meeting: MeetingRequestRead
    slot: SuggestedSlotRead
    event_id: str = Field(..., description="Identifier of the created calendar event.")
    calendar_event: CalendarEventRead
