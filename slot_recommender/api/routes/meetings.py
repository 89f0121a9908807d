# slot_recommender/api/routes/meetings.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from slot_recommender.api.dependencies.scheduling import (
    get_clock,
    get_meeting_scheduler,
    get_meeting_store,
)
from slot_recommender.core.errors import (
    MeetingRequestNotFoundError,
    SchedulingError,
    SlotNotFoundError,
)
from slot_recommender.core.timeutils import Clock
from slot_recommender.schemas.meeting_request import (
    ConfirmSlotPayload,
    MeetingRequestSummary,
    MeetingStatus,
    ScheduleMeetingPayload,
)
from slot_recommender.schemas.scheduling import (
    ConfirmSlotResponse,
    InvalidRequestResult,
    MeetingRequestDetail,
    NoViableSlotsResult,
    ScheduleMeetingResponse,
)
from slot_recommender.services.meeting_scheduler import MeetingScheduler
from slot_recommender.services.meeting_store import SqlMeetingStore
from slot_recommender.services.slot_formatter import format_event, format_slot

router = APIRouter(prefix="/meetings", tags=["Meetings"])

MAX_LIST_LIMIT = 50
DETAIL_SLOT_LIMIT = 10

_SLOT_EXAMPLE = {
    "id": "5b0c3c2e-4f5e-4a8e-9d59-0f1a3f0f7a11",
    "start_time": "2026-10-20T09:00:00Z",
    "end_time": "2026-10-20T09:30:00Z",
    "score": 100,
    "confidence": 100,
    "reasoning": "Good availability for all participants",
    "conflicts": [],
    "availability_summary": {
        "total_participants": 2,
        "available_participants": 2,
        "busy_participants": 0,
        "tentative_participants": 0,
    },
    "optimal_factors": [
        "Morning slot (high productivity)",
        "Weekday (better attendance)",
    ],
    "formatted": {
        "start": "2026-10-20T09:00:00+00:00",
        "end": "2026-10-20T09:30:00+00:00",
        "date": "Tue Oct 20 2026",
        "time": "09:00 AM",
    },
}


@router.post(
    "/schedule",
    response_model=ScheduleMeetingResponse,
    status_code=HTTPStatus.OK,
    summary="Suggest time slots for a new meeting",
    description=(
        "Runs the slot recommendation pipeline for a meeting request:\n\n"
        "1. Resolve every participant's availability (calendar data for registered "
        "users, a default working-hours calendar for external contacts).\n"
        "2. Enumerate candidate windows on a 30-minute grid over the next 7 days "
        "inside business hours.\n"
        "3. Score each window 0-100 and keep the best five above the score floor.\n\n"
        "The request and its suggested slots are stored so one of the slots can "
        "later be confirmed via `POST /meetings/{request_id}/confirm`.\n\n"
        "When no window clears the score floor the response has "
        "`outcome = no_viable_slots`, an empty slot list and recommendations."
    ),
    responses={
        200: {
            "description": "Analysis completed (with or without viable slots).",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Meeting scheduling analysis completed",
                        "outcome": "scheduled",
                        "meeting_request_id": "0f9b8d86-0f0c-4f1c-8b0e-92d1a4c1c5d3",
                        "suggested_slots": [_SLOT_EXAMPLE],
                        "analysis": {
                            "total_slots_analyzed": 95,
                            "total_candidates_generated": 95,
                            "best_score": 100,
                            "average_score": 91,
                            "scheduling_difficulty": "easy",
                            "recommendations": [],
                        },
                        "scheduling_difficulty": "easy",
                        "recommendations": [],
                        "participant_feedback": {
                            "alice@example.com": {
                                "availability_rate": 1.0,
                                "constraints_met": True,
                                "suggested_alternatives": None,
                            }
                        },
                    }
                }
            },
        },
        400: {
            "description": "The request failed validation (blank title, duplicate participants, ...).",
            "content": {
                "application/json": {
                    "example": {"detail": ["duplicate participant: alice@example.com"]}
                }
            },
        },
        500: {
            "description": "An unexpected failure occurred while scheduling.",
            "content": {
                "application/json": {"example": {"detail": "Failed to schedule meeting"}}
            },
        },
    },
)
async def schedule_meeting(
    payload: ScheduleMeetingPayload,
    scheduler: MeetingScheduler = Depends(get_meeting_scheduler),
) -> ScheduleMeetingResponse:
    request = payload.to_meeting_request()

    try:
        outcome = await scheduler.schedule_meeting(request)
    except SchedulingError as exc:
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    if isinstance(outcome, InvalidRequestResult):
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=outcome.errors)

    if isinstance(outcome, NoViableSlotsResult):
        return ScheduleMeetingResponse(
            message="No viable time slots found",
            outcome=outcome.outcome,
            meeting_request_id=outcome.meeting_request_id,
            suggested_slots=[],
            analysis=None,
            scheduling_difficulty=outcome.scheduling_difficulty,
            recommendations=outcome.recommendations,
        )

    display_tz = request.preferences.timezone if request.preferences else "UTC"
    return ScheduleMeetingResponse(
        message="Meeting scheduling analysis completed",
        outcome=outcome.outcome,
        meeting_request_id=outcome.meeting_request_id,
        suggested_slots=[format_slot(s, display_tz) for s in outcome.suggested_slots],
        analysis=outcome.analysis,
        scheduling_difficulty=outcome.analysis.scheduling_difficulty,
        recommendations=outcome.analysis.recommendations,
        participant_feedback=outcome.participant_feedback,
    )


@router.post(
    "/{request_id}/confirm",
    response_model=ConfirmSlotResponse,
    status_code=HTTPStatus.OK,
    summary="Confirm one of the suggested slots",
    description=(
        "Marks the meeting request as `scheduled`, records the chosen slot and "
        "creates a confirmed calendar event for it. `custom_message` becomes the "
        "event description; title, agenda and location come from the request.\n\n"
        "The slot must be one of the slots stored for this request, and the "
        "request must belong to `organizer_id`."
    ),
    responses={
        404: {
            "description": "Meeting request or slot not found.",
            "content": {
                "application/json": {"example": {"detail": "Meeting slot not found"}}
            },
        },
    },
)
async def confirm_slot(
    payload: ConfirmSlotPayload,
    request_id: str = Path(..., description="Meeting request identifier."),
    store: SqlMeetingStore = Depends(get_meeting_store),
    clock: Clock = Depends(get_clock),
) -> ConfirmSlotResponse:
    try:
        meeting, slot, event = await store.confirm_slot(
            request_id=request_id,
            organizer_id=payload.organizer_id,
            slot_id=payload.selected_slot_id,
            confirmed_at=clock(),
            custom_message=payload.custom_message,
        )
    except MeetingRequestNotFoundError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail="Meeting request not found",
        ) from exc
    except SlotNotFoundError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail="Meeting slot not found",
        ) from exc

    display_tz = meeting.preferences.timezone if meeting.preferences else "UTC"
    return ConfirmSlotResponse(
        message="Meeting slot confirmed successfully",
        meeting=meeting,
        slot=format_slot(slot, display_tz),
        event_id=event.id,
        calendar_event=format_event(event, display_tz),
    )


@router.get(
    "",
    response_model=list[MeetingRequestSummary],
    summary="List an organizer's meeting requests",
    description=(
        "Newest first. `status` narrows the list to `pending` or `scheduled` "
        "requests; `limit` is capped at 50."
    ),
)
async def list_meeting_requests(
    organizer_id: str = Query(..., min_length=1, description="Organizer whose requests to list."),
    status: MeetingStatus | None = Query(default=None, description="Optional status filter."),
    limit: int = Query(default=20, ge=1, description="Page size (capped at 50)."),
    offset: int = Query(default=0, ge=0),
    store: SqlMeetingStore = Depends(get_meeting_store),
) -> list[MeetingRequestSummary]:
    return await store.list_requests(
        organizer_id=organizer_id,
        status=status,
        limit=min(limit, MAX_LIST_LIMIT),
        offset=offset,
    )


@router.get(
    "/{request_id}",
    response_model=MeetingRequestDetail,
    summary="Get a meeting request with its suggested slots",
    responses={
        404: {
            "description": "Meeting request not found for this organizer.",
            "content": {
                "application/json": {"example": {"detail": "Meeting request not found"}}
            },
        },
    },
)
async def get_meeting_request(
    request_id: str = Path(..., description="Meeting request identifier."),
    organizer_id: str = Query(..., min_length=1),
    store: SqlMeetingStore = Depends(get_meeting_store),
) -> MeetingRequestDetail:
    """
    Return the stored request plus up to 10 of its slots, best score first.
    """
    try:
        meeting = await store.get_request(request_id, organizer_id)
    except MeetingRequestNotFoundError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail="Meeting request not found",
        ) from exc

    slots = await store.get_slots(request_id, limit=DETAIL_SLOT_LIMIT)
    display_tz = meeting.preferences.timezone if meeting.preferences else "UTC"
    return MeetingRequestDetail(
        meeting=meeting,
        suggested_slots=[format_slot(s, display_tz) for s in slots],
    )
