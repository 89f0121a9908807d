# tests/test_meeting_store.py
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from slot_recommender.core.errors import MeetingRequestNotFoundError, SlotNotFoundError
from slot_recommender.models.calendar_event import CalendarEventRecord
from slot_recommender.schemas.meeting_request import (
    MeetingPreferences,
    MeetingRequest,
    MeetingStatus,
    MeetingType,
)
from slot_recommender.schemas.time_slot import AvailabilitySummary, MeetingTimeSlot
from slot_recommender.services.meeting_store import SqlMeetingStore

CREATED = datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)


def _request(title: str = "Roadmap review", organizer_id: str = "user-1") -> MeetingRequest:
    return MeetingRequest(
        organizer_id=organizer_id,
        title=title,
        participants=["alice@example.com", "bob@example.com"],
        duration_minutes=45,
        meeting_type=MeetingType.PRESENTATION,
        agenda="Q4 roadmap",
        preferences=MeetingPreferences(timezone="Europe/Berlin", preferred_days=[1, 2]),
    )


def _slot(slot_id: str, hour: int, score: int) -> MeetingTimeSlot:
    start = datetime(2026, 10, 20, hour, 0, tzinfo=timezone.utc)
    return MeetingTimeSlot(
        id=slot_id,
        start_time=start,
        end_time=start + timedelta(minutes=45),
        score=score,
        confidence=0.9,
        reasoning="Good availability for all participants",
        participant_conflicts=["bob@example.com"] if score < 90 else [],
        availability_summary=AvailabilitySummary(
            total_participants=2,
            available_participants=2,
            busy_participants=0,
            tentative_participants=0,
        ),
        optimal_factors=["Weekday (better attendance)"],
    )


@pytest.mark.asyncio
async def test_save_and_get_request_round_trips_json_fields(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)

    meeting = await store.get_request("req-1", "user-1")

    assert meeting.id == "req-1"
    assert meeting.title == "Roadmap review"
    assert meeting.participants == ["alice@example.com", "bob@example.com"]
    assert meeting.meeting_type == MeetingType.PRESENTATION
    assert meeting.status == MeetingStatus.PENDING
    assert meeting.preferences.timezone == "Europe/Berlin"
    assert meeting.preferences.preferred_days == [1, 2]
    assert meeting.selected_slot is None
    assert meeting.created_at == CREATED


@pytest.mark.asyncio
async def test_get_request_checks_organizer(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)

    with pytest.raises(MeetingRequestNotFoundError):
        await store.get_request("req-1", "someone-else")
    with pytest.raises(MeetingRequestNotFoundError):
        await store.get_request("missing", "user-1")


@pytest.mark.asyncio
async def test_get_slots_ordered_by_score(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)
    await store.save_slots(
        "req-1",
        [_slot("s-1", 14, 80), _slot("s-2", 9, 100), _slot("s-3", 10, 95)],
        CREATED,
    )

    slots = await store.get_slots("req-1")

    assert [s.id for s in slots] == ["s-2", "s-3", "s-1"]
    assert slots[2].participant_conflicts == ["bob@example.com"]
    assert slots[0].availability_summary.total_participants == 2
    assert slots[0].start_time == datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc)
    assert await store.get_slots("req-1", limit=1) == slots[:1]


@pytest.mark.asyncio
async def test_list_requests_filters_and_counts(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request("First"), CREATED)
    await store.save_request("req-2", _request("Second"), CREATED + timedelta(minutes=5))
    await store.save_request("req-3", _request("Other organizer", "user-2"), CREATED)
    await store.save_slots("req-1", [_slot("s-1", 9, 100), _slot("s-2", 10, 90)], CREATED)
    await store.confirm_slot("req-1", "user-1", "s-1", CREATED + timedelta(hours=1))

    everything = await store.list_requests("user-1")
    scheduled = await store.list_requests("user-1", status=MeetingStatus.SCHEDULED)
    paged = await store.list_requests("user-1", limit=1, offset=1)

    assert [m.id for m in everything] == ["req-2", "req-1"]
    assert {m.id: m.suggested_slots_count for m in everything} == {"req-1": 2, "req-2": 0}
    assert [m.id for m in scheduled] == ["req-1"]
    assert [m.id for m in paged] == ["req-1"]


@pytest.mark.asyncio
async def test_confirm_slot_marks_request_scheduled(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)
    await store.save_slots("req-1", [_slot("s-1", 9, 100)], CREATED)
    confirmed_at = CREATED + timedelta(hours=2)

    meeting, slot, event = await store.confirm_slot("req-1", "user-1", "s-1", confirmed_at)

    assert meeting.status == MeetingStatus.SCHEDULED
    assert meeting.selected_slot.slot_id == "s-1"
    assert meeting.selected_slot.start_time == slot.start_time
    assert meeting.selected_slot.confirmed_at == confirmed_at
    assert meeting.updated_at == confirmed_at
    assert slot.id == "s-1"
    assert event.description is None

    reloaded = await store.get_request("req-1", "user-1")
    assert reloaded.status == MeetingStatus.SCHEDULED


@pytest.mark.asyncio
async def test_confirm_slot_creates_calendar_event(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)
    await store.save_slots("req-1", [_slot("s-1", 9, 100)], CREATED)

    _, slot, event = await store.confirm_slot(
        "req-1",
        "user-1",
        "s-1",
        CREATED + timedelta(hours=1),
        custom_message="Bring the Q4 numbers",
        event_id="evt-1",
    )

    assert event.id == "evt-1"
    assert event.meeting_request_id == "req-1"
    assert event.title == "Roadmap review"
    assert event.start_time == slot.start_time
    assert event.end_time == slot.end_time
    assert event.description == "Bring the Q4 numbers"
    assert event.agenda == "Q4 roadmap"
    assert event.status == "confirmed"

    stored = (
        await db_session.execute(
            select(CalendarEventRecord).where(CalendarEventRecord.meeting_request_id == "req-1")
        )
    ).scalars().all()
    assert [(e.id, e.user_id, e.description) for e in stored] == [
        ("evt-1", "user-1", "Bring the Q4 numbers")
    ]


@pytest.mark.asyncio
async def test_confirm_slot_missing_pieces(db_session):
    store = SqlMeetingStore(db_session)
    await store.save_request("req-1", _request(), CREATED)
    await store.save_request("req-2", _request(), CREATED)
    await store.save_slots("req-2", [_slot("s-9", 9, 100)], CREATED)

    with pytest.raises(MeetingRequestNotFoundError):
        await store.confirm_slot("nope", "user-1", "s-9", CREATED)
    with pytest.raises(SlotNotFoundError):
        await store.confirm_slot("req-1", "user-1", "s-9", CREATED)
