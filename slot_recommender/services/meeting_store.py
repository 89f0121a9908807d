# slot_recommender/services/meeting_store.py
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slot_recommender.core.errors import MeetingRequestNotFoundError, SlotNotFoundError
from slot_recommender.core.timeutils import ensure_utc
from slot_recommender.models.calendar_event import CalendarEventRecord
from slot_recommender.models.meeting_request import MeetingRequestRecord
from slot_recommender.models.meeting_time_slot import MeetingTimeSlotRecord
from slot_recommender.schemas.calendar_event import CalendarEvent
from slot_recommender.schemas.meeting_request import (
    MeetingPreferences,
    MeetingRequest,
    MeetingRequestRead,
    MeetingRequestSummary,
    MeetingStatus,
    SelectedSlot,
)
from slot_recommender.schemas.time_slot import AvailabilitySummary, MeetingTimeSlot

logger = logging.getLogger(__name__)


class MeetingStore(Protocol):
    async def save_request(
        self, request_id: str, request: MeetingRequest, created_at: datetime
    ) -> None:
        ...

    async def save_slots(
        self, request_id: str, slots: Sequence[MeetingTimeSlot], created_at: datetime
    ) -> None:
        ...


class SqlMeetingStore:
    """
    SQLAlchemy-backed persistence for meeting requests and their candidate slots.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Writes used by the scheduling pipeline
    # ------------------------------------------------------------------
    async def save_request(
        self,
        request_id: str,
        request: MeetingRequest,
        created_at: datetime,
    ) -> None:
        preferences = (
            request.preferences.model_dump(mode="json") if request.preferences else {}
        )
        record = MeetingRequestRecord(
            id=request_id,
            organizer_id=request.organizer_id,
            title=request.title,
            participants=json.dumps(list(request.participants)),
            duration_minutes=request.duration_minutes,
            meeting_type=request.meeting_type.value,
            priority=request.priority.value,
            location_type=request.location_type.value,
            location_details=request.location_details,
            agenda=request.agenda,
            preparation_time=request.preparation_time or 0,
            buffer_time=request.buffer_time if request.buffer_time is not None else 15,
            preferences=json.dumps(preferences),
            status=MeetingStatus.PENDING.value,
            created_at=ensure_utc(created_at),
            updated_at=ensure_utc(created_at),
        )
        self.db.add(record)
        await self.db.commit()

    async def save_slots(
        self,
        request_id: str,
        slots: Sequence[MeetingTimeSlot],
        created_at: datetime,
    ) -> None:
        for slot in slots:
            self.db.add(
                MeetingTimeSlotRecord(
                    id=slot.id,
                    meeting_request_id=request_id,
                    start_time=ensure_utc(slot.start_time),
                    end_time=ensure_utc(slot.end_time),
                    score=slot.score,
                    confidence=slot.confidence,
                    reasoning=slot.reasoning,
                    participant_conflicts=json.dumps(slot.participant_conflicts),
                    availability_summary=slot.availability_summary.model_dump_json(),
                    optimal_factors=json.dumps(slot.optimal_factors),
                    created_at=ensure_utc(created_at),
                )
            )
        await self.db.flush()
        await self.db.commit()

    # ------------------------------------------------------------------
    # Reads / confirmation used by the HTTP layer
    # ------------------------------------------------------------------
    async def list_requests(
        self,
        organizer_id: str,
        status: Optional[MeetingStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[MeetingRequestSummary]:
        slot_count = func.count(MeetingTimeSlotRecord.id)
        stmt = (
            select(MeetingRequestRecord, slot_count)
            .outerjoin(
                MeetingTimeSlotRecord,
                MeetingTimeSlotRecord.meeting_request_id == MeetingRequestRecord.id,
            )
            .where(MeetingRequestRecord.organizer_id == organizer_id)
            .group_by(MeetingRequestRecord.id)
            .order_by(MeetingRequestRecord.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if status is not None:
            stmt = stmt.where(MeetingRequestRecord.status == status.value)

        result = await self.db.execute(stmt)
        return [
            MeetingRequestSummary(
                id=record.id,
                title=record.title,
                participants=json.loads(record.participants or "[]"),
                duration_minutes=record.duration_minutes,
                meeting_type=record.meeting_type,
                priority=record.priority,
                status=record.status,
                suggested_slots_count=count,
                created_at=ensure_utc(record.created_at),
                updated_at=ensure_utc(record.updated_at),
            )
            for record, count in result.all()
        ]

    async def get_request(self, request_id: str, organizer_id: str) -> MeetingRequestRead:
        record = await self._get_request_record(request_id, organizer_id)
        return _to_request_read(record)

    async def get_slots(self, request_id: str, limit: int = 10) -> List[MeetingTimeSlot]:
        stmt = (
            select(MeetingTimeSlotRecord)
            .where(MeetingTimeSlotRecord.meeting_request_id == request_id)
            .order_by(MeetingTimeSlotRecord.score.desc(), MeetingTimeSlotRecord.start_time)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_to_time_slot(record) for record in result.scalars().all()]

    async def confirm_slot(
        self,
        request_id: str,
        organizer_id: str,
        slot_id: str,
        confirmed_at: datetime,
        custom_message: Optional[str] = None,
        event_id: Optional[str] = None,
    ) -> Tuple[MeetingRequestRead, MeetingTimeSlot, CalendarEvent]:
        """
        Mark the request as scheduled on the given slot and create its
        confirmed calendar event.

        The event copies title, agenda and location from the request and
        stores `custom_message` as its description. Confirming again adds
        another event.

        Raises MeetingRequestNotFoundError / SlotNotFoundError when either
        side of the pair does not exist.
        """
        record = await self._get_request_record(request_id, organizer_id)

        slot_stmt = select(MeetingTimeSlotRecord).where(
            MeetingTimeSlotRecord.id == slot_id,
            MeetingTimeSlotRecord.meeting_request_id == request_id,
        )
        slot_record = (await self.db.execute(slot_stmt)).scalar_one_or_none()
        if slot_record is None:
            raise SlotNotFoundError(
                f"Slot {slot_id} not found for meeting request {request_id}"
            )

        selected = SelectedSlot(
            slot_id=slot_record.id,
            start_time=ensure_utc(slot_record.start_time),
            end_time=ensure_utc(slot_record.end_time),
            confirmed_at=ensure_utc(confirmed_at),
        )
        record.status = MeetingStatus.SCHEDULED.value
        record.selected_slot = selected.model_dump_json()
        record.updated_at = ensure_utc(confirmed_at)

        event_record = CalendarEventRecord(
            id=event_id or str(uuid.uuid4()),
            user_id=organizer_id,
            meeting_request_id=request_id,
            title=record.title,
            start_time=selected.start_time,
            end_time=selected.end_time,
            description=custom_message,
            agenda=record.agenda,
            location=record.location_details,
            source="ai_scheduled",
            status="confirmed",
            created_at=ensure_utc(confirmed_at),
        )
        self.db.add(event_record)

        await self.db.commit()
        await self.db.refresh(record)

        logger.info(
            "Confirmed slot %s for meeting_request_id=%s (event_id=%s)",
            slot_record.id,
            request_id,
            event_record.id,
        )
        return (
            _to_request_read(record),
            _to_time_slot(slot_record),
            _to_calendar_event(event_record),
        )

    async def _get_request_record(
        self, request_id: str, organizer_id: str
    ) -> MeetingRequestRecord:
        stmt = select(MeetingRequestRecord).where(
            MeetingRequestRecord.id == request_id,
            MeetingRequestRecord.organizer_id == organizer_id,
        )
        record = (await self.db.execute(stmt)).scalar_one_or_none()
        if record is None:
            raise MeetingRequestNotFoundError(f"Meeting request {request_id} not found")
        return record


def _to_request_read(record: MeetingRequestRecord) -> MeetingRequestRead:
    preferences = json.loads(record.preferences) if record.preferences else None
    selected = (
        SelectedSlot.model_validate_json(record.selected_slot)
        if record.selected_slot
        else None
    )
    return MeetingRequestRead(
        id=record.id,
        organizer_id=record.organizer_id,
        title=record.title,
        participants=json.loads(record.participants or "[]"),
        duration_minutes=record.duration_minutes,
        meeting_type=record.meeting_type,
        priority=record.priority,
        location_type=record.location_type,
        location_details=record.location_details,
        agenda=record.agenda,
        preparation_time=record.preparation_time,
        buffer_time=record.buffer_time,
        preferences=MeetingPreferences(**preferences) if preferences else None,
        status=record.status,
        selected_slot=selected,
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
    )


def _to_time_slot(record: MeetingTimeSlotRecord) -> MeetingTimeSlot:
    return MeetingTimeSlot(
        id=record.id,
        start_time=ensure_utc(record.start_time),
        end_time=ensure_utc(record.end_time),
        score=record.score,
        confidence=record.confidence,
        reasoning=record.reasoning,
        participant_conflicts=json.loads(record.participant_conflicts or "[]"),
        availability_summary=AvailabilitySummary.model_validate_json(
            record.availability_summary
        ),
        optimal_factors=json.loads(record.optimal_factors or "[]"),
    )


def _to_calendar_event(record: CalendarEventRecord) -> CalendarEvent:
    return CalendarEvent(
        id=record.id,
        meeting_request_id=record.meeting_request_id,
        title=record.title,
        start_time=ensure_utc(record.start_time),
        end_time=ensure_utc(record.end_time),
        description=record.description,
        agenda=record.agenda,
        location=record.location,
        status=record.status,
    )
