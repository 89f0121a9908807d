# slot_recommender/models/calendar_event.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from slot_recommender.db.base import Base


class CalendarEventRecord(Base):
    """
    Calendar event created when an organizer confirms a suggested slot.

    `description` holds the organizer's custom message; `agenda` and
    `location` are copied from the meeting request.
    """

    __tablename__ = "calendar_events"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)

    meeting_request_id = Column(
        String(64),
        ForeignKey("meeting_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(200), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    description = Column(Text, nullable=True)
    agenda = Column(Text, nullable=True)
    location = Column(Text, nullable=True)

    source = Column(String(32), nullable=False, default="ai_scheduled")
    status = Column(String(16), nullable=False, default="confirmed")

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<CalendarEventRecord id={self.id} "
            f"meeting_request_id={self.meeting_request_id} status={self.status}>"
        )
