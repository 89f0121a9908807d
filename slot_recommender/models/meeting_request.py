# slot_recommender/models/meeting_request.py
from sqlalchemy import Column, DateTime, Integer, String, Text

from slot_recommender.db.base import Base


class MeetingRequestRecord(Base):
    """
    Persisted meeting request.

    Written once per scheduling call; only `status`, `selected_slot` and
    `updated_at` change afterwards (on slot confirmation). List and dict
    fields are stored as JSON text.
    """

    __tablename__ = "meeting_requests"

    id = Column(String(64), primary_key=True)
    organizer_id = Column(String(64), nullable=False, index=True)
    title = Column(String(200), nullable=False)

    participants = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    meeting_type = Column(String(32), nullable=False, default="team")
    priority = Column(String(16), nullable=False, default="medium", index=True)

    location_type = Column(String(32), nullable=False, default="video_call")
    location_details = Column(Text, nullable=True)
    agenda = Column(Text, nullable=True)

    preparation_time = Column(Integer, nullable=False, default=0)
    buffer_time = Column(Integer, nullable=False, default=15)

    preferences = Column(Text, nullable=True)

    status = Column(String(16), nullable=False, default="pending", index=True)
    selected_slot = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<MeetingRequestRecord id={self.id} organizer_id={self.organizer_id} "
            f"status={self.status}>"
        )
