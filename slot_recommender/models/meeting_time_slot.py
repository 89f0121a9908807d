# slot_recommender/models/meeting_time_slot.py
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from slot_recommender.db.base import Base


class MeetingTimeSlotRecord(Base):
    """
    One scored candidate slot returned to the organizer for a meeting request.
    """

    __tablename__ = "meeting_time_slots"

    id = Column(String(64), primary_key=True)

    meeting_request_id = Column(
        String(64),
        ForeignKey("meeting_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    score = Column(Integer, nullable=False, index=True)
    confidence = Column(Float, nullable=False)
    reasoning = Column(Text, nullable=False)

    participant_conflicts = Column(Text, nullable=True)
    availability_summary = Column(Text, nullable=True)
    optimal_factors = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)

    meeting_request = relationship("MeetingRequestRecord", backref="time_slots")

    def __repr__(self) -> str:
        return (
            f"<MeetingTimeSlotRecord id={self.id} "
            f"meeting_request_id={self.meeting_request_id} score={self.score}>"
        )
