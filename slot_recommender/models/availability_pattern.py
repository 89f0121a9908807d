# slot_recommender/models/availability_pattern.py
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from slot_recommender.db.base import Base


class AvailabilityPattern(Base):
    """
    Learned availability pattern for a registered user.

    `pattern_data` holds a JSON document such as::

        {"preferred_hours": {"start": 9, "end": 17}, "buffer_minutes": 15}
    """

    __tablename__ = "availability_patterns"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    pattern_type = Column(String(16), nullable=False, default="daily")
    pattern_data = Column(Text, nullable=False)
    confidence_score = Column(Float, nullable=False, default=0.5)

    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "pattern_type",
            name="uq_availability_patterns_user_type",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilityPattern id={self.id} user_id={self.user_id} "
            f"type={self.pattern_type}>"
        )
