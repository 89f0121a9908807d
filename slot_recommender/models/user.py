# slot_recommender/models/user.py
from sqlalchemy import Column, String

from slot_recommender.db.base import Base


class User(Base):
    """
    Registered user as seen by the scheduler's user directory lookup.

    Only the columns needed to resolve a participant are modelled here;
    account management lives outside this service.
    """

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    timezone = Column(String(64), nullable=False, default="UTC")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
