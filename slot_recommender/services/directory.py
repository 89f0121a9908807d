# slot_recommender/services/directory.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slot_recommender.models.availability_pattern import AvailabilityPattern
from slot_recommender.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryUser:
    """
    Registered user as returned by a directory lookup.
    """

    id: str
    email: str
    name: Optional[str]
    timezone: str = "UTC"


class UserDirectory(Protocol):
    async def get_by_email(self, email: str) -> Optional[DirectoryUser]:
        ...


class AvailabilityPatternStore(Protocol):
    async def get_pattern(self, user_id: str) -> Optional[Dict[str, Any]]:
        ...


class SqlUserDirectory:
    """
    Looks up registered users in the `users` table.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_email(self, email: str) -> Optional[DirectoryUser]:
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            return None

        full_name = " ".join(part for part in (user.first_name, user.last_name) if part)
        return DirectoryUser(
            id=user.id,
            email=user.email,
            name=full_name or None,
            timezone=user.timezone or "UTC",
        )


class SqlAvailabilityPatternStore:
    """
    Reads learned availability patterns from the `availability_patterns` table.

    When a user has several pattern rows, the one with the highest
    confidence score wins.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_pattern(self, user_id: str) -> Optional[Dict[str, Any]]:
        stmt = (
            select(AvailabilityPattern)
            .where(AvailabilityPattern.user_id == user_id)
            .order_by(AvailabilityPattern.confidence_score.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        pattern = result.scalar_one_or_none()
        if pattern is None or not pattern.pattern_data:
            return None

        data = json.loads(pattern.pattern_data)
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring non-object availability pattern for user_id=%s", user_id
            )
            return None
        return data
