# slot_recommender/api/dependencies/scheduling.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slot_recommender.core.config import get_settings
from slot_recommender.core.timeutils import Clock, system_clock
from slot_recommender.db.session import get_db
from slot_recommender.services.availability_policy import DefaultAvailabilityPolicy
from slot_recommender.services.availability_resolver import AvailabilityResolver
from slot_recommender.services.calendar_provider import build_calendar_provider
from slot_recommender.services.directory import (
    SqlAvailabilityPatternStore,
    SqlUserDirectory,
)
from slot_recommender.services.meeting_scheduler import MeetingScheduler
from slot_recommender.services.meeting_store import SqlMeetingStore
from slot_recommender.services.slot_generator import SchedulerConfig


def get_clock() -> Clock:
    """
    Clock used for 'now' in scheduling and confirmation timestamps.

    Overridable in tests via `app.dependency_overrides`.
    """
    return system_clock(get_settings().SCHEDULER_TIMEZONE)


async def get_meeting_store(db: AsyncSession = Depends(get_db)) -> SqlMeetingStore:
    return SqlMeetingStore(db)


async def get_meeting_scheduler(
    db: AsyncSession = Depends(get_db),
    store: SqlMeetingStore = Depends(get_meeting_store),
    clock: Clock = Depends(get_clock),
) -> MeetingScheduler:
    """
    Wire a request-scoped MeetingScheduler from settings and the DB session.
    """
    settings = get_settings()
    policy = DefaultAvailabilityPolicy()
    resolver = AvailabilityResolver(
        user_directory=SqlUserDirectory(db),
        calendar_provider=build_calendar_provider(settings),
        pattern_store=SqlAvailabilityPatternStore(db),
        policy=policy,
    )
    return MeetingScheduler(
        resolver=resolver,
        store=store,
        config=SchedulerConfig.from_settings(settings),
        policy=policy,
        clock=clock,
    )
