# slot_recommender/services/availability_resolver.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from slot_recommender.schemas.participant import Participant
from slot_recommender.services.availability_policy import DefaultAvailabilityPolicy
from slot_recommender.services.calendar_provider import CalendarAvailabilityProvider
from slot_recommender.services.directory import AvailabilityPatternStore, UserDirectory

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """
    Resolves participant emails into `Participant` records.

    For each email:
    - Registered user: name/timezone from the directory, intervals from the
      calendar provider, constraints from the learned availability pattern.
    - External contact: the policy's default weekday availability and
      default constraints.

    Lookups run sequentially and any collaborator error propagates; a
    scheduling call never proceeds with a partially resolved participant list.
    """

    def __init__(
        self,
        user_directory: UserDirectory,
        calendar_provider: CalendarAvailabilityProvider,
        pattern_store: AvailabilityPatternStore,
        policy: DefaultAvailabilityPolicy | None = None,
    ) -> None:
        self.user_directory = user_directory
        self.calendar_provider = calendar_provider
        self.pattern_store = pattern_store
        self.policy = policy or DefaultAvailabilityPolicy()

    async def resolve(
        self,
        emails: List[str],
        window_start: datetime,
        window_end: datetime,
    ) -> List[Participant]:
        horizon_days = max((window_end - window_start).days, 1)
        participants: List[Participant] = []

        for email in emails:
            user = await self.user_directory.get_by_email(email)

            if user is None:
                participants.append(
                    Participant(
                        email=email,
                        availability=self.policy.default_availability(
                            window_start, horizon_days
                        ),
                        constraints=self.policy.default_constraints(),
                        is_registered=False,
                    )
                )
                continue

            availability = await self.calendar_provider.get_availability(
                user, window_start, window_end
            )
            pattern = await self.pattern_store.get_pattern(user.id)

            participants.append(
                Participant(
                    email=email,
                    name=user.name,
                    timezone=user.timezone,
                    availability=availability,
                    constraints=self.policy.constraints_from_pattern(pattern),
                    is_registered=True,
                )
            )

        logger.debug(
            "Resolved %d participants (%d registered)",
            len(participants),
            sum(1 for p in participants if p.is_registered),
        )
        return participants
