# slot_recommender/services/meeting_scheduler.py
from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Callable, List

from slot_recommender.core.errors import SchedulingError
from slot_recommender.core.timeutils import Clock, system_clock
from slot_recommender.schemas.meeting_request import MeetingRequest
from slot_recommender.schemas.scheduling import (
    InvalidRequestResult,
    NoViableSlotsResult,
    SchedulingOutcome,
    SchedulingResult,
)
from slot_recommender.services.availability_policy import DefaultAvailabilityPolicy
from slot_recommender.services.availability_resolver import AvailabilityResolver
from slot_recommender.services.meeting_store import MeetingStore
from slot_recommender.services.slot_generator import (
    SchedulerConfig,
    generate_candidate_slots,
)
from slot_recommender.services.slot_ranker import (
    build_analysis,
    build_participant_feedback,
    build_recommendations,
    rank_slots,
)
from slot_recommender.services.slot_scorer import SlotScorer

logger = logging.getLogger(__name__)

IdProvider = Callable[[], str]


def _uuid4_id() -> str:
    return str(uuid.uuid4())


def validate_request(request: MeetingRequest) -> List[str]:
    errors: List[str] = []

    if not request.title or not request.title.strip():
        errors.append("title must not be blank")

    if not request.participants:
        errors.append("at least one participant is required")
    else:
        seen = set()
        for email in request.participants:
            normalized = (email or "").strip().lower()
            if not normalized:
                errors.append("participant email must not be blank")
            elif normalized in seen:
                errors.append(f"duplicate participant: {email}")
            seen.add(normalized)

    if request.duration_minutes <= 0:
        errors.append("duration_minutes must be positive")

    return errors


class MeetingScheduler:
    """
    Orchestrates one scheduling run:

        validate -> persist request -> resolve participants
        -> generate candidates -> score -> rank -> persist top slots

    Returns one of the three `SchedulingOutcome` variants. Unexpected
    failures after validation are logged and re-raised as `SchedulingError`.
    A request already written before the failure is left in place.
    """

    def __init__(
        self,
        resolver: AvailabilityResolver,
        store: MeetingStore,
        config: SchedulerConfig | None = None,
        policy: DefaultAvailabilityPolicy | None = None,
        clock: Clock | None = None,
        id_provider: IdProvider = _uuid4_id,
    ) -> None:
        self.resolver = resolver
        self.store = store
        self.config = config or SchedulerConfig()
        self.scorer = SlotScorer(policy or DefaultAvailabilityPolicy())
        self.clock = clock or system_clock()
        self.id_provider = id_provider

    async def schedule_meeting(self, request: MeetingRequest) -> SchedulingOutcome:
        errors = validate_request(request)
        if errors:
            logger.info("Rejected meeting request %r: %s", request.title, "; ".join(errors))
            return InvalidRequestResult(errors=errors)

        try:
            return await self._run(request)
        except Exception as exc:
            logger.exception("Failed to schedule meeting %r", request.title)
            raise SchedulingError() from exc

    async def _run(self, request: MeetingRequest) -> SchedulingOutcome:
        now = self.clock()
        request_id = self.id_provider()

        await self.store.save_request(request_id, request, now)

        window_end = now + timedelta(days=self.config.horizon_days)
        participants = await self.resolver.resolve(
            list(request.participants), now, window_end
        )

        candidates = generate_candidate_slots(request, now, self.config)
        scored = [self.scorer.score(slot, request, participants) for slot in candidates]
        ranked = rank_slots(scored, self.config.min_slot_score)

        logger.info(
            "Meeting request %s: %d candidates, %d above score floor",
            request_id,
            len(candidates),
            len(ranked),
        )

        if not ranked:
            return NoViableSlotsResult(
                meeting_request_id=request_id,
                total_candidates_generated=len(candidates),
                recommendations=build_recommendations(None, len(participants)),
            )

        top = ranked[: self.config.max_suggested_slots]
        suggested = [s.to_meeting_time_slot(self.id_provider()) for s in top]
        await self.store.save_slots(request_id, suggested, now)

        return SchedulingResult(
            meeting_request_id=request_id,
            suggested_slots=suggested,
            analysis=build_analysis(ranked, len(participants), len(candidates)),
            participant_feedback=build_participant_feedback(participants, ranked),
        )
