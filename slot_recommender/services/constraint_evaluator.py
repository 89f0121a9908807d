# slot_recommender/services/constraint_evaluator.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from slot_recommender.core.timeutils import fractional_hour, parse_hhmm
from slot_recommender.schemas.participant import Participant
from slot_recommender.services.slot_generator import CandidateSlot

CONSTRAINT_PENALTY = 20


@dataclass
class ConstraintCheck:
    score: int = 0
    violations: List[str] = field(default_factory=list)


class ConstraintEvaluator:
    """
    Checks a participant's explicit time-of-day constraints against a slot.

    Rules
    -----
    1) Slot starts before `no_meetings_before`  => -20
    2) Slot starts after `no_meetings_after`    => -20

    `preferred_meeting_length`, `break_between_meetings` and
    `max_meetings_per_day` are not evaluated.
    """

    @staticmethod
    def evaluate(participant: Participant, slot: CandidateSlot) -> ConstraintCheck:
        check = ConstraintCheck()
        constraints = participant.constraints
        if constraints is None:
            return check

        start = fractional_hour(slot.start)

        if constraints.no_meetings_before:
            if start < _hhmm_to_hours(constraints.no_meetings_before):
                check.score -= CONSTRAINT_PENALTY
                check.violations.append(
                    f"Prefers no meetings before {constraints.no_meetings_before}"
                )

        if constraints.no_meetings_after:
            if start > _hhmm_to_hours(constraints.no_meetings_after):
                check.score -= CONSTRAINT_PENALTY
                check.violations.append(
                    f"Prefers no meetings after {constraints.no_meetings_after}"
                )

        return check


def _hhmm_to_hours(value: str) -> float:
    bound = parse_hhmm(value)
    return bound.hour + bound.minute / 60.0
