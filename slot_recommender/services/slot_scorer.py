# slot_recommender/services/slot_scorer.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from slot_recommender.schemas.meeting_request import (
    MeetingPriority,
    MeetingRequest,
    MeetingType,
)
from slot_recommender.schemas.participant import AvailabilityStatus, Participant
from slot_recommender.schemas.time_slot import AvailabilitySummary, MeetingTimeSlot
from slot_recommender.services.availability_policy import DefaultAvailabilityPolicy
from slot_recommender.services.constraint_evaluator import ConstraintEvaluator
from slot_recommender.services.slot_generator import CandidateSlot

BASE_SCORE = 100
BASE_CONFIDENCE = 0.8
DEFAULT_REASONING = "Good availability for all participants"

STATUS_ADJUSTMENTS = {
    AvailabilityStatus.FREE: 5,
    AvailabilityStatus.BUSY: -30,
    AvailabilityStatus.TENTATIVE: -10,
    AvailabilityStatus.OUT_OF_OFFICE: -50,
}
CONFLICT_STATUSES = {AvailabilityStatus.BUSY, AvailabilityStatus.OUT_OF_OFFICE}

MORNING_FACTOR = "Morning slot (high productivity)"
AFTERNOON_FACTOR = "Afternoon slot (good for collaboration)"
OUTSIDE_HOURS_NOTE = "Outside typical business hours"
WEEKDAY_FACTOR = "Weekday (better attendance)"
FRIDAY_NOTE = "Friday meetings have lower engagement"
STANDUP_FACTOR = "Perfect time for standup"
PRESENTATION_FACTOR = "Good time for presentations"
INTERVIEW_FACTOR = "Professional interview hours"
URGENT_FACTOR = "Urgent priority override"


@dataclass(frozen=True)
class SlotScore:
    """
    Scoring payload for one candidate slot.
    """

    slot: CandidateSlot
    score: int
    confidence: float
    reasoning: str
    participant_conflicts: List[str] = field(default_factory=list)
    availability_summary: Optional[AvailabilitySummary] = None
    optimal_factors: List[str] = field(default_factory=list)

    def to_meeting_time_slot(self, slot_id: str) -> MeetingTimeSlot:
        return MeetingTimeSlot(
            id=slot_id,
            start_time=self.slot.start,
            end_time=self.slot.end,
            score=self.score,
            confidence=self.confidence,
            reasoning=self.reasoning,
            participant_conflicts=list(self.participant_conflicts),
            availability_summary=self.availability_summary,
            optimal_factors=list(self.optimal_factors),
        )


class SlotScorer:
    """
    Scores a candidate slot against the request and resolved participants.

    Scoring is additive from a baseline of 100:
    - availability per participant (first overlapping interval wins):
      free +5, busy -30, tentative -10, out_of_office -50
    - participant constraint violations (see ConstraintEvaluator)
    - start hour: 9-11 +10, 14-16 +5, before 9 or after 17 -15
    - weekday: Mon-Thu +5, Fri -5
    - meeting type: standup at 9 +15, presentation 10-15 +10, interview 10-16 +8
    - urgent priority with at least one conflict +20
    The result is clamped to 0..100. Scoring is deterministic: identical
    inputs always produce identical output.
    """

    def __init__(self, policy: DefaultAvailabilityPolicy | None = None) -> None:
        self.policy = policy or DefaultAvailabilityPolicy()

    def classify(
        self,
        participant: Participant,
        slot: CandidateSlot,
    ) -> Optional[AvailabilityStatus]:
        for interval in participant.availability:
            if interval.overlaps(slot.start, slot.end):
                return interval.status
        return self.policy.unmatched_status

    def score(
        self,
        slot: CandidateSlot,
        request: MeetingRequest,
        participants: Sequence[Participant],
    ) -> SlotScore:
        score = BASE_SCORE
        conflicts: List[str] = []
        optimal_factors: List[str] = []
        reasoning: List[str] = []

        available = busy = tentative = 0

        for participant in participants:
            status = self.classify(participant, slot)
            if status is not None:
                score += STATUS_ADJUSTMENTS[status]
                if status in CONFLICT_STATUSES:
                    conflicts.append(participant.email)
                if status == AvailabilityStatus.FREE:
                    available += 1
                elif status == AvailabilityStatus.BUSY:
                    busy += 1
                elif status == AvailabilityStatus.TENTATIVE:
                    tentative += 1

            check = ConstraintEvaluator.evaluate(participant, slot)
            score += check.score
            if check.violations:
                reasoning.append(f"{participant.email}: {', '.join(check.violations)}")

        hour = slot.start.hour
        if 9 <= hour <= 11:
            score += 10
            optimal_factors.append(MORNING_FACTOR)
        elif 14 <= hour <= 16:
            score += 5
            optimal_factors.append(AFTERNOON_FACTOR)
        elif hour < 9 or hour > 17:
            score -= 15
            reasoning.append(OUTSIDE_HOURS_NOTE)

        weekday = slot.start.weekday()  # Monday == 0
        if weekday <= 3:
            score += 5
            optimal_factors.append(WEEKDAY_FACTOR)
        elif weekday == 4:
            score -= 5
            reasoning.append(FRIDAY_NOTE)

        if request.meeting_type == MeetingType.STANDUP and hour == 9:
            score += 15
            optimal_factors.append(STANDUP_FACTOR)
        elif request.meeting_type == MeetingType.PRESENTATION and 10 <= hour <= 15:
            score += 10
            optimal_factors.append(PRESENTATION_FACTOR)
        elif request.meeting_type == MeetingType.INTERVIEW and 10 <= hour <= 16:
            score += 8
            optimal_factors.append(INTERVIEW_FACTOR)

        if request.priority == MeetingPriority.URGENT and conflicts:
            score += 20
            optimal_factors.append(URGENT_FACTOR)

        score = int(round(max(0, min(100, score))))

        confidence = BASE_CONFIDENCE
        if all(p.availability for p in participants):
            confidence += 0.1
        if not conflicts:
            confidence += 0.1
        confidence = min(1.0, round(confidence, 2))

        return SlotScore(
            slot=slot,
            score=score,
            confidence=confidence,
            reasoning="; ".join(reasoning) if reasoning else DEFAULT_REASONING,
            participant_conflicts=conflicts,
            availability_summary=AvailabilitySummary(
                total_participants=len(participants),
                available_participants=available,
                busy_participants=busy,
                tentative_participants=tentative,
            ),
            optimal_factors=optimal_factors,
        )
