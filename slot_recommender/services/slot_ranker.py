# slot_recommender/services/slot_ranker.py
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence

from slot_recommender.schemas.participant import Participant
from slot_recommender.schemas.scheduling import (
    ParticipantFeedback,
    SchedulingAnalysis,
    SchedulingDifficulty,
)
from slot_recommender.services.slot_scorer import SlotScore

REDUCE_PARTICIPANTS = "Consider reducing the number of participants"
TRY_NEXT_WEEK = "Try scheduling for next week when availability might be better"
SPLIT_LARGE_GROUP = (
    "Large meetings are harder to schedule - consider breaking into smaller groups"
)
LARGE_GROUP_THRESHOLD = 5
LOW_SCORE_THRESHOLD = 50

FEEDBACK_ALTERNATIVES = ["Consider flexible timing", "Check availability for next week"]
MIN_WORKABLE_SLOTS = 3


def rank_slots(scored: Iterable[SlotScore], min_score: int = 20) -> List[SlotScore]:
    """
    Drop slots scoring at or below `min_score`, then sort by score descending.

    `sorted` is stable, so ties keep generation order.
    """
    viable = [s for s in scored if s.score > min_score]
    return sorted(viable, key=lambda s: s.score, reverse=True)


def classify_difficulty(best_score: int) -> SchedulingDifficulty:
    if best_score < 30:
        return SchedulingDifficulty.VERY_DIFFICULT
    if best_score < 50:
        return SchedulingDifficulty.DIFFICULT
    if best_score < 70:
        return SchedulingDifficulty.MODERATE
    return SchedulingDifficulty.EASY


def build_recommendations(best_score: int | None, participant_count: int) -> List[str]:
    """
    Free-text hints for the organizer.

    ``best_score=None`` means no slot survived ranking and is treated like a
    low best score.
    """
    recommendations: List[str] = []
    if best_score is None or best_score < LOW_SCORE_THRESHOLD:
        recommendations.append(REDUCE_PARTICIPANTS)
        recommendations.append(TRY_NEXT_WEEK)
    if participant_count > LARGE_GROUP_THRESHOLD:
        recommendations.append(SPLIT_LARGE_GROUP)
    return recommendations


def build_analysis(
    ranked: Sequence[SlotScore],
    participant_count: int,
    candidates_generated: int,
) -> SchedulingAnalysis:
    """
    Aggregate analysis over a non-empty ranked list.
    """
    if not ranked:
        raise ValueError("build_analysis requires at least one ranked slot")

    scores = [s.score for s in ranked]
    best_score = max(scores)
    # Round half up.
    average_score = math.floor(sum(scores) / len(scores) + 0.5)

    return SchedulingAnalysis(
        total_slots_analyzed=len(ranked),
        total_candidates_generated=candidates_generated,
        best_score=best_score,
        average_score=average_score,
        scheduling_difficulty=classify_difficulty(best_score),
        recommendations=build_recommendations(best_score, participant_count),
    )


def build_participant_feedback(
    participants: Sequence[Participant],
    ranked: Sequence[SlotScore],
) -> Dict[str, ParticipantFeedback]:
    """
    Per-participant availability rate over every ranked slot (not just the
    suggested top slots).

    `constraints_met` is always True; constraint satisfaction is not
    re-verified here.
    """
    if not ranked:
        raise ValueError("build_participant_feedback requires at least one ranked slot")

    feedback: Dict[str, ParticipantFeedback] = {}
    for participant in participants:
        workable = sum(
            1 for s in ranked if participant.email not in s.participant_conflicts
        )
        feedback[participant.email] = ParticipantFeedback(
            availability_rate=workable / len(ranked),
            constraints_met=True,
            suggested_alternatives=(
                list(FEEDBACK_ALTERNATIVES) if workable < MIN_WORKABLE_SLOTS else None
            ),
        )
    return feedback
