# slot_recommender/services/availability_policy.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, Dict, FrozenSet, List, Optional

from slot_recommender.core.timeutils import parse_hhmm, wall_clock
from slot_recommender.schemas.participant import (
    AvailabilitySlot,
    AvailabilityStatus,
    ParticipantConstraints,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultAvailabilityPolicy:
    """
    Defaults applied when real availability data is missing.

    - External contacts get one free interval per work day
      (`work_day_start`-`work_day_end`) across the scheduling horizon.
    - Participants without a learned pattern get the work-day bounds as
      no-meetings-before/after constraints and `default_buffer_minutes`
      as their break.
    - `unmatched_status` is assumed whenever none of a participant's
      intervals overlaps a slot (including when they have no intervals at
      all). ``None`` means such a participant contributes nothing.
    """

    work_day_start: time = time(9, 0)
    work_day_end: time = time(17, 0)
    work_days: FrozenSet[int] = field(default_factory=lambda: frozenset({0, 1, 2, 3, 4}))
    default_buffer_minutes: int = 15
    unmatched_status: Optional[AvailabilityStatus] = AvailabilityStatus.FREE

    def default_availability(
        self,
        window_start: datetime,
        horizon_days: int,
    ) -> List[AvailabilitySlot]:
        slots: List[AvailabilitySlot] = []
        for offset in range(horizon_days):
            day = (window_start + timedelta(days=offset)).date()
            if day.weekday() not in self.work_days:
                continue
            slots.append(
                AvailabilitySlot(
                    start=wall_clock(window_start, day, self.work_day_start),
                    end=wall_clock(window_start, day, self.work_day_end),
                    status=AvailabilityStatus.FREE,
                )
            )
        return slots

    def default_constraints(self) -> ParticipantConstraints:
        return ParticipantConstraints(
            no_meetings_before=self.work_day_start.strftime("%H:%M"),
            no_meetings_after=self.work_day_end.strftime("%H:%M"),
            break_between_meetings=self.default_buffer_minutes,
        )

    def constraints_from_pattern(
        self,
        pattern: Optional[Dict[str, Any]],
    ) -> ParticipantConstraints:
        """
        Derive constraints from a learned pattern such as
        ``{"preferred_hours": {"start": 9, "end": 17}, "buffer_minutes": 15}``.

        Hours may be given as ``9`` / ``"9"`` or ``"9:30"``. Missing pieces
        fall back to the policy defaults; malformed or out-of-range pieces
        are logged and fall back too. An hour of ``0`` means midnight.
        """
        defaults = self.default_constraints()
        if not pattern:
            return defaults

        hours = pattern.get("preferred_hours")
        if hours is not None and not isinstance(hours, dict):
            logger.warning("Ignoring malformed preferred_hours %r", hours)
            hours = None
        hours = hours or {}

        return ParticipantConstraints(
            no_meetings_before=_pattern_hour(
                hours.get("start"), defaults.no_meetings_before
            ),
            no_meetings_after=_pattern_hour(
                hours.get("end"), defaults.no_meetings_after
            ),
            break_between_meetings=_pattern_minutes(
                pattern.get("buffer_minutes"), defaults.break_between_meetings
            ),
        )


def _pattern_hour(value: Any, default: Optional[str]) -> Optional[str]:
    """
    Normalize a learned hour (``9``, ``"9"``, ``"9:30"``) to ``HH:MM``.
    """
    if value is None:
        return default
    try:
        if isinstance(value, bool):
            raise ValueError("boolean hour")
        if isinstance(value, str) and ":" in value:
            at = parse_hhmm(value.strip())
        else:
            at = time(int(value), 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring unusable preferred hour %r, using %s", value, default)
        return default
    return at.strftime("%H:%M")


def _pattern_minutes(value: Any, default: Optional[int]) -> Optional[int]:
    if value is None:
        return default
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring unusable buffer_minutes %r", value)
        return default
    if minutes < 0:
        logger.warning("Ignoring negative buffer_minutes %r", value)
        return default
    return minutes
