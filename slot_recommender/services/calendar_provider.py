# slot_recommender/services/calendar_provider.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

from slot_recommender.core.config import Settings
from slot_recommender.schemas.participant import AvailabilitySlot, AvailabilityStatus
from slot_recommender.services.directory import DirectoryUser
from slot_recommender.services.graph_client import GraphClient, get_graph_client

logger = logging.getLogger(__name__)


class CalendarAvailabilityProvider(Protocol):
    """
    Source of a registered user's busy/free intervals.
    """

    async def get_availability(
        self,
        user: DirectoryUser,
        window_start: datetime,
        window_end: datetime,
    ) -> List[AvailabilitySlot]:
        ...


class UnwiredCalendarProvider:
    """
    Default provider: live calendar integration is not wired up yet.

    Always returns no intervals, so registered users are scored purely on the
    availability policy's unmatched status and their learned constraints.
    """

    async def get_availability(
        self,
        user: DirectoryUser,
        window_start: datetime,
        window_end: datetime,
    ) -> List[AvailabilitySlot]:
        logger.debug(
            "No calendar provider configured; returning empty availability for user_id=%s",
            user.id,
        )
        return []


# Graph scheduleItem.status -> AvailabilityStatus. `workingElsewhere` means the
# person is working, just not at the office, so it counts as free.
_GRAPH_STATUS_MAP: Dict[str, AvailabilityStatus] = {
    "free": AvailabilityStatus.FREE,
    "workingelsewhere": AvailabilityStatus.FREE,
    "tentative": AvailabilityStatus.TENTATIVE,
    "busy": AvailabilityStatus.BUSY,
    "oof": AvailabilityStatus.OUT_OF_OFFICE,
}


class GraphCalendarProvider:
    """
    Reads free/busy data through Microsoft Graph `calendar/getSchedule`.

    The schedule is requested in UTC for the user's own mailbox. Items with an
    unknown status are skipped. Graph failures raise GraphClientError and are
    not swallowed.
    """

    def __init__(self, graph_client: GraphClient, interval_minutes: int = 30) -> None:
        self.graph = graph_client
        self.interval_minutes = interval_minutes

    async def get_availability(
        self,
        user: DirectoryUser,
        window_start: datetime,
        window_end: datetime,
    ) -> List[AvailabilitySlot]:
        body = {
            "schedules": [user.email],
            "startTime": {
                "dateTime": _to_graph_datetime(window_start),
                "timeZone": "UTC",
            },
            "endTime": {
                "dateTime": _to_graph_datetime(window_end),
                "timeZone": "UTC",
            },
            "availabilityViewInterval": self.interval_minutes,
        }
        payload = await self.graph.post_json(
            f"/v1.0/users/{quote(user.email, safe='@')}/calendar/getSchedule",
            json=body,
            headers={"Prefer": 'outlook.timezone="UTC"'},
        )

        slots: List[AvailabilitySlot] = []
        for schedule in payload.get("value", []):
            for item in schedule.get("scheduleItems", []):
                slot = self._to_availability_slot(item)
                if slot is not None:
                    slots.append(slot)

        logger.debug(
            "Graph returned %d schedule items for user_id=%s", len(slots), user.id
        )
        return slots

    def _to_availability_slot(self, item: Dict[str, Any]) -> Optional[AvailabilitySlot]:
        status = _GRAPH_STATUS_MAP.get((item.get("status") or "").lower())
        start_raw = item.get("start") or {}
        end_raw = item.get("end") or {}
        if status is None or "dateTime" not in start_raw or "dateTime" not in end_raw:
            return None

        return AvailabilitySlot(
            start=_parse_graph_datetime(start_raw["dateTime"]),
            end=_parse_graph_datetime(end_raw["dateTime"]),
            status=status,
        )


def _to_graph_datetime(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).replace(tzinfo=None).isoformat(timespec="seconds")


def _parse_graph_datetime(value: str) -> datetime:
    """
    Parse Graph's UTC ``dateTime`` strings, which carry 7 fractional digits
    (e.g. ``2025-01-10T10:30:00.0000000``).
    """
    main, _, fraction = value.partition(".")
    if fraction:
        main = f"{main}.{fraction[:6]}"
    parsed = datetime.fromisoformat(main)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def build_calendar_provider(settings: Settings) -> CalendarAvailabilityProvider:
    """
    Pick the provider configured by CALENDAR_PROVIDER ('none' or 'graph').
    """
    choice = (settings.CALENDAR_PROVIDER or "none").lower()
    if choice == "graph":
        return GraphCalendarProvider(
            get_graph_client(),
            interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        )
    if choice != "none":
        logger.warning("Unknown CALENDAR_PROVIDER=%r; using unwired provider", choice)
    return UnwiredCalendarProvider()
