# tests/test_meetings_api.py
from datetime import datetime, timezone
from http import HTTPStatus

import pytest

from slot_recommender.api.dependencies.scheduling import get_clock, get_meeting_scheduler
from slot_recommender.services.meeting_scheduler import MeetingScheduler

# Monday 07:00 UTC
NOW = datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(client):
    client.app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    yield NOW
    client.app.dependency_overrides.pop(get_clock, None)


def _build_schedule_payload(
    organizer_id: str,
    title: str = "Roadmap review",
    participants: list[str] | None = None,
    duration: int = 30,
    **extra,
) -> dict:
    payload = {
        "organizer_id": organizer_id,
        "title": title,
        "participants": participants or ["alice@example.com", "bob@example.com"],
        "duration": duration,
    }
    payload.update(extra)
    return payload


def test_schedule_meeting_returns_formatted_slots(client, fixed_clock):
    payload = _build_schedule_payload(
        "org-schedule",
        preferences={"timezone": "America/New_York"},
    )

    response = client.post("/meetings/schedule", json=payload)
    assert response.status_code == HTTPStatus.OK

    data = response.json()
    assert data["message"] == "Meeting scheduling analysis completed"
    assert data["outcome"] == "scheduled"
    assert isinstance(data["meeting_request_id"], str)
    assert len(data["suggested_slots"]) == 5
    assert data["scheduling_difficulty"] == "easy"
    assert data["analysis"]["total_candidates_generated"] == 100
    assert set(data["participant_feedback"]) == {"alice@example.com", "bob@example.com"}

    best = data["suggested_slots"][0]
    assert best["score"] == 100
    assert best["confidence"] == 100
    assert best["conflicts"] == []
    assert best["formatted"]["start"] == "2026-10-19T09:00:00+00:00"
    assert best["formatted"]["end"] == "2026-10-19T09:30:00+00:00"
    assert best["formatted"]["date"] == "Mon Oct 19 2026"
    # 09:00 UTC is 05:00 in New York (EDT)
    assert best["formatted"]["time"] == "05:00 AM"


def test_schedule_then_fetch_confirm_and_list(client, fixed_clock):
    organizer = "org-flow"
    created = client.post("/meetings/schedule", json=_build_schedule_payload(organizer)).json()
    request_id = created["meeting_request_id"]
    best_slot_id = created["suggested_slots"][0]["id"]

    detail = client.get(f"/meetings/{request_id}", params={"organizer_id": organizer})
    assert detail.status_code == HTTPStatus.OK
    detail_data = detail.json()
    assert detail_data["meeting"]["status"] == "pending"
    assert detail_data["meeting"]["participants"] == ["alice@example.com", "bob@example.com"]
    assert [s["id"] for s in detail_data["suggested_slots"]][0] == best_slot_id
    assert len(detail_data["suggested_slots"]) == 5

    confirm = client.post(
        f"/meetings/{request_id}/confirm",
        json={
            "organizer_id": organizer,
            "selected_slot_id": best_slot_id,
            "custom_message": "Bring the draft roadmap",
        },
    )
    assert confirm.status_code == HTTPStatus.OK
    confirm_data = confirm.json()
    assert confirm_data["message"] == "Meeting slot confirmed successfully"
    assert confirm_data["meeting"]["status"] == "scheduled"
    assert confirm_data["meeting"]["selected_slot"]["slot_id"] == best_slot_id
    assert confirm_data["slot"]["id"] == best_slot_id
    assert confirm_data["slot"]["formatted"]["time"] == "09:00 AM"

    event = confirm_data["calendar_event"]
    assert confirm_data["event_id"] == event["id"]
    assert event["meeting_request_id"] == request_id
    assert event["title"] == "Roadmap review"
    assert event["description"] == "Bring the draft roadmap"
    assert event["status"] == "confirmed"
    assert event["formatted"]["start"] == "2026-10-19T09:00:00+00:00"
    assert event["formatted"]["end"] == "2026-10-19T09:30:00+00:00"
    assert event["formatted"]["date"] == "Mon Oct 19 2026"
    assert event["formatted"]["time"] == "09:00 AM"

    listing = client.get("/meetings", params={"organizer_id": organizer})
    assert listing.status_code == HTTPStatus.OK
    rows = listing.json()
    assert [r["id"] for r in rows] == [request_id]
    assert rows[0]["suggested_slots_count"] == 5
    assert rows[0]["status"] == "scheduled"

    pending = client.get("/meetings", params={"organizer_id": organizer, "status": "pending"})
    assert pending.json() == []


def test_confirm_without_message_uses_request_details(client, fixed_clock):
    organizer = "org-confirm-plain"
    created = client.post(
        "/meetings/schedule",
        json=_build_schedule_payload(
            organizer,
            title="Design review",
            agenda="Walk through the API",
            location_details="Room 4",
            preferences={"timezone": "Asia/Tokyo"},
        ),
    ).json()
    slot_id = created["suggested_slots"][0]["id"]

    response = client.post(
        f"/meetings/{created['meeting_request_id']}/confirm",
        json={"organizer_id": organizer, "selected_slot_id": slot_id},
    )

    assert response.status_code == HTTPStatus.OK
    event = response.json()["calendar_event"]
    assert event["title"] == "Design review"
    assert event["agenda"] == "Walk through the API"
    assert event["location"] == "Room 4"
    assert event["description"] is None
    # 09:00 UTC is 18:00 in Tokyo
    assert event["formatted"]["time"] == "06:00 PM"


def test_list_limit_is_capped(client, fixed_clock):
    response = client.get("/meetings", params={"organizer_id": "org-empty", "limit": 500})

    assert response.status_code == HTTPStatus.OK
    assert response.json() == []


def test_invalid_request_returns_400(client, fixed_clock):
    payload = _build_schedule_payload(
        "org-invalid",
        participants=["alice@example.com", "alice@example.com"],
    )

    response = client.post("/meetings/schedule", json=payload)

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "duplicate participant: alice@example.com" in response.json()["detail"]


def test_blank_title_returns_400(client, fixed_clock):
    response = client.post(
        "/meetings/schedule",
        json=_build_schedule_payload("org-invalid", title="   "),
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "title must not be blank" in response.json()["detail"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"duration": 10},
        {"duration": 481},
        {"participants": ["not-an-email"]},
        {"buffer_time": 61},
    ],
)
def test_payload_validation_returns_422(client, overrides):
    payload = _build_schedule_payload("org-422")
    payload.update(overrides)

    response = client.post("/meetings/schedule", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_scheduling_failure_returns_500(client):
    class _FailingResolver:
        async def resolve(self, emails, window_start, window_end):
            raise RuntimeError("directory offline")

    class _NullStore:
        async def save_request(self, request_id, request, created_at):
            return None

        async def save_slots(self, request_id, slots, created_at):
            return None

    def _failing_scheduler() -> MeetingScheduler:
        return MeetingScheduler(
            resolver=_FailingResolver(),
            store=_NullStore(),
            clock=lambda: NOW,
        )

    client.app.dependency_overrides[get_meeting_scheduler] = _failing_scheduler
    try:
        response = client.post("/meetings/schedule", json=_build_schedule_payload("org-500"))
    finally:
        client.app.dependency_overrides.pop(get_meeting_scheduler, None)

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Failed to schedule meeting"


def test_confirm_unknown_request_returns_404(client):
    response = client.post(
        "/meetings/does-not-exist/confirm",
        json={"organizer_id": "org-404", "selected_slot_id": "slot-1"},
    )

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json()["detail"] == "Meeting request not found"


def test_confirm_unknown_slot_returns_404(client, fixed_clock):
    organizer = "org-404-slot"
    created = client.post("/meetings/schedule", json=_build_schedule_payload(organizer)).json()

    response = client.post(
        f"/meetings/{created['meeting_request_id']}/confirm",
        json={"organizer_id": organizer, "selected_slot_id": "not-a-slot"},
    )

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json()["detail"] == "Meeting slot not found"


def test_get_request_of_other_organizer_returns_404(client, fixed_clock):
    created = client.post(
        "/meetings/schedule", json=_build_schedule_payload("org-owner")
    ).json()

    response = client.get(
        f"/meetings/{created['meeting_request_id']}",
        params={"organizer_id": "org-intruder"},
    )

    assert response.status_code == HTTPStatus.NOT_FOUND
