from __future__ import annotations

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from src.app.dependencies import get_booking_recorder, get_event_service, get_orchestrator
from src.app.main import app
from src.orchestrator.state import BookingOutcome
from src.schemas.booking import Booking
from src.services.bookings import BookingRecorder
from src.services.events import EventService


class MemoryCursor(list):
    def sort(self, key, direction):
        return MemoryCursor(sorted(self, key=lambda document: document[key], reverse=direction < 0))


class MemoryCollection:
    def __init__(self, documents=None) -> None:
        self.documents = {document["_id"]: dict(document) for document in documents or []}

    def insert_one(self, payload):
        self.documents[payload["_id"]] = dict(payload)
        return type("InsertResult", (), {"inserted_id": payload["_id"]})

    def find_one(self, query):
        return self.documents.get(query["_id"])

    def find(self, query):
        return MemoryCursor(
            document
            for document in self.documents.values()
            if all(document.get(key) == value for key, value in query.items())
        )


class StubOrchestrator:
    def __init__(self, outcome: BookingOutcome) -> None:
        self.outcome = outcome
        self.requests = []

    async def create_booking(self, request):
        self.requests.append(request)
        return self.outcome


BOOKING_PAYLOAD = {
    "eventId": "evt-1",
    "name": "Casey",
    "email": "casey@example.com",
    "startTime": "2024-05-02T15:00:00Z",
    "endTime": "2024-05-02T15:30:00Z",
    "additionalInfo": "See you then",
}


def _booking() -> Booking:
    return Booking(
        id="bk-1",
        event_id="evt-1",
        user_id="user-1",
        name="Casey",
        email="casey@example.com",
        start_time=datetime(2024, 5, 2, 15, 0, tzinfo=UTC),
        end_time=datetime(2024, 5, 2, 15, 30, tzinfo=UTC),
        meet_link="https://meet.google.com/abc",
        google_event_id="ev123",
    )


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def stores():
    users = MemoryCollection([{"_id": "user-1", "auth_user_id": "clerk-1", "email": "owner@example.com", "name": "Olive"}])
    events = MemoryCollection()
    bookings = MemoryCollection()
    app.dependency_overrides[get_event_service] = lambda: EventService(events, users)
    app.dependency_overrides[get_booking_recorder] = lambda: BookingRecorder(bookings)
    return events, bookings


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_booking_returns_camel_case_result(client):
    orchestrator = StubOrchestrator(BookingOutcome(success=True, booking=_booking(), meet_link="https://meet.google.com/abc"))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    response = client.post("/api/v1/bookings", json=BOOKING_PAYLOAD)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["meetLink"] == "https://meet.google.com/abc"
    assert data["booking"]["googleEventId"] == "ev123"
    assert orchestrator.requests[0].event_id == "evt-1"
    assert orchestrator.requests[0].additional_info == "See you then"


def test_create_booking_failure_keeps_uniform_shape(client):
    orchestrator = StubOrchestrator(BookingOutcome.failed("Event not found", "NotFound"))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    response = client.post("/api/v1/bookings", json=BOOKING_PAYLOAD)

    assert response.status_code == 404
    assert response.json() == {"success": False, "booking": None, "meetLink": None, "error": "Event not found"}


def test_create_booking_rejects_inverted_time_range(client):
    app.dependency_overrides[get_orchestrator] = lambda: StubOrchestrator(BookingOutcome(success=True))
    payload = {**BOOKING_PAYLOAD, "endTime": "2024-05-02T14:00:00Z"}

    response = client.post("/api/v1/bookings", json=payload)

    assert response.status_code == 422


@pytest.mark.parametrize(
    "times",
    [
        {"startTime": "2024-05-02T15:00:00Z", "endTime": "2024-05-02T15:30:00"},
        {"startTime": "2024-05-02T15:00:00", "endTime": "2024-05-02T15:30:00+02:00"},
        {"startTime": "2024-05-02T15:00:00", "endTime": "2024-05-02T15:30:00"},
    ],
)
def test_create_booking_rejects_times_without_offset(times):
    orchestrator = StubOrchestrator(BookingOutcome(success=True))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.post("/api/v1/bookings", json={**BOOKING_PAYLOAD, **times})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 422
    assert orchestrator.requests == []


def test_event_lifecycle(client, stores):
    events, _ = stores
    headers = {"X-User-Id": "user-1"}
    create = client.post(
        "/api/v1/events",
        headers=headers,
        json={
            "title": "Office hours",
            "description": "Drop in",
            "duration": 45,
            "eventType": "in-person",
            "hasVideo": True,
            "address": "12 Main St",
            "contactNumber": "+1 555 0100",
            "participants": [{"name": "Pat", "email": "pat@example.com"}],
        },
    )

    assert create.status_code == 201
    created = create.json()
    assert created["eventType"] == "IN_PERSON"
    assert created["hasVideo"] is False
    assert created["participants"] is None
    assert created["id"] in events.documents

    listed = client.get("/api/v1/events", headers=headers)
    assert [event["id"] for event in listed.json()] == [created["id"]]

    details = client.get(f"/api/v1/events/{created['id']}")
    assert details.status_code == 200
    assert details.json()["meetingTypeLabel"] == "In-Person Meeting"
    assert details.json()["ownerName"] == "Olive"


def test_event_routes_require_user_header(client, stores):
    response = client.post("/api/v1/events", json={"title": "x", "description": "y"})
    assert response.status_code == 401


def test_unknown_event_details_return_404(client, stores):
    response = client.get("/api/v1/events/missing")
    assert response.status_code == 404


def test_list_bookings_for_owner(client, stores):
    _, bookings = stores
    bookings.insert_one({"_id": "bk-1", **_booking().model_dump(exclude={"id"})})

    response = client.get("/api/v1/bookings", headers={"X-User-Id": "user-1"})

    assert response.status_code == 200
    assert [booking["id"] for booking in response.json()] == ["bk-1"]
