from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.schemas.events import ChatProvider, EventCreate, EventType, VideoProvider
from src.services.errors import NotFound
from src.services.events import EventService


class MemoryCollection:
    def __init__(self, documents=None) -> None:
        self.documents = {document["_id"]: dict(document) for document in documents or []}

    def insert_one(self, payload):
        self.documents[payload["_id"]] = dict(payload)
        return type("InsertResult", (), {"inserted_id": payload["_id"]})

    def find_one(self, query):
        return self.documents.get(query["_id"])


def _service():
    users = MemoryCollection([{"_id": "user-1", "auth_user_id": "clerk-1", "email": "owner@example.com"}])
    return EventService(events_collection=MemoryCollection(), users_collection=users)


def test_public_event_keeps_participants_and_video_provider():
    payload = EventCreate(
        title="Demo day",
        description="Product demo",
        eventType="public",
        hasVideo=True,
        videoProvider="zoom",
        participants=[{"name": "Pat", "email": "pat@example.com"}],
    )

    assert payload.event_type == EventType.PUBLIC
    assert payload.video_provider == VideoProvider.ZOOM
    assert payload.chat_provider is None
    assert payload.participants[0].name == "Pat"


def test_private_chat_event_drops_unrelated_fields():
    payload = EventCreate(
        title="1:1",
        description="Chat",
        event_type="PRIVATE",
        chat_provider="teams",
        address="ignored",
        participants=[{"name": "Pat", "email": "pat@example.com"}],
    )

    assert payload.chat_provider == ChatProvider.TEAMS
    assert payload.video_provider is None
    assert payload.address is None
    assert payload.participants is None


def test_in_person_requires_address_and_contact():
    with pytest.raises(ValidationError):
        EventCreate(title="Visit", description="On site", eventType="in-person", contactNumber="1")
    with pytest.raises(ValidationError):
        EventCreate(title="Visit", description="On site", eventType="in-person", address="HQ")


@pytest.mark.parametrize(
    "overrides",
    [{"title": ""}, {"title": "x" * 101}, {"description": ""}, {"duration": 0}, {"eventType": "webinar"}],
)
def test_invalid_event_payloads(overrides):
    values = {"title": "Call", "description": "desc", **overrides}
    with pytest.raises(ValidationError):
        EventCreate(**values)


def test_create_and_fetch_event_with_owner():
    service = _service()
    created = service.create_event("user-1", EventCreate(title="Call", description="desc", duration=15))

    fetched = service.get_event(created.id)

    assert fetched.title == "Call"
    assert fetched.duration == 15
    assert fetched.owner.auth_user_id == "clerk-1"
    assert service.get_event(created.id, include_owner=False).owner is None
    assert service.get_event("missing") is None


def test_create_event_for_unknown_user_is_rejected():
    with pytest.raises(NotFound):
        _service().create_event("ghost", EventCreate(title="Call", description="desc"))


def test_details_include_labels():
    service = _service()
    created = service.create_event(
        "user-1", EventCreate(title="Call", description="desc", hasVideo=True, videoProvider="google-meet")
    )

    details = service.get_details(created.id)

    assert details.event_type_label == "Private Event"
    assert details.meeting_type_label == "Google Meet"
    assert details.owner_email == "owner@example.com"
    with pytest.raises(NotFound):
        service.get_details("missing")
