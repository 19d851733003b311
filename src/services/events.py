from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from src.schemas.events import Event, EventCreate, EventDetails, Owner
from src.services.composer import event_type_label, meeting_type_label
from src.services.errors import NotFound, PersistenceError

logger = logging.getLogger(__name__)


class EventService:
    """Stores event types and resolves them together with their owner."""

    def __init__(self, events_collection, users_collection) -> None:
        self._events = events_collection
        self._users = users_collection

    def create_event(self, owner_id: str, payload: EventCreate) -> Event:
        if self._find_owner(owner_id) is None:
            raise NotFound("User not found")
        event = Event(id=str(uuid.uuid4()), user_id=owner_id, **payload.model_dump())
        try:
            self._events.insert_one(event.to_document())
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to save event: {exc}") from exc
        logger.info("Created %s event %s for user %s", event.event_type.value, event.id, owner_id)
        return event

    def get_event(self, event_id: str, include_owner: bool = True) -> Optional[Event]:
        try:
            document = self._events.find_one({"_id": event_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load event: {exc}") from exc
        if document is None:
            return None
        owner = self._find_owner(document.get("user_id")) if include_owner else None
        return Event.from_document(document, owner=owner)

    def list_events(self, owner_id: str) -> List[Event]:
        try:
            cursor = self._events.find({"user_id": owner_id}).sort("title", ASCENDING)
            return [Event.from_document(document) for document in cursor]
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load events: {exc}") from exc

    def get_details(self, event_id: str) -> EventDetails:
        event = self.get_event(event_id)
        if event is None:
            raise NotFound("Event not found")
        owner = event.owner
        return EventDetails(
            id=event.id,
            title=event.title,
            description=event.description,
            duration=event.duration,
            event_type=event.event_type,
            event_type_label=event_type_label(event),
            meeting_type_label=meeting_type_label(event),
            owner_name=owner.name if owner else None,
            owner_email=owner.email if owner else None,
            owner_image_url=owner.image_url if owner else None,
        )

    def _find_owner(self, owner_id: Optional[str]) -> Optional[Owner]:
        if not owner_id:
            return None
        try:
            document = self._users.find_one({"_id": owner_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load user: {exc}") from exc
        return Owner.from_document(document) if document else None
