from __future__ import annotations

import logging
import threading
import time
import uuid
from datetime import UTC, datetime
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from src.schemas.booking import Booking, BookingRequest
from src.schemas.events import Event
from src.services.errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_MEET_LINK = "Meeting details will be provided"

_fallback_lock = threading.Lock()
_last_fallback_ms = 0


def fallback_event_id() -> str:
    """Return ``manual-<epoch millis>``, strictly increasing within the process."""
    global _last_fallback_ms
    with _fallback_lock:
        now_ms = int(time.time() * 1000)
        _last_fallback_ms = max(now_ms, _last_fallback_ms + 1)
        return f"manual-{_last_fallback_ms}"


class BookingRecorder:
    """Persists booking records to MongoDB."""

    def __init__(self, collection) -> None:
        self._collection = collection

    async def record(
        self,
        event: Event,
        request: BookingRequest,
        meet_link: Optional[str],
        provider_event_id: Optional[str],
    ) -> Booking:
        document = {
            "_id": str(uuid.uuid4()),
            "event_id": event.id,
            "user_id": event.user_id,
            "name": request.name,
            "email": str(request.email),
            "start_time": request.start_time,
            "end_time": request.end_time,
            "additional_info": request.additional_info,
            "meet_link": meet_link or DEFAULT_MEET_LINK,
            "google_event_id": provider_event_id or fallback_event_id(),
            "created_at": datetime.now(UTC),
        }
        try:
            await run_in_threadpool(self._collection.insert_one, document)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to save booking: {exc}") from exc
        logger.info("Recorded booking %s for event %s", document["_id"], event.id)
        return Booking.from_document(document)

    def list_for_owner(self, user_id: str) -> List[Booking]:
        try:
            cursor = self._collection.find({"user_id": user_id}).sort("start_time", ASCENDING)
            return [Booking.from_document(document) for document in cursor]
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load bookings: {exc}") from exc
