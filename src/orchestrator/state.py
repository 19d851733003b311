from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.schemas.booking import Booking, BookingRequest
from src.schemas.events import Event
from src.services.calendar import CalendarSubmission
from src.services.composer import CalendarEventPayload, MeetingMode


@dataclass
class BookingState:
    request: Optional[BookingRequest] = None
    event: Optional[Event] = None
    mode: Optional[MeetingMode] = None
    payload: Optional[CalendarEventPayload] = None
    submission: Optional[CalendarSubmission] = None
    meet_link: Optional[str] = None
    booking: Optional[Booking] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


@dataclass
class BookingOutcome:
    success: bool
    booking: Optional[Booking] = None
    meet_link: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def failed(cls, message: str, kind: str) -> "BookingOutcome":
        return cls(success=False, error=message, error_kind=kind)
