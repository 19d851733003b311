from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AwareDatetime, EmailStr, Field, model_validator

from src.schemas.events import CamelModel


class BookingRequest(CamelModel):
    event_id: str = Field(..., min_length=1, description="Identifier of the event type being booked")
    name: str = Field(..., min_length=1, description="Attendee name")
    email: EmailStr
    start_time: AwareDatetime
    end_time: AwareDatetime
    additional_info: str = Field(default="", description="Free-text notes from the attendee")

    @model_validator(mode="after")
    def _validate_time_range(self) -> "BookingRequest":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class Booking(CamelModel):
    id: str
    event_id: str
    user_id: str
    name: str
    email: str
    start_time: datetime
    end_time: datetime
    additional_info: str = ""
    meet_link: str
    google_event_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Booking":
        payload = {key: value for key, value in document.items() if key != "_id"}
        return cls(id=str(document["_id"]), **payload)


class BookingResponse(CamelModel):
    success: bool
    booking: Optional[Booking] = None
    meet_link: Optional[str] = None
    error: Optional[str] = None
