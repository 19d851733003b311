from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    IN_PERSON = "IN_PERSON"

    @classmethod
    def from_label(cls, label: str) -> "EventType":
        normalized = label.strip().upper().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unsupported event type: {label}") from exc


class VideoProvider(str, Enum):
    GOOGLE_MEET = "google-meet"
    ZOOM = "zoom"


class ChatProvider(str, Enum):
    WHATSAPP = "whatsapp"
    TEAMS = "teams"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Participant(CamelModel):
    name: str = Field(..., min_length=1, description="Participant display name")
    email: EmailStr


class Owner(CamelModel):
    id: str
    auth_user_id: str = Field(..., description="Identity provider user id used for delegated tokens")
    email: str
    name: Optional[str] = None
    username: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Owner":
        return cls(
            id=str(document["_id"]),
            auth_user_id=document.get("auth_user_id") or str(document["_id"]),
            email=document["email"],
            name=document.get("name"),
            username=document.get("username"),
            image_url=document.get("image_url"),
        )


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    duration: int = Field(default=30, gt=0, description="Duration in minutes")
    event_type: EventType = EventType.PRIVATE
    has_video: bool = False
    video_provider: Optional[VideoProvider] = VideoProvider.GOOGLE_MEET
    chat_provider: Optional[ChatProvider] = ChatProvider.WHATSAPP
    address: Optional[str] = None
    contact_number: Optional[str] = None
    participants: Optional[List[Participant]] = None

    @field_validator("event_type", mode="before")
    @classmethod
    def _normalize_event_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return EventType.from_label(value)
        return value

    @model_validator(mode="after")
    def _clean_for_event_type(self) -> "EventCreate":
        if self.event_type == EventType.IN_PERSON:
            if not (self.address or "").strip():
                raise ValueError("Address is required for in-person events")
            if not (self.contact_number or "").strip():
                raise ValueError("Contact number is required for in-person events")
            self.has_video = False
            self.video_provider = None
            self.chat_provider = None
        else:
            self.address = None
            self.contact_number = None
            if self.has_video:
                self.video_provider = self.video_provider or VideoProvider.GOOGLE_MEET
                self.chat_provider = None
            else:
                self.chat_provider = self.chat_provider or ChatProvider.WHATSAPP
                self.video_provider = None
        if self.event_type != EventType.PUBLIC:
            self.participants = None
        return self


class Event(CamelModel):
    id: str
    user_id: str
    title: str
    description: str
    duration: int
    event_type: EventType
    has_video: bool = False
    video_provider: Optional[VideoProvider] = None
    chat_provider: Optional[ChatProvider] = None
    address: Optional[str] = None
    contact_number: Optional[str] = None
    participants: Optional[List[Participant]] = None
    owner: Optional[Owner] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any], owner: Optional[Owner] = None) -> "Event":
        payload = {key: value for key, value in document.items() if key != "_id"}
        return cls(id=str(document["_id"]), owner=owner, **payload)

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(mode="json", exclude={"id", "owner"})
        document["_id"] = self.id
        return document


class EventDetails(CamelModel):
    """Public view of an event type shown on the booking page."""

    id: str
    title: str
    description: str
    duration: int
    event_type: EventType
    event_type_label: str
    meeting_type_label: str
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    owner_image_url: Optional[str] = None
