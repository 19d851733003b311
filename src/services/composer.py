from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional, Union

from src.schemas.booking import BookingRequest
from src.schemas.events import ChatProvider, Event, EventType, VideoProvider

ZOOM_PLACEHOLDER_LINK = "Zoom meeting link will be provided via email"
CHAT_CHANNEL_NAMES = {
    ChatProvider.TEAMS: "Microsoft Teams",
    ChatProvider.WHATSAPP: "WhatsApp",
}


@dataclass(frozen=True)
class InPerson:
    address: str
    contact_number: str
    requires_calendar: bool = False

    @property
    def join_link(self) -> str:
        return f"In-person meeting at: {self.address}"


@dataclass(frozen=True)
class VideoMeet:
    requires_calendar: bool = True

    @property
    def join_link(self) -> Optional[str]:
        # Read back from the provider's hangoutLink.
        return None


@dataclass(frozen=True)
class VideoZoom:
    requires_calendar: bool = True

    @property
    def join_link(self) -> str:
        return ZOOM_PLACEHOLDER_LINK


@dataclass(frozen=True)
class ChatTeams:
    requires_calendar: bool = False
    channel: str = CHAT_CHANNEL_NAMES[ChatProvider.TEAMS]

    @property
    def join_link(self) -> str:
        return f"Chat meeting via {self.channel}"


@dataclass(frozen=True)
class ChatWhatsApp:
    requires_calendar: bool = False
    channel: str = CHAT_CHANNEL_NAMES[ChatProvider.WHATSAPP]

    @property
    def join_link(self) -> str:
        return f"Chat meeting via {self.channel}"


MeetingMode = Union[InPerson, VideoMeet, VideoZoom, ChatTeams, ChatWhatsApp]


@dataclass
class CalendarEventPayload:
    summary: str
    description: str
    start: datetime
    end: datetime
    attendees: List[str]
    location: Optional[str] = None
    conference_request_id: Optional[str] = None

    @property
    def wants_conference_data(self) -> bool:
        return self.conference_request_id is not None

    def to_body(self, timezone: Optional[str] = None) -> Dict[str, Any]:
        start: Dict[str, str] = {"dateTime": self.start.isoformat()}
        end: Dict[str, str] = {"dateTime": self.end.isoformat()}
        if timezone:
            start["timeZone"] = timezone
            end["timeZone"] = timezone
        body: Dict[str, Any] = {
            "summary": self.summary,
            "description": self.description,
            "start": start,
            "end": end,
            "attendees": [{"email": email} for email in self.attendees],
        }
        if self.location:
            body["location"] = self.location
        if self.conference_request_id:
            body["conferenceData"] = {"createRequest": {"requestId": self.conference_request_id}}
        return body


def select_meeting_mode(event: Event) -> MeetingMode:
    """Pick the meeting mode; a physical location wins over video, video over chat."""
    if event.event_type == EventType.IN_PERSON:
        return InPerson(address=event.address or "", contact_number=event.contact_number or "")
    if event.has_video:
        if event.video_provider == VideoProvider.GOOGLE_MEET:
            return VideoMeet()
        return VideoZoom()
    if event.chat_provider == ChatProvider.TEAMS:
        return ChatTeams()
    return ChatWhatsApp()


def compose(event: Event, request: BookingRequest, now: Optional[datetime] = None) -> CalendarEventPayload:
    mode = select_meeting_mode(event)
    return compose_for_mode(mode, event, request, now=now)


def compose_for_mode(
    mode: MeetingMode,
    event: Event,
    request: BookingRequest,
    now: Optional[datetime] = None,
) -> CalendarEventPayload:
    composer = _COMPOSERS[type(mode)]
    payload = CalendarEventPayload(
        summary=f"{request.name} - {event.title}",
        description=request.additional_info or "",
        start=request.start_time,
        end=request.end_time,
        attendees=_attendees_for(event, request),
    )
    composer(payload, mode, event, now or datetime.now(UTC))
    return payload


def _attendees_for(event: Event, request: BookingRequest) -> List[str]:
    attendees = [str(request.email)]
    if event.owner and event.owner.email:
        attendees.append(event.owner.email)
    return attendees


def _compose_in_person(payload: CalendarEventPayload, mode: InPerson, event: Event, now: datetime) -> None:
    payload.description = f"{payload.description}\n\nLocation: {mode.address}\nContact: {mode.contact_number}"
    payload.location = mode.address


def _compose_meet(payload: CalendarEventPayload, mode: VideoMeet, event: Event, now: datetime) -> None:
    payload.conference_request_id = f"{event.id}-{int(now.timestamp() * 1000)}"


def _compose_zoom(payload: CalendarEventPayload, mode: VideoZoom, event: Event, now: datetime) -> None:
    payload.description = f"{payload.description}\n\nZoom meeting details will be provided separately."


def _compose_chat(
    payload: CalendarEventPayload, mode: Union[ChatTeams, ChatWhatsApp], event: Event, now: datetime
) -> None:
    payload.description = f"{payload.description}\n\nChat via {mode.channel}"


_COMPOSERS = {
    InPerson: _compose_in_person,
    VideoMeet: _compose_meet,
    VideoZoom: _compose_zoom,
    ChatTeams: _compose_chat,
    ChatWhatsApp: _compose_chat,
}


def event_type_label(event: Event) -> str:
    if event.event_type == EventType.PUBLIC:
        return "Public Event"
    if event.event_type == EventType.IN_PERSON:
        return "In-Person Meeting"
    return "Private Event"


def meeting_type_label(event: Event) -> str:
    mode = select_meeting_mode(event)
    if isinstance(mode, InPerson):
        return "In-Person Meeting"
    if isinstance(mode, VideoZoom):
        return "Zoom Meeting"
    if isinstance(mode, VideoMeet):
        return "Google Meet"
    return f"{mode.channel} Chat"
