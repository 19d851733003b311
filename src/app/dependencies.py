from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from src.adapters.email_client import EmailClient
from src.adapters.mongo_client import MongoClientFactory
from src.adapters.token_store import ClerkTokenStore
from src.app.config import Settings, get_settings
from src.orchestrator.graph import BookingOrchestrator
from src.services.bookings import BookingRecorder
from src.services.calendar import CalendarGateway
from src.services.events import EventService
from src.services.notifications import (
    EmailParticipantNotifier,
    LoggingParticipantNotifier,
    ParticipantNotifier,
)


@lru_cache(maxsize=1)
def get_mongo_factory() -> MongoClientFactory:
    settings = get_settings()
    return MongoClientFactory(settings.mongo_uri, settings.mongo_database)


@lru_cache(maxsize=1)
def get_email_client() -> EmailClient:
    settings = get_settings()
    return EmailClient(api_key=settings.email_api_key, sender_email=settings.email_sender_email)


@lru_cache(maxsize=1)
def get_token_store() -> ClerkTokenStore:
    settings = get_settings()
    return ClerkTokenStore(secret_key=settings.clerk_secret_key, api_url=settings.clerk_api_url)


def get_event_service(
    settings: Settings = Depends(get_settings),
    mongo_factory: MongoClientFactory = Depends(get_mongo_factory),
) -> EventService:
    return EventService(
        events_collection=mongo_factory.get_collection(settings.events_collection),
        users_collection=mongo_factory.get_collection(settings.users_collection),
    )


def get_booking_recorder(
    settings: Settings = Depends(get_settings),
    mongo_factory: MongoClientFactory = Depends(get_mongo_factory),
) -> BookingRecorder:
    return BookingRecorder(collection=mongo_factory.get_collection(settings.bookings_collection))


def get_calendar_gateway(
    settings: Settings = Depends(get_settings),
    token_store: ClerkTokenStore = Depends(get_token_store),
) -> CalendarGateway:
    return CalendarGateway(
        token_store=token_store,
        provider=settings.oauth_provider,
        calendar_id=settings.calendar_id,
        timezone=settings.calendar_timezone,
    )


def get_notifier(email_client: EmailClient = Depends(get_email_client)) -> ParticipantNotifier:
    if email_client.configured:
        return EmailParticipantNotifier(email_client)
    return LoggingParticipantNotifier()


def get_orchestrator(
    event_service: EventService = Depends(get_event_service),
    calendar_gateway: CalendarGateway = Depends(get_calendar_gateway),
    booking_recorder: BookingRecorder = Depends(get_booking_recorder),
    notifier: ParticipantNotifier = Depends(get_notifier),
) -> BookingOrchestrator:
    return BookingOrchestrator(
        event_service=event_service,
        calendar_gateway=calendar_gateway,
        booking_recorder=booking_recorder,
        notifier=notifier,
    )


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    # Session verification happens upstream; the gateway forwards the user id.
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return x_user_id
