from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.app.config import Settings
from src.app.dependencies import (
    get_booking_recorder,
    get_current_user_id,
    get_event_service,
    get_orchestrator,
    get_settings,
)
from src.orchestrator.graph import BookingOrchestrator
from src.schemas.booking import Booking, BookingRequest, BookingResponse
from src.schemas.events import Event, EventCreate, EventDetails
from src.services.bookings import BookingRecorder
from src.services.errors import NotFound
from src.services.events import EventService

router = APIRouter()

FAILURE_STATUS = {
    "NotFound": status.HTTP_404_NOT_FOUND,
    "CredentialMissing": status.HTTP_502_BAD_GATEWAY,
    "ProviderError": status.HTTP_502_BAD_GATEWAY,
}


@router.get("/health", status_code=status.HTTP_200_OK)
def health(settings: Settings = Depends(get_settings)) -> dict:
    return {"app": settings.app_name, "status": "ok"}


@router.post("/api/v1/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingRequest,
    response: Response,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
) -> BookingResponse:
    outcome = await orchestrator.create_booking(payload)
    if not outcome.success:
        response.status_code = FAILURE_STATUS.get(outcome.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return BookingResponse(success=False, error=outcome.error)
    return BookingResponse(success=True, booking=outcome.booking, meet_link=outcome.meet_link)


@router.get("/api/v1/bookings", response_model=List[Booking])
def list_bookings(
    user_id: str = Depends(get_current_user_id),
    recorder: BookingRecorder = Depends(get_booking_recorder),
) -> List[Booking]:
    return recorder.list_for_owner(user_id)


@router.post("/api/v1/events", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    user_id: str = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
) -> Event:
    try:
        return event_service.create_event(user_id, payload)
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc


@router.get("/api/v1/events", response_model=List[Event])
def list_events(
    user_id: str = Depends(get_current_user_id),
    event_service: EventService = Depends(get_event_service),
) -> List[Event]:
    return event_service.list_events(user_id)


@router.get("/api/v1/events/{event_id}", response_model=EventDetails)
def get_event_details(
    event_id: str,
    event_service: EventService = Depends(get_event_service),
) -> EventDetails:
    try:
        return event_service.get_details(event_id)
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
