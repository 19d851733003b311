from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from langgraph.graph import END, StateGraph

from src.orchestrator.state import BookingOutcome, BookingState
from src.schemas.booking import BookingRequest
from src.schemas.events import EventType
from src.services.bookings import BookingRecorder
from src.services.calendar import CalendarGateway
from src.services.composer import compose_for_mode, select_meeting_mode
from src.services.errors import BookingError, CredentialMissing, NotFound
from src.services.events import EventService
from src.services.notifications import ParticipantNotifier

logger = logging.getLogger(__name__)

Node = Callable[[BookingState], Awaitable[Dict[str, Any]]]


def _absorb_errors(node: Node) -> Node:
    """Turn any exception raised by a node into an error on the state."""

    @wraps(node)
    async def wrapper(state: BookingState) -> Dict[str, Any]:
        try:
            return await node(state)
        except BookingError as exc:
            logger.warning("Booking step %s failed (%s): %s", node.__name__, exc.kind, exc.message)
            return {"error": exc.message, "error_kind": exc.kind}
        except Exception as exc:
            logger.exception("Unexpected failure in booking step %s", node.__name__)
            return {"error": str(exc) or exc.__class__.__name__, "error_kind": "InternalError"}

    return wrapper


class BookingOrchestrator:
    """LangGraph-based state machine for creating a booking."""

    def __init__(
        self,
        event_service: EventService,
        calendar_gateway: CalendarGateway,
        booking_recorder: BookingRecorder,
        notifier: ParticipantNotifier,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._events = event_service
        self._calendar = calendar_gateway
        self._recorder = booking_recorder
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(UTC))
        self._graph = self._build_graph().compile()

    def _build_graph(self) -> StateGraph:
        graph = StateGraph(BookingState)

        graph.add_node("lookup_event", _absorb_errors(self._lookup_node))
        graph.add_node("compose_payload", _absorb_errors(self._compose_node))
        graph.add_node("submit_calendar", _absorb_errors(self._submit_node))
        graph.add_node("record_booking", _absorb_errors(self._record_node))
        graph.add_node("notify_participants", self._notify_node)
        graph.add_node("failed", self._failed_node)

        graph.set_entry_point("lookup_event")

        steps = ["lookup_event", "compose_payload", "submit_calendar", "record_booking", "notify_participants"]
        for current, following in zip(steps, steps[1:]):
            graph.add_conditional_edges(
                current,
                self._step_router,
                {True: following, False: "failed"},
            )
        graph.add_edge("notify_participants", END)
        graph.add_edge("failed", END)

        return graph

    def _step_router(self, state: BookingState) -> bool:
        return state.error is None

    async def _lookup_node(self, state: BookingState) -> Dict[str, Any]:
        event = await run_in_threadpool(self._events.get_event, state.request.event_id, True)
        if event is None or event.owner is None:
            raise NotFound("Event not found")
        return {"event": event}

    async def _compose_node(self, state: BookingState) -> Dict[str, Any]:
        mode = select_meeting_mode(state.event)
        payload = compose_for_mode(mode, state.event, state.request, now=self._clock())
        return {"mode": mode, "payload": payload, "meet_link": mode.join_link}

    async def _submit_node(self, state: BookingState) -> Dict[str, Any]:
        try:
            submission = await self._calendar.submit(state.event.owner.auth_user_id, state.payload)
        except CredentialMissing:
            if state.mode.requires_calendar:
                raise
            logger.info("Owner of event %s has no calendar connection; booking without a calendar entry", state.event.id)
            return {"submission": None}

        updates: Dict[str, Any] = {"submission": submission}
        if state.meet_link is None:
            updates["meet_link"] = submission.join_link
        return updates

    async def _record_node(self, state: BookingState) -> Dict[str, Any]:
        provider_event_id = state.submission.provider_event_id if state.submission else None
        try:
            booking = await self._recorder.record(state.event, state.request, state.meet_link, provider_event_id)
        except BookingError:
            if provider_event_id:
                logger.warning(
                    "Calendar event %s was created but the booking was not recorded", provider_event_id
                )
            raise
        return {"booking": booking}

    async def _notify_node(self, state: BookingState) -> Dict[str, Any]:
        event = state.event
        if event.event_type != EventType.PUBLIC or not event.participants:
            return {}
        try:
            await run_in_threadpool(self._notifier.notify, event.participants, state.booking)
        except Exception:
            # Booking is already stored at this point.
            logger.exception("Failed to notify participants for booking %s", state.booking.id)
        return {}

    async def _failed_node(self, state: BookingState) -> Dict[str, Any]:
        logger.error("Booking failed (%s): %s", state.error_kind, state.error)
        return {}

    async def create_booking(self, request: BookingRequest) -> BookingOutcome:
        try:
            result = await self._graph.ainvoke({"request": request})
        except Exception as exc:
            logger.exception("Booking workflow aborted for event %s", request.event_id)
            return BookingOutcome.failed(str(exc) or exc.__class__.__name__, "InternalError")

        if isinstance(result, BookingState):
            result = vars(result)
        if result.get("error"):
            return BookingOutcome.failed(result["error"], result.get("error_kind") or "InternalError")
        booking = result.get("booking")
        return BookingOutcome(success=True, booking=booking, meet_link=booking.meet_link)
