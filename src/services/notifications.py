from __future__ import annotations

import logging
from typing import List, Protocol

from src.adapters.email_client import EmailClient
from src.schemas.booking import Booking
from src.schemas.events import Participant

logger = logging.getLogger(__name__)


class ParticipantNotifier(Protocol):
    def notify(self, participants: List[Participant], booking: Booking) -> None:  # pragma: no cover - interface
        ...


class LoggingParticipantNotifier:
    """Used when no outbound email is configured."""

    def notify(self, participants: List[Participant], booking: Booking) -> None:
        logger.info(
            "Participants to notify for booking %s: %s",
            booking.id,
            ", ".join(str(participant.email) for participant in participants),
        )


class EmailParticipantNotifier:
    """Emails each participant of a public event about a new booking."""

    def __init__(self, email_client: EmailClient) -> None:
        self._email = email_client

    def notify(self, participants: List[Participant], booking: Booking) -> None:
        subject = f"New booking: {booking.name}"
        for participant in participants:
            body = (
                f"Hi {participant.name},\n\n"
                f"{booking.name} booked a meeting from {booking.start_time.isoformat()} "
                f"to {booking.end_time.isoformat()}.\n"
                f"Join: {booking.meet_link}\n"
            )
            self._email.send(
                recipient=str(participant.email),
                subject=subject,
                body=body,
                recipient_name=participant.name,
            )
