from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Dict, Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from src.adapters.calendar_client import GoogleCalendarClient
from src.adapters.token_store import TokenStore
from src.services.composer import CalendarEventPayload
from src.services.errors import CredentialMissing, ProviderError

logger = logging.getLogger(__name__)

MISSING_CALENDAR_MESSAGE = "Event creator has not connected Google Calendar"


class CalendarSession(Protocol):
    def insert_event(self, body: Dict[str, Any], conference_data: bool = False) -> Dict[str, Any]:  # pragma: no cover
        ...


ClientFactory = Callable[[str, str], ContextManager[CalendarSession]]


def google_client_factory(access_token: str, calendar_id: str) -> ContextManager[CalendarSession]:
    return GoogleCalendarClient(access_token=access_token, calendar_id=calendar_id)


@dataclass
class CalendarSubmission:
    provider_event_id: Optional[str]
    join_link: Optional[str] = None


class CalendarGateway:
    """Creates calendar entries on the event owner's Google Calendar."""

    def __init__(
        self,
        token_store: TokenStore,
        client_factory: ClientFactory = google_client_factory,
        provider: str = "oauth_google",
        calendar_id: str = "primary",
        timezone: str = "",
    ) -> None:
        self._tokens = token_store
        self._client_factory = client_factory
        self._provider = provider
        self._calendar_id = calendar_id
        self._timezone = timezone

    async def submit(self, owner_identity: str, payload: CalendarEventPayload) -> CalendarSubmission:
        token = await run_in_threadpool(self._tokens.get_delegated_token, owner_identity, self._provider)
        if not token:
            raise CredentialMissing(MISSING_CALENDAR_MESSAGE)
        return await run_in_threadpool(self._insert, token, payload)

    def _insert(self, token: str, payload: CalendarEventPayload) -> CalendarSubmission:
        body = payload.to_body(self._timezone or None)
        try:
            with self._client_factory(token, self._calendar_id) as client:
                created = client.insert_event(body, conference_data=payload.wants_conference_data)
        except HttpError as exc:
            status = getattr(exc.resp, "status", None)
            raise ProviderError(f"Google Calendar rejected the event (status {status}): {exc}") from exc
        except (GoogleAuthError, OSError) as exc:
            raise ProviderError(f"Google Calendar request failed: {exc}") from exc

        event_id = created.get("id")
        logger.info("Created calendar event %s", event_id)
        return CalendarSubmission(provider_event_id=event_id, join_link=created.get("hangoutLink"))
