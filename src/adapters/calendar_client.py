from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build


@dataclass
class GoogleCalendarClient:
    """Calendar v3 client bound to one delegated access token.

    Use as a context manager; the underlying discovery resource is closed on
    exit so no authenticated client outlives a single submission.
    """

    access_token: str
    calendar_id: str = "primary"
    _service: Optional[Resource] = field(default=None, init=False, repr=False)

    def __enter__(self) -> "GoogleCalendarClient":
        credentials = Credentials(token=self.access_token)
        self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._service is not None:
            self._service.close()
            self._service = None

    def insert_event(self, body: Dict[str, Any], conference_data: bool = False) -> Dict[str, Any]:
        if self._service is None:
            raise RuntimeError("GoogleCalendarClient must be used inside a 'with' block")
        request = self._service.events().insert(
            calendarId=self.calendar_id,
            body=body,
            conferenceDataVersion=1 if conference_data else 0,
        )
        return request.execute()
