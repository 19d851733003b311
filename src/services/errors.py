from __future__ import annotations


class BookingError(Exception):
    """Base class for failures surfaced by the booking workflow."""

    kind = "BookingError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(BookingError):
    kind = "NotFound"


class CredentialMissing(BookingError):
    kind = "CredentialMissing"


class ProviderError(BookingError):
    kind = "ProviderError"


class PersistenceError(BookingError):
    kind = "PersistenceError"
