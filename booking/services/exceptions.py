from __future__ import annotations

from typing import List, Optional


class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the hosted backend returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class BookingError(ServiceError):
    """A booking attempt ended in ``Rejected``; ``code`` names the reason."""

    code = "booking_error"


class InvalidService(BookingError):
    code = "invalid_service"


class InvalidPhone(BookingError):
    code = "invalid_phone"


class PastTime(BookingError):
    code = "past_time"


class InvalidResource(BookingError):
    code = "invalid_resource"


class AppointmentNotFound(BookingError):
    code = "appointment_not_found"


class SlotUnavailable(BookingError):
    """Recoverable outcome: the caller should offer another time."""

    code = "slot_unavailable"

    def __init__(
        self,
        message: str,
        *,
        suggested_slots: Optional[List[str]] = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.suggested_slots = list(suggested_slots or [])


class NoResourceAvailable(SlotUnavailable):
    code = "no_resource_available"


class ConflictDetected(SlotUnavailable):
    code = "conflict_detected"


class LookupFailure(BookingError):
    """Wraps a failed read against the backend."""

    code = "lookup_failure"


class PersistenceFailure(BookingError):
    """Wraps a failed write against the backend."""

    code = "persistence_failure"
