from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException

from booking.services.exceptions import (
    AppointmentNotFound,
    BookingError,
    InvalidPhone,
    InvalidResource,
    InvalidService,
    PastTime,
    ServiceError,
    SlotUnavailable,
)

_VALIDATION_ERRORS = (InvalidService, InvalidPhone, PastTime, InvalidResource)


def http_error(exc: ServiceError) -> HTTPException:
    """Translate a service failure into the HTTP response the caller sees."""
    detail: Dict[str, Any] = {
        "code": getattr(exc, "code", "service_error"),
        "message": str(exc),
    }
    if isinstance(exc, _VALIDATION_ERRORS):
        return HTTPException(status_code=422, detail=detail)
    if isinstance(exc, SlotUnavailable):
        detail["suggested_slots"] = exc.suggested_slots
        return HTTPException(status_code=409, detail=detail)
    if isinstance(exc, AppointmentNotFound):
        return HTTPException(status_code=404, detail=detail)
    if not isinstance(exc, BookingError):
        detail["code"] = "downstream_error"
    return HTTPException(status_code=502, detail=detail)
