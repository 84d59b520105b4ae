from fastapi import APIRouter, Depends

from booking.dependencies.services import get_booking_orchestrator
from booking.routers.errors import http_error
from booking.schemas.appointment import (
    AppointmentRecord,
    BookingRequest,
    BookingResponse,
    SlotListRequest,
    SlotListResponse,
    StatusUpdateRequest,
)
from booking.services import BookingOrchestrator
from booking.services.exceptions import ServiceError

router = APIRouter()


@router.post("/book", response_model=BookingResponse, status_code=201)
async def book_appointment(
    req: BookingRequest,
    service: BookingOrchestrator = Depends(get_booking_orchestrator),
):
    try:
        return await service.book(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/slots", response_model=SlotListResponse)
async def list_slots(
    req: SlotListRequest,
    service: BookingOrchestrator = Depends(get_booking_orchestrator),
):
    try:
        return await service.list_slots(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/status", response_model=AppointmentRecord)
async def update_status(
    req: StatusUpdateRequest,
    service: BookingOrchestrator = Depends(get_booking_orchestrator),
):
    try:
        return await service.update_status(req)
    except ServiceError as exc:
        raise http_error(exc) from exc
