from fastapi import APIRouter, Depends

from booking.dependencies.services import get_booking_orchestrator
from booking.routers.errors import http_error
from booking.schemas.business import ResourceListResponse
from booking.services import BookingOrchestrator
from booking.services.exceptions import ServiceError

router = APIRouter()


@router.get("/{business_id}/resources", response_model=ResourceListResponse)
async def list_resources(
    business_id: str,
    service: BookingOrchestrator = Depends(get_booking_orchestrator),
):
    try:
        return await service.list_resources(business_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
