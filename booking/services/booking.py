from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Awaitable, Callable, List, TypeVar
from zoneinfo import ZoneInfo

from booking.clients.backend import BackendClient
from booking.config import Settings, get_settings
from booking.scheduling import (
    AvailabilityIndex,
    SlotGenerator,
    is_available,
    order_resources,
    resolve_any_resource,
    slot_start,
)
from booking.schemas.appointment import (
    ANY_RESOURCE,
    OWNER_RESOURCE,
    AppointmentRecord,
    BookingRequest,
    BookingResponse,
    SlotListRequest,
    SlotListResponse,
    SlotSummary,
    StatusUpdateRequest,
)
from booking.schemas.business import ResourceListResponse, ResourceSummary, ServiceSummary
from booking.schemas.client import ClientRecord
from booking.services.exceptions import (
    AppointmentNotFound,
    BookingError,
    ConflictDetected,
    InvalidPhone,
    InvalidResource,
    InvalidService,
    LookupFailure,
    NoResourceAvailable,
    PastTime,
    PersistenceFailure,
)
from booking.services.mock_store import get_mock_store
from booking.services.phone import normalize_phone
from booking.services.remote_store import RemoteSchedulingStore
from booking.services.store import SchedulingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

OWNER_DISPLAY_NAME = "Owner"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingOrchestrator:
    """Runs booking attempts and slot listings against a scheduling store.

    ``book`` walks Validating -> ResolvingClient -> ResolvingResource ->
    CheckingConflict -> Persisting and either returns the committed
    appointment or raises a :class:`BookingError` naming the rejection.
    Availability is always recomputed from freshly fetched appointments;
    nothing computed for an earlier slot listing is trusted.
    """

    def __init__(
        self,
        client: BackendClient,
        *,
        store: SchedulingStore | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._clock = clock or _utc_now
        self._tz = ZoneInfo(self._settings.business_timezone)
        if store is None:
            if self._client.use_mock_data:
                store = get_mock_store().scheduling
            else:
                store = RemoteSchedulingStore(
                    client,
                    timezone=self._settings.business_timezone,
                    default_duration=self._settings.default_service_duration,
                )
        self._store = store

    async def book(self, request: BookingRequest) -> BookingResponse:
        logger.info(
            "Booking %s for business %s on %s %s (resource=%s)",
            request.service_id,
            request.business_id,
            request.date,
            request.time,
            request.resource,
        )
        await self._simulate_latency()

        # Validating
        service = await self._require_service(request.business_id, request.service_id)
        start = slot_start(request.date, request.time, self._tz)
        if start <= self._clock():
            raise PastTime(f"{start.isoformat()} is not in the future")
        phone = normalize_phone(request.customer_phone)
        if not phone:
            raise InvalidPhone("Customer phone number has no digits")
        candidates = await self._resource_candidates(request.business_id)
        self._require_resource(request.resource, candidates)

        # ResolvingClient
        client = await self._resolve_client(request.business_id, request.customer_name, phone)

        # ResolvingResource
        if request.resource == ANY_RESOURCE:
            index = await self._load_index(request.business_id, request.date)
            resource_ref = resolve_any_resource(
                start, service.duration_minutes, candidates, index, self._clock()
            )
            if resource_ref is None:
                logger.info("No resource free at %s for business %s", start, request.business_id)
                raise NoResourceAvailable(
                    "Every resource is busy at the requested time",
                    suggested_slots=self._suggest_slots(
                        request.date, start, service, candidates, index
                    ),
                )
        else:
            resource_ref = request.resource

        # CheckingConflict
        index = await self._load_index(request.business_id, request.date)
        now = self._clock()
        if start <= now:
            raise PastTime(f"{start.isoformat()} is no longer in the future")
        if not is_available(start, service.duration_minutes, resource_ref, index, now):
            logger.info("Conflict for resource %s at %s", resource_ref, start)
            raise ConflictDetected(
                "The requested time overlaps an existing appointment",
                suggested_slots=self._suggest_slots(
                    request.date, start, service, [resource_ref], index
                ),
            )

        # Persisting
        appointment = await self._write(
            self._store.create_appointment(
                request.business_id,
                client.client_id,
                service.service_id,
                resource_ref,
                start,
            ),
            "appointment",
        )
        logger.info(
            "Booked appointment %s for client %s on resource %s",
            appointment.appointment_id,
            client.client_id,
            resource_ref,
        )
        return BookingResponse(
            status="confirmed",
            appointment_id=appointment.appointment_id,
            client_id=client.client_id,
            resource_ref=resource_ref,
            start_time=start,
        )

    async def list_slots(self, request: SlotListRequest) -> SlotListResponse:
        logger.info(
            "Listing slots for %s at business %s on %s",
            request.service_id,
            request.business_id,
            request.date,
        )
        await self._simulate_latency()

        service = await self._require_service(request.business_id, request.service_id)
        candidates = await self._resource_candidates(request.business_id)
        self._require_resource(request.resource, candidates)
        if request.resource != ANY_RESOURCE:
            candidates = [request.resource]

        step = request.step_minutes or (
            self._settings.widget_slot_step_minutes
            if request.source == "widget"
            else self._settings.slot_step_minutes
        )
        generator = self._generator(step)
        index = await self._load_index(request.business_id, request.date)
        now = self._clock()

        items: List[SlotSummary] = []
        for slot in generator:
            start = slot_start(request.date, slot, self._tz)
            resource_ref = resolve_any_resource(
                start, service.duration_minutes, candidates, index, now
            )
            items.append(
                SlotSummary(
                    time=slot,
                    start_time=start,
                    available=resource_ref is not None,
                    resource_ref=resource_ref,
                )
            )

        return SlotListResponse(
            business_id=request.business_id,
            service_id=request.service_id,
            date=request.date,
            resource=request.resource,
            step_minutes=step,
            items=items,
        )

    async def update_status(self, request: StatusUpdateRequest) -> AppointmentRecord:
        logger.info(
            "Setting appointment %s to %s", request.appointment_id, request.status.value
        )
        await self._simulate_latency()

        existing = await self._read(
            self._store.get_appointment(request.appointment_id), "appointment"
        )
        if existing is None or existing.business_id != request.business_id:
            raise AppointmentNotFound(f"Appointment '{request.appointment_id}' not found")

        updated = await self._write(
            self._store.update_appointment_status(request.appointment_id, request.status),
            "appointment status",
        )
        if updated is None:
            raise AppointmentNotFound(f"Appointment '{request.appointment_id}' not found")
        return updated

    async def list_resources(self, business_id: str) -> ResourceListResponse:
        await self._simulate_latency()
        staff = await self._read(self._store.list_staff(business_id), "staff members")
        names = {member.staff_id: member.name for member in staff}
        items = [
            ResourceSummary(
                resource_ref=ref,
                name=OWNER_DISPLAY_NAME if ref == OWNER_RESOURCE else names[ref],
                kind="owner" if ref == OWNER_RESOURCE else "staff",
            )
            for ref in order_resources(staff)
        ]
        return ResourceListResponse(business_id=business_id, items=items)

    async def _simulate_latency(self) -> None:
        if self._client.use_mock_data:
            await self._client.simulate_latency()

    def _generator(self, step_minutes: int) -> SlotGenerator:
        return SlotGenerator(
            self._settings.opening_hour,
            self._settings.closing_hour,
            step_minutes,
        )

    async def _require_service(self, business_id: str, service_id: str) -> ServiceSummary:
        service = await self._read(self._store.get_service(service_id), "service")
        if service is None or service.business_id != business_id:
            raise InvalidService(f"Service '{service_id}' not found for business {business_id}")
        return service

    async def _resource_candidates(self, business_id: str) -> List[str]:
        staff = await self._read(self._store.list_staff(business_id), "staff members")
        return order_resources(staff)

    @staticmethod
    def _require_resource(resource: str, candidates: List[str]) -> None:
        if resource != ANY_RESOURCE and resource not in candidates:
            raise InvalidResource(f"Resource '{resource}' does not belong to this business")

    async def _resolve_client(self, business_id: str, name: str, phone: str) -> ClientRecord:
        client = await self._read(
            self._store.find_client_by_phone(business_id, phone), "client"
        )
        if client is not None:
            return client
        client = await self._write(
            self._store.create_client(business_id, name, phone), "client"
        )
        logger.info("Created client %s for business %s", client.client_id, business_id)
        return client

    async def _load_index(self, business_id: str, day: date) -> AvailabilityIndex:
        appointments = await self._read(
            self._store.list_appointments_for_day(business_id, day), "appointments"
        )
        return AvailabilityIndex.build(
            appointments, default_duration=self._settings.default_service_duration
        )

    def _suggest_slots(
        self,
        day: date,
        requested_start: datetime,
        service: ServiceSummary,
        candidates: List[str],
        index: AvailabilityIndex,
    ) -> List[str]:
        limit = self._settings.suggestion_limit
        suggestions: List[str] = []
        if limit <= 0:
            return suggestions
        now = self._clock()
        for slot in self._generator(self._settings.slot_step_minutes):
            start = slot_start(day, slot, self._tz)
            if start <= requested_start:
                continue
            if resolve_any_resource(start, service.duration_minutes, candidates, index, now):
                suggestions.append(slot)
                if len(suggestions) >= limit:
                    break
        return suggestions

    async def _read(self, call: Awaitable[T], what: str) -> T:
        try:
            return await call
        except BookingError:
            raise
        except Exception as exc:
            logger.exception("Failed to load %s", what)
            raise LookupFailure(f"Failed to load {what}", cause=exc) from exc

    async def _write(self, call: Awaitable[T], what: str) -> T:
        try:
            return await call
        except BookingError:
            raise
        except Exception as exc:
            logger.exception("Failed to persist %s", what)
            raise PersistenceFailure(f"Failed to persist {what}", cause=exc) from exc
