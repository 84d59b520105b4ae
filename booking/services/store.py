"""Contract between the booking service and the data store it books against."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Protocol

from booking.schemas.appointment import AppointmentRecord, AppointmentStatus
from booking.schemas.business import ServiceSummary, StaffMember
from booking.schemas.client import ClientRecord


class SchedulingStore(Protocol):
    """Each call is one request/response against the backend.

    Implementations raise :class:`~booking.services.exceptions.ServiceError`
    (or a subclass) when the backend call fails.
    """

    async def get_service(self, service_id: str) -> Optional[ServiceSummary]:
        ...

    async def list_staff(self, business_id: str) -> List[StaffMember]:
        ...

    async def list_appointments_for_day(
        self, business_id: str, day: date
    ) -> List[AppointmentRecord]:
        """Appointments starting within the local day, durations attached."""
        ...

    async def find_client_by_phone(
        self, business_id: str, phone: str
    ) -> Optional[ClientRecord]:
        ...

    async def create_client(self, business_id: str, name: str, phone: str) -> ClientRecord:
        ...

    async def create_appointment(
        self,
        business_id: str,
        client_id: str,
        service_id: str,
        resource_ref: str,
        start_time: datetime,
    ) -> AppointmentRecord:
        ...

    async def get_appointment(self, appointment_id: str) -> Optional[AppointmentRecord]:
        ...

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[AppointmentRecord]:
        ...
