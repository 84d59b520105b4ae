from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from booking.config import get_settings
from booking.scheduling.availability import day_bounds
from booking.schemas.appointment import (
    OWNER_RESOURCE,
    AppointmentRecord,
    AppointmentStatus,
)
from booking.schemas.business import ServiceSummary, StaffMember
from booking.schemas.client import ClientRecord


class _BaseRepository:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def _next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter):05d}"


class MasterDataRepository:
    """Services and staff members per business."""

    def __init__(self, *, seed: bool = True) -> None:
        self._services: Dict[str, ServiceSummary] = {}
        self._staff: Dict[str, StaffMember] = {}
        if seed:
            self._seed_businesses()

    def _seed_businesses(self) -> None:
        kuafor_services = [
            ServiceSummary(
                service_id="SRV-101",
                business_id="BIZ-1001",
                name="Haircut",
                price_minor=25000,
                duration_minutes=30,
            ),
            ServiceSummary(
                service_id="SRV-102",
                business_id="BIZ-1001",
                name="Beard Trim",
                price_minor=12000,
                duration_minutes=15,
            ),
            ServiceSummary(
                service_id="SRV-103",
                business_id="BIZ-1001",
                name="Haircut & Beard",
                price_minor=32000,
                duration_minutes=45,
            ),
        ]
        kuafor_staff = [
            StaffMember(staff_id="STF-201", business_id="BIZ-1001", name="Mehmet"),
            StaffMember(staff_id="STF-202", business_id="BIZ-1001", name="Can"),
        ]
        for service in kuafor_services:
            self.add_service(service)
        for member in kuafor_staff:
            self.add_staff(member)

    def add_service(self, service: ServiceSummary) -> None:
        self._services[service.service_id] = service

    def add_staff(self, member: StaffMember) -> None:
        self._staff[member.staff_id] = member

    def get_service(self, service_id: str) -> Optional[ServiceSummary]:
        return self._services.get(service_id)

    def list_staff(self, business_id: str) -> List[StaffMember]:
        return [
            member
            for member in self._staff.values()
            if member.business_id == business_id
        ]

    def service_duration(self, service_id: Optional[str]) -> Optional[int]:
        service = self._services.get(service_id) if service_id else None
        return service.duration_minutes if service else None


class ClientRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__("CLI")
        self._clients: Dict[str, ClientRecord] = {}

    def find_by_phone(self, business_id: str, phone: str) -> Optional[ClientRecord]:
        for client in self._clients.values():
            if client.business_id == business_id and client.phone == phone:
                return client
        return None

    def create(self, business_id: str, name: str, phone: str) -> ClientRecord:
        client = ClientRecord(
            client_id=self._next_id(),
            business_id=business_id,
            name=name,
            phone=phone,
        )
        self._clients[client.client_id] = client
        return client

    def list(self, business_id: Optional[str] = None) -> List[ClientRecord]:
        return [
            client
            for client in self._clients.values()
            if business_id is None or client.business_id == business_id
        ]


class AppointmentRepository(_BaseRepository):
    def __init__(self, master_data: MasterDataRepository) -> None:
        super().__init__("APT")
        self._master_data = master_data
        self._appointments: Dict[str, AppointmentRecord] = {}

    def create(
        self,
        *,
        business_id: str,
        client_id: Optional[str],
        service_id: Optional[str],
        resource_ref: str = OWNER_RESOURCE,
        start_time: datetime,
        status: AppointmentStatus = AppointmentStatus.BOOKED,
    ) -> AppointmentRecord:
        record = AppointmentRecord(
            appointment_id=self._next_id(),
            business_id=business_id,
            client_id=client_id,
            service_id=service_id,
            resource_ref=resource_ref,
            start_time=start_time,
            status=status,
        )
        self._appointments[record.appointment_id] = record
        return self._with_duration(record)

    def _with_duration(self, record: AppointmentRecord) -> AppointmentRecord:
        return record.model_copy(
            update={"duration_minutes": self._master_data.service_duration(record.service_id)}
        )

    def list_between(
        self, business_id: str, start: datetime, end: datetime
    ) -> List[AppointmentRecord]:
        matches = [
            self._with_duration(record)
            for record in self._appointments.values()
            if record.business_id == business_id and start <= record.start_time <= end
        ]
        matches.sort(key=lambda record: record.start_time)
        return matches

    def list(self, business_id: Optional[str] = None) -> List[AppointmentRecord]:
        return [
            self._with_duration(record)
            for record in self._appointments.values()
            if business_id is None or record.business_id == business_id
        ]

    def get(self, appointment_id: str) -> Optional[AppointmentRecord]:
        record = self._appointments.get(appointment_id)
        return self._with_duration(record) if record is not None else None

    def set_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[AppointmentRecord]:
        record = self._appointments.get(appointment_id)
        if record is None:
            return None
        updated = record.model_copy(update={"status": status})
        self._appointments[appointment_id] = updated
        return self._with_duration(updated)


class InMemorySchedulingStore:
    """SchedulingStore kept in process memory, used in mock mode and tests."""

    def __init__(
        self,
        master_data: MasterDataRepository,
        clients: ClientRepository,
        appointments: AppointmentRepository,
        *,
        timezone: str = "Europe/Istanbul",
    ) -> None:
        self.master_data = master_data
        self.clients = clients
        self.appointments = appointments
        self.timezone = ZoneInfo(timezone)

    async def get_service(self, service_id: str) -> Optional[ServiceSummary]:
        return self.master_data.get_service(service_id)

    async def list_staff(self, business_id: str) -> List[StaffMember]:
        return self.master_data.list_staff(business_id)

    async def list_appointments_for_day(
        self, business_id: str, day: date
    ) -> List[AppointmentRecord]:
        start, end = day_bounds(day, self.timezone)
        return self.appointments.list_between(business_id, start, end)

    async def find_client_by_phone(
        self, business_id: str, phone: str
    ) -> Optional[ClientRecord]:
        return self.clients.find_by_phone(business_id, phone)

    async def create_client(self, business_id: str, name: str, phone: str) -> ClientRecord:
        return self.clients.create(business_id, name, phone)

    async def create_appointment(
        self,
        business_id: str,
        client_id: str,
        service_id: str,
        resource_ref: str,
        start_time: datetime,
    ) -> AppointmentRecord:
        return self.appointments.create(
            business_id=business_id,
            client_id=client_id,
            service_id=service_id,
            resource_ref=resource_ref,
            start_time=start_time,
        )

    async def get_appointment(self, appointment_id: str) -> Optional[AppointmentRecord]:
        return self.appointments.get(appointment_id)

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[AppointmentRecord]:
        return self.appointments.set_status(appointment_id, status)


@dataclass
class MockDataStore:
    master_data: MasterDataRepository
    clients: ClientRepository
    appointments: AppointmentRepository
    scheduling: InMemorySchedulingStore


_mock_store: Optional[MockDataStore] = None


def build_mock_store(*, seed: bool = True, timezone: str | None = None) -> MockDataStore:
    master_data = MasterDataRepository(seed=seed)
    clients = ClientRepository()
    appointments = AppointmentRepository(master_data)
    scheduling = InMemorySchedulingStore(
        master_data,
        clients,
        appointments,
        timezone=timezone or get_settings().business_timezone,
    )
    return MockDataStore(
        master_data=master_data,
        clients=clients,
        appointments=appointments,
        scheduling=scheduling,
    )


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = build_mock_store()
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
