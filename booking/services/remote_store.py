from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from booking.clients.backend import BackendClient
from booking.scheduling.availability import FALLBACK_DURATION_MINUTES, day_bounds, resource_key
from booking.schemas.appointment import OWNER_RESOURCE, AppointmentRecord, AppointmentStatus
from booking.schemas.business import ServiceSummary, StaffMember
from booking.schemas.client import ClientRecord
from booking.services.exceptions import ServiceError

logger = logging.getLogger(__name__)

_RETURN_REPRESENTATION = {"Prefer": "return=representation"}
_APPOINTMENT_COLUMNS = "id,profile_id,client_id,service_id,staff_member_id,start_time,status,services(duration)"


class RemoteSchedulingStore:
    """SchedulingStore backed by the hosted backend's REST tables.

    Rows are scoped by ``profile_id`` (the business). A ``NULL``
    ``staff_member_id`` means the appointment belongs to the owner.
    """

    def __init__(
        self,
        client: BackendClient,
        *,
        timezone: str = "Europe/Istanbul",
        rest_prefix: str = "/rest/v1",
        default_duration: int = FALLBACK_DURATION_MINUTES,
    ) -> None:
        self._client = client
        self._default_duration = default_duration
        self._timezone = ZoneInfo(timezone)
        self._prefix = rest_prefix.rstrip("/")

    def _path(self, table: str) -> str:
        return f"{self._prefix}/{table}"

    async def get_service(self, service_id: str) -> Optional[ServiceSummary]:
        rows = await self._client.get(
            self._path("services"),
            params={"id": f"eq.{service_id}", "select": "id,profile_id,name,price,duration"},
        )
        if not rows:
            return None
        return _service_from_row(rows[0], self._default_duration)

    async def list_staff(self, business_id: str) -> List[StaffMember]:
        rows = await self._client.get(
            self._path("staff_members"),
            params={"profile_id": f"eq.{business_id}", "select": "id,profile_id,name"},
        )
        return [
            StaffMember(
                staff_id=str(row["id"]),
                business_id=str(row["profile_id"]),
                name=row.get("name") or "",
            )
            for row in rows or []
        ]

    async def list_appointments_for_day(
        self, business_id: str, day: date
    ) -> List[AppointmentRecord]:
        start, end = day_bounds(day, self._timezone)
        rows = await self._client.get(
            self._path("appointments"),
            params=[
                ("select", _APPOINTMENT_COLUMNS),
                ("profile_id", f"eq.{business_id}"),
                ("start_time", f"gte.{start.isoformat()}"),
                ("start_time", f"lte.{end.isoformat()}"),
                ("order", "start_time.asc"),
            ],
        )
        return [_appointment_from_row(row) for row in rows or []]

    async def find_client_by_phone(
        self, business_id: str, phone: str
    ) -> Optional[ClientRecord]:
        rows = await self._client.get(
            self._path("clients"),
            params={
                "profile_id": f"eq.{business_id}",
                "phone": f"eq.{phone}",
                "select": "id,profile_id,name,phone",
                "limit": 1,
            },
        )
        if not rows:
            return None
        return _client_from_row(rows[0])

    async def create_client(self, business_id: str, name: str, phone: str) -> ClientRecord:
        rows = await self._client.post(
            self._path("clients"),
            {"name": name, "phone": phone, "profile_id": business_id},
            headers=_RETURN_REPRESENTATION,
        )
        return _client_from_row(_single(rows, "client"))

    async def create_appointment(
        self,
        business_id: str,
        client_id: str,
        service_id: str,
        resource_ref: str,
        start_time: datetime,
    ) -> AppointmentRecord:
        payload: Dict[str, Any] = {
            "client_id": client_id,
            "service_id": service_id,
            "start_time": start_time.isoformat(),
            "profile_id": business_id,
            "staff_member_id": _staff_column(resource_ref),
            "status": AppointmentStatus.BOOKED.value,
        }
        logger.info(
            "Inserting appointment for business %s on %s at %s",
            business_id,
            resource_ref,
            payload["start_time"],
        )
        rows = await self._client.post(
            self._path("appointments"),
            payload,
            params={"select": _APPOINTMENT_COLUMNS},
            headers=_RETURN_REPRESENTATION,
        )
        return _appointment_from_row(_single(rows, "appointment"))

    async def get_appointment(self, appointment_id: str) -> Optional[AppointmentRecord]:
        rows = await self._client.get(
            self._path("appointments"),
            params={"id": f"eq.{appointment_id}", "select": _APPOINTMENT_COLUMNS},
        )
        if not rows:
            return None
        return _appointment_from_row(rows[0])

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[AppointmentRecord]:
        rows = await self._client.patch(
            self._path("appointments"),
            {"status": status.value},
            params={"id": f"eq.{appointment_id}", "select": _APPOINTMENT_COLUMNS},
            headers=_RETURN_REPRESENTATION,
        )
        if not rows:
            return None
        return _appointment_from_row(rows[0])


def _single(rows: Any, entity: str) -> Dict[str, Any]:
    if isinstance(rows, list) and rows:
        return rows[0]
    if isinstance(rows, dict):
        return rows
    raise ServiceError(f"Backend did not return the created {entity}")


def _staff_column(resource_ref: str) -> Optional[str]:
    key = resource_key(resource_ref)
    return None if key == OWNER_RESOURCE else key


def _service_from_row(row: Dict[str, Any], default_duration: int) -> ServiceSummary:
    price = Decimal(str(row.get("price") or 0))
    return ServiceSummary(
        service_id=str(row["id"]),
        business_id=str(row.get("profile_id") or ""),
        name=row.get("name") or "",
        price_minor=int(price * 100),
        duration_minutes=int(row.get("duration") or 0) or default_duration,
    )


def _client_from_row(row: Dict[str, Any]) -> ClientRecord:
    return ClientRecord(
        client_id=str(row["id"]),
        business_id=str(row["profile_id"]),
        name=row.get("name") or "",
        phone=row.get("phone") or "",
    )


def _appointment_from_row(row: Dict[str, Any]) -> AppointmentRecord:
    service = row.get("services")
    if isinstance(service, list):
        service = service[0] if service else None
    duration = service.get("duration") if isinstance(service, dict) else None
    return AppointmentRecord(
        appointment_id=str(row["id"]),
        business_id=str(row["profile_id"]),
        client_id=_optional_str(row.get("client_id")),
        service_id=_optional_str(row.get("service_id")),
        resource_ref=resource_key(_optional_str(row.get("staff_member_id"))),
        start_time=row["start_time"],
        duration_minutes=duration or None,
        status=row.get("status") or AppointmentStatus.BOOKED,
    )


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None
