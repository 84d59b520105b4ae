from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

OWNER_RESOURCE = "owner"
ANY_RESOURCE = "any"

_SLOT_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentStatus(str, Enum):
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def occupies_time(self) -> bool:
        return self is not AppointmentStatus.CANCELLED


class AppointmentRecord(BaseModel):
    appointment_id: str
    business_id: str
    client_id: Optional[str] = None
    service_id: Optional[str] = None
    resource_ref: str = OWNER_RESOURCE
    start_time: dt.datetime
    duration_minutes: Optional[int] = Field(None, gt=0)
    status: AppointmentStatus = AppointmentStatus.BOOKED


class BookingRequest(BaseModel):
    business_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    date: dt.date
    time: str = Field(..., pattern=_SLOT_PATTERN, description="Local start time, HH:MM")
    resource: str = Field(
        ANY_RESOURCE,
        min_length=1,
        description="'any', 'owner' or a staff member id",
    )
    customer_name: str = Field(..., min_length=1)
    customer_phone: str

    @field_validator("customer_name", mode="before")
    def _strip_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class BookingResponse(BaseModel):
    status: str
    appointment_id: str
    client_id: str
    resource_ref: str
    start_time: dt.datetime


class SlotListRequest(BaseModel):
    business_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    date: dt.date
    resource: str = Field(ANY_RESOURCE, min_length=1)
    step_minutes: Optional[int] = Field(None, gt=0, le=60)
    source: Literal["widget", "dashboard"] = "dashboard"

    @field_validator("step_minutes")
    def _divides_hour(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and 60 % value != 0:
            raise ValueError("step_minutes must divide 60 evenly")
        return value


class SlotSummary(BaseModel):
    time: str
    start_time: dt.datetime
    available: bool
    resource_ref: Optional[str] = None


class SlotListResponse(BaseModel):
    business_id: str
    service_id: str
    date: dt.date
    resource: str
    step_minutes: int
    items: List[SlotSummary]


class StatusUpdateRequest(BaseModel):
    business_id: str = Field(..., min_length=1)
    appointment_id: str = Field(..., min_length=1)
    status: AppointmentStatus
