from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


class ServiceSummary(BaseModel):
    """A bookable service offered by a business."""

    service_id: str
    business_id: str
    name: str
    price_minor: int = Field(0, ge=0, description="Price in minor currency units")
    duration_minutes: int = Field(..., gt=0)


class StaffMember(BaseModel):
    staff_id: str
    business_id: str
    name: str


class ResourceSummary(BaseModel):
    resource_ref: str
    name: str
    kind: Literal["owner", "staff"]


class ResourceListResponse(BaseModel):
    business_id: str
    items: List[ResourceSummary]
