"""
Conflict Checker

Decides whether a candidate booking fits a resource's day and, for
"any resource" bookings, which resource takes it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from booking.schemas.appointment import OWNER_RESOURCE
from booking.schemas.business import StaffMember

from .availability import AvailabilityIndex


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test; ranges that only touch do not overlap."""
    return a_start < b_end and a_end > b_start


def is_available(
    candidate_start: datetime,
    duration_minutes: int,
    resource_ref: Optional[str],
    index: AvailabilityIndex,
    now: datetime,
) -> bool:
    """
    Whether ``[candidate_start, candidate_start + duration)`` is bookable on a resource.

    Starts at or before ``now`` are never bookable.
    """
    if candidate_start <= now:
        return False

    candidate_end = candidate_start + timedelta(minutes=duration_minutes)
    return not any(
        overlaps(candidate_start, candidate_end, busy.start, busy.end)
        for busy in index.intervals_for(resource_ref)
    )


def resolve_any_resource(
    candidate_start: datetime,
    duration_minutes: int,
    resource_candidates: Iterable[str],
    index: AvailabilityIndex,
    now: datetime,
) -> Optional[str]:
    """
    First resource in ``resource_candidates`` that can take the booking.

    The candidates are tried in the given order, so the same inputs always
    assign the same resource. Returns ``None`` when every resource is busy.
    """
    for resource_ref in resource_candidates:
        if is_available(candidate_start, duration_minutes, resource_ref, index, now):
            return resource_ref
    return None


def order_resources(staff: Iterable[StaffMember]) -> List[str]:
    """Owner first, then staff members by name (id breaks ties)."""
    ordered = sorted(staff, key=lambda member: (member.name.casefold(), member.staff_id))
    return [OWNER_RESOURCE] + [member.staff_id for member in ordered]
