"""
Availability Index

Groups a day's appointments into per-resource busy intervals so that the
conflict checker can test a candidate booking against one resource.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, DefaultDict, Dict, Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from booking.schemas.appointment import OWNER_RESOURCE, AppointmentRecord

# Used when neither the row nor the lookup knows the service duration.
FALLBACK_DURATION_MINUTES = 30

ServiceDurationLookup = Callable[[Optional[str]], Optional[int]]


@dataclass(frozen=True)
class BusyInterval:
    """Half-open ``[start, end)`` range during which a resource is occupied."""

    resource_ref: str
    start: datetime
    end: datetime


def resource_key(resource_ref: Optional[str]) -> str:
    """Map a missing staff assignment onto the owner sentinel."""
    return resource_ref or OWNER_RESOURCE


def day_bounds(
    target_date: date,
    tz: Union[str, ZoneInfo],
) -> Tuple[datetime, datetime]:
    """Return ``[00:00, 23:59:59.999999]`` of a local day as aware instants."""
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    start = datetime.combine(target_date, time.min, tzinfo=tz)
    end = datetime.combine(target_date, time.max, tzinfo=tz)
    return start, end


class AvailabilityIndex:
    """Busy intervals of one business day, keyed by resource."""

    def __init__(self, intervals: Optional[Dict[str, List[BusyInterval]]] = None) -> None:
        self._intervals: Dict[str, List[BusyInterval]] = {
            key: sorted(items, key=lambda item: item.start)
            for key, items in (intervals or {}).items()
        }

    @classmethod
    def build(
        cls,
        appointments: Iterable[AppointmentRecord],
        service_duration_lookup: Optional[ServiceDurationLookup] = None,
        *,
        default_duration: int = FALLBACK_DURATION_MINUTES,
    ) -> "AvailabilityIndex":
        """
        Build the index from a day's appointment rows.

        Cancelled appointments free their slot and are skipped. The duration
        comes from the row when attached, otherwise from
        ``service_duration_lookup(service_id)``, otherwise ``default_duration``.
        """
        grouped: DefaultDict[str, List[BusyInterval]] = defaultdict(list)
        for appointment in appointments:
            if not appointment.status.occupies_time:
                continue

            duration = appointment.duration_minutes
            if duration is None and service_duration_lookup is not None:
                duration = service_duration_lookup(appointment.service_id)
            if not duration:
                duration = default_duration

            key = resource_key(appointment.resource_ref)
            start = appointment.start_time
            grouped[key].append(
                BusyInterval(
                    resource_ref=key,
                    start=start,
                    end=start + timedelta(minutes=duration),
                )
            )
        return cls(dict(grouped))

    def intervals_for(self, resource_ref: Optional[str]) -> List[BusyInterval]:
        """Busy intervals of a resource; unknown resources are fully available."""
        return list(self._intervals.get(resource_key(resource_ref), []))

    def resources(self) -> List[str]:
        return sorted(self._intervals)

    def __len__(self) -> int:
        return sum(len(items) for items in self._intervals.values())
