"""
Slot Generation

Generates the candidate start times of one business day. The generator is
pure: it knows nothing about bookings or the current time, callers filter
its output through the conflict checker.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterator, Union
from zoneinfo import ZoneInfo

DEFAULT_OPENING_HOUR = 10
DEFAULT_CLOSING_HOUR = 20
DEFAULT_STEP_MINUTES = 15
# Step used by the public booking widget.
WIDGET_STEP_MINUTES = 30


class SlotGenerator:
    """
    Ordered ``HH:MM`` slots from ``opening_hour:00`` up to, but excluding,
    ``closing_hour:00`` in ``step_minutes`` increments.

    Each iteration starts over, so one instance can be reused across requests.

    Example:
        >>> list(SlotGenerator(9, 11, 30))
        ['09:00', '09:30', '10:00', '10:30']
    """

    def __init__(
        self,
        opening_hour: int = DEFAULT_OPENING_HOUR,
        closing_hour: int = DEFAULT_CLOSING_HOUR,
        step_minutes: int = DEFAULT_STEP_MINUTES,
    ) -> None:
        if not 0 <= opening_hour < closing_hour <= 24:
            raise ValueError(
                f"Invalid business hours {opening_hour}-{closing_hour}: "
                "expected 0 <= opening < closing <= 24"
            )
        if step_minutes <= 0 or 60 % step_minutes != 0:
            raise ValueError(f"step_minutes must be a positive divisor of 60, got {step_minutes}")

        self.opening_hour = opening_hour
        self.closing_hour = closing_hour
        self.step_minutes = step_minutes

    def __iter__(self) -> Iterator[str]:
        start = self.opening_hour * 60
        end = self.closing_hour * 60
        for minute_of_day in range(start, end, self.step_minutes):
            hours, minutes = divmod(minute_of_day, 60)
            yield f"{hours:02d}:{minutes:02d}"

    def __len__(self) -> int:
        return (self.closing_hour - self.opening_hour) * 60 // self.step_minutes

    def __repr__(self) -> str:
        return (
            f"SlotGenerator(opening_hour={self.opening_hour}, "
            f"closing_hour={self.closing_hour}, step_minutes={self.step_minutes})"
        )


def parse_slot(slot: str) -> time:
    """Parse an ``HH:MM`` slot label into a ``datetime.time``."""
    try:
        hours_str, minutes_str = slot.split(":")
        return time(int(hours_str), int(minutes_str))
    except ValueError as exc:
        raise ValueError(f"Invalid slot '{slot}', expected HH:MM") from exc


def slot_start(
    target_date: date,
    slot: Union[str, time],
    tz: Union[str, ZoneInfo],
) -> datetime:
    """
    Combine a local calendar date and a slot into an aware instant.

    Args:
        target_date: local business date
        slot: ``HH:MM`` label or ``datetime.time``
        tz: IANA timezone name or ZoneInfo of the business

    Returns:
        datetime localized to the business timezone
    """
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    slot_time = parse_slot(slot) if isinstance(slot, str) else slot
    return datetime.combine(target_date, slot_time, tzinfo=tz)
