"""
Scheduling core

Pure computations shared by the public booking widget and the dashboard
quick-add form:
- Slot generation (slots.py)
- Busy interval indexing (availability.py)
- Overlap detection and resource assignment (conflicts.py)
"""

from .availability import AvailabilityIndex, BusyInterval, day_bounds
from .conflicts import is_available, order_resources, overlaps, resolve_any_resource
from .slots import SlotGenerator, slot_start

__all__ = [
    "AvailabilityIndex",
    "BusyInterval",
    "SlotGenerator",
    "day_bounds",
    "is_available",
    "order_resources",
    "overlaps",
    "resolve_any_resource",
    "slot_start",
]
