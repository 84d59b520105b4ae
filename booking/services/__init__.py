"""Service package public API definitions.

``booking.clients.backend`` imports ``booking.services.exceptions``; importing
the orchestrator eagerly here would pull the client back in and create a
circular import at start up, so the service classes are resolved lazily.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "BookingOrchestrator",
]

_SERVICE_MODULES = {
    "BookingOrchestrator": "booking",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .booking import BookingOrchestrator as BookingOrchestrator
