from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from booking.clients.backend import BackendClient
from booking.config import Settings, get_settings
from booking.services import BookingOrchestrator


@lru_cache(maxsize=1)
def get_backend_client_cached() -> BackendClient:
    settings = get_settings()
    return BackendClient(
        settings.backend_base_url,
        timeout=settings.backend_timeout,
        use_mock_data=settings.use_mock_data,
        api_key=settings.backend_api_key,
    )


def get_backend_client(settings: Settings = Depends(get_settings)) -> BackendClient:
    return get_backend_client_cached()


def get_booking_orchestrator(
    client: BackendClient = Depends(get_backend_client),
    settings: Settings = Depends(get_settings),
) -> BookingOrchestrator:
    return BookingOrchestrator(client, settings=settings)
