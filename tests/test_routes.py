from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from booking.config import Settings
from booking.dependencies.services import get_booking_orchestrator
from booking.main import app
from booking.scheduling import slot_start
from booking.services.booking import BookingOrchestrator
from booking.services.exceptions import DownstreamServiceError
from booking.services.mock_store import build_mock_store

TZ = "Europe/Istanbul"
DAY = date(2030, 5, 6)


class MockLatencyClient:
    def __init__(self) -> None:
        self.use_mock_data = True

    async def simulate_latency(self) -> None:
        return None


@pytest.fixture
def store():
    return build_mock_store(timezone=TZ)


@pytest.fixture
def client(store):
    orchestrator = BookingOrchestrator(
        MockLatencyClient(),
        store=store.scheduling,
        settings=Settings(business_timezone=TZ),
        clock=lambda: slot_start(DAY, "08:00", TZ),
    )
    app.dependency_overrides[get_booking_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def _booking(time: str, **overrides) -> dict:
    body = {
        "business_id": "BIZ-1001",
        "service_id": "SRV-101",
        "date": DAY.isoformat(),
        "time": time,
        "resource": "owner",
        "customer_name": "Ayse Yilmaz",
        "customer_phone": "0532 123 45 67",
    }
    body.update(overrides)
    return body


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_book_then_conflict(client: TestClient) -> None:
    first = client.post("/appointments/book", json=_booking("14:00"))
    assert first.status_code == 201
    assert first.json()["status"] == "confirmed"
    assert first.json()["resource_ref"] == "owner"

    second = client.post("/appointments/book", json=_booking("14:15"))
    assert second.status_code == 409
    detail = second.json()["detail"]
    assert detail["code"] == "conflict_detected"
    assert detail["suggested_slots"] == ["14:30", "14:45", "15:00"]


def test_past_time_is_unprocessable(client: TestClient) -> None:
    response = client.post("/appointments/book", json=_booking("07:45"))

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "past_time"


def test_malformed_time_is_rejected_by_schema(client: TestClient) -> None:
    response = client.post("/appointments/book", json=_booking("25:00"))

    assert response.status_code == 422


def test_slot_listing(client: TestClient) -> None:
    response = client.post(
        "/appointments/slots",
        json={
            "business_id": "BIZ-1001",
            "service_id": "SRV-101",
            "date": DAY.isoformat(),
            "source": "widget",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["step_minutes"] == 30
    assert len(body["items"]) == 20
    assert all(item["available"] for item in body["items"])


def test_slot_listing_rejects_step_not_dividing_an_hour(client: TestClient) -> None:
    response = client.post(
        "/appointments/slots",
        json={
            "business_id": "BIZ-1001",
            "service_id": "SRV-101",
            "date": DAY.isoformat(),
            "step_minutes": 25,
        },
    )

    assert response.status_code == 422


def test_status_update_round_trip(client: TestClient) -> None:
    booked = client.post("/appointments/book", json=_booking("16:00")).json()

    response = client.post(
        "/appointments/status",
        json={
            "business_id": "BIZ-1001",
            "appointment_id": booked["appointment_id"],
            "status": "completed",
        },
    )

    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_status_update_for_unknown_appointment(client: TestClient) -> None:
    response = client.post(
        "/appointments/status",
        json={"business_id": "BIZ-1001", "appointment_id": "APT-99999", "status": "cancelled"},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "appointment_not_found"


def test_resources_listing(client: TestClient) -> None:
    response = client.get("/businesses/BIZ-1001/resources")

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["items"]] == ["Owner", "Can", "Mehmet"]


def test_backend_outage_is_bad_gateway(client: TestClient, store, monkeypatch) -> None:
    monkeypatch.setattr(
        store.scheduling,
        "get_service",
        AsyncMock(side_effect=DownstreamServiceError("backend down", status_code=503)),
    )

    response = client.post("/appointments/book", json=_booking("14:00"))

    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "lookup_failure"
