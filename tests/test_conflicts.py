from datetime import date, timedelta

import pytest

from booking.scheduling import (
    AvailabilityIndex,
    is_available,
    order_resources,
    overlaps,
    resolve_any_resource,
    slot_start,
)
from booking.schemas.appointment import AppointmentRecord, AppointmentStatus
from booking.schemas.business import StaffMember

TZ = "Europe/Istanbul"
DAY = date(2030, 5, 6)
NOW = slot_start(DAY, "08:00", TZ)


def at(time: str):
    return slot_start(DAY, time, TZ)


def appointment(time: str, *, resource: str | None = "owner", duration: int | None = 30,
                status: AppointmentStatus = AppointmentStatus.BOOKED,
                service_id: str | None = "SRV-101") -> AppointmentRecord:
    return AppointmentRecord(
        appointment_id=f"APT-{time}-{resource}",
        business_id="BIZ-1001",
        service_id=service_id,
        resource_ref=resource if resource is not None else "",
        start_time=at(time),
        duration_minutes=duration,
        status=status,
    )


@pytest.mark.parametrize(
    "a, b",
    [
        (("10:00", "10:30"), ("10:15", "10:45")),
        (("10:00", "10:30"), ("10:30", "11:00")),
        (("10:00", "11:00"), ("10:15", "10:30")),
        (("09:00", "09:30"), ("12:00", "12:30")),
        (("10:00", "10:30"), ("10:00", "10:30")),
    ],
)
def test_overlap_is_symmetric(a, b) -> None:
    a_start, a_end = at(a[0]), at(a[1])
    b_start, b_end = at(b[0]), at(b[1])

    assert overlaps(a_start, a_end, b_start, b_end) == overlaps(b_start, b_end, a_start, a_end)


def test_touching_intervals_do_not_overlap() -> None:
    assert overlaps(at("10:00"), at("10:30"), at("10:30"), at("11:00")) is False


def test_touching_busy_interval_leaves_slot_available() -> None:
    index = AvailabilityIndex.build([appointment("10:30")])

    assert is_available(at("10:00"), 30, "owner", index, NOW) is True


def test_exact_duplicate_is_never_available() -> None:
    index = AvailabilityIndex.build([appointment("10:00")])

    assert is_available(at("10:00"), 30, "owner", index, NOW) is False


def test_partial_overlap_is_unavailable() -> None:
    index = AvailabilityIndex.build([appointment("10:00", duration=45)])

    assert is_available(at("10:30"), 30, "owner", index, NOW) is False
    assert is_available(at("10:45"), 30, "owner", index, NOW) is True


def test_start_at_or_before_now_is_unavailable() -> None:
    index = AvailabilityIndex.build([])

    assert is_available(NOW, 30, "owner", index, NOW) is False
    assert is_available(NOW - timedelta(minutes=1), 30, "owner", index, NOW) is False
    assert is_available(NOW + timedelta(minutes=1), 30, "owner", index, NOW) is True


def test_cancelled_appointments_do_not_occupy_time() -> None:
    index = AvailabilityIndex.build(
        [appointment("14:00", status=AppointmentStatus.CANCELLED)]
    )

    assert index.intervals_for("owner") == []
    assert is_available(at("14:00"), 30, "owner", index, NOW) is True


def test_missing_staff_assignment_belongs_to_owner() -> None:
    index = AvailabilityIndex.build([appointment("14:00", resource=None)])

    assert [busy.start for busy in index.intervals_for("owner")] == [at("14:00")]
    assert index.intervals_for(None) == index.intervals_for("owner")


def test_unknown_resource_is_fully_available() -> None:
    index = AvailabilityIndex.build([appointment("14:00")])

    assert index.intervals_for("STF-404") == []


def test_durations_fall_back_to_lookup_then_default() -> None:
    durations = {"SRV-LONG": 60}
    index = AvailabilityIndex.build(
        [
            appointment("10:00", duration=None, service_id="SRV-LONG"),
            appointment("12:00", duration=None, service_id="SRV-GONE"),
        ],
        durations.get,
    )

    ends = [busy.end for busy in index.intervals_for("owner")]
    assert ends == [at("11:00"), at("12:30")]


def test_intervals_are_grouped_and_sorted_per_resource() -> None:
    index = AvailabilityIndex.build(
        [
            appointment("15:00", resource="STF-201"),
            appointment("11:00", resource="STF-201"),
            appointment("11:00"),
        ]
    )

    assert index.resources() == ["STF-201", "owner"]
    assert [busy.start for busy in index.intervals_for("STF-201")] == [at("11:00"), at("15:00")]
    assert len(index) == 3


def test_any_resource_picks_first_free_staff_member_every_time() -> None:
    index = AvailabilityIndex.build([appointment("09:00")])
    candidates = ["owner", "STF-A", "STF-B"]

    chosen = {
        resolve_any_resource(at("09:00"), 30, candidates, index, NOW)
        for _ in range(50)
    }

    assert chosen == {"STF-A"}


def test_any_resource_returns_none_when_all_busy() -> None:
    index = AvailabilityIndex.build(
        [appointment("09:00"), appointment("09:00", resource="STF-A")]
    )

    assert resolve_any_resource(at("09:15"), 30, ["owner", "STF-A"], index, NOW) is None


def test_any_resource_prefers_owner_when_free() -> None:
    index = AvailabilityIndex.build([appointment("09:00", resource="STF-A")])

    assert resolve_any_resource(at("09:00"), 30, ["owner", "STF-A"], index, NOW) == "owner"


def test_resources_ordered_owner_then_staff_by_name() -> None:
    staff = [
        StaffMember(staff_id="STF-3", business_id="BIZ-1001", name="zeynep"),
        StaffMember(staff_id="STF-2", business_id="BIZ-1001", name="Ali"),
        StaffMember(staff_id="STF-1", business_id="BIZ-1001", name="Ali"),
    ]

    assert order_resources(staff) == ["owner", "STF-1", "STF-2", "STF-3"]
