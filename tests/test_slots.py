from datetime import date, datetime, timezone

import pytest

from booking.scheduling import SlotGenerator, slot_start
from booking.scheduling.slots import parse_slot


def test_nine_to_twenty_one_in_half_hours() -> None:
    slots = list(SlotGenerator(9, 21, 30))

    assert len(slots) == 24
    assert slots[0] == "09:00"
    assert slots[-1] == "20:30"
    assert slots == sorted(slots)
    assert len(set(slots)) == len(slots)


def test_defaults_cover_ten_to_twenty_in_quarter_hours() -> None:
    generator = SlotGenerator()
    slots = list(generator)

    assert len(slots) == len(generator) == 40
    assert slots[:3] == ["10:00", "10:15", "10:30"]
    assert slots[-1] == "19:45"


def test_generator_can_be_iterated_again() -> None:
    generator = SlotGenerator(9, 10, 20)

    assert list(generator) == ["09:00", "09:20", "09:40"]
    assert list(generator) == ["09:00", "09:20", "09:40"]


def test_closing_at_midnight_is_allowed() -> None:
    assert list(SlotGenerator(23, 24, 30)) == ["23:00", "23:30"]


@pytest.mark.parametrize(
    "opening, closing, step",
    [
        (20, 10, 15),
        (10, 10, 15),
        (-1, 10, 15),
        (10, 25, 15),
        (10, 20, 0),
        (10, 20, 25),
        (10, 20, 90),
    ],
)
def test_invalid_configuration_is_rejected(opening: int, closing: int, step: int) -> None:
    with pytest.raises(ValueError):
        SlotGenerator(opening, closing, step)


def test_slot_start_localizes_to_business_timezone() -> None:
    start = slot_start(date(2030, 5, 6), "14:30", "Europe/Istanbul")

    assert start.utcoffset().total_seconds() == 3 * 3600
    assert start.astimezone(timezone.utc) == datetime(2030, 5, 6, 11, 30, tzinfo=timezone.utc)


def test_parse_slot_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_slot("half past two")
