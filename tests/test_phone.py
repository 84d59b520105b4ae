import pytest

from booking.services.phone import normalize_phone


def test_local_and_international_forms_normalize_alike() -> None:
    assert normalize_phone("0532 123 45 67") == "5321234567"
    assert normalize_phone("+90 532 123 45 67") == "5321234567"
    assert normalize_phone("(532) 123-45-67") == "5321234567"


@pytest.mark.parametrize("raw", ["", None, "n/a", "+ -"])
def test_numbers_without_digits_normalize_to_empty(raw) -> None:
    assert normalize_phone(raw) == ""


def test_unrecognised_lengths_keep_their_digits() -> None:
    assert normalize_phone("+44 20 7946 0958") == "442079460958"
    assert normalize_phone("12345") == "12345"
