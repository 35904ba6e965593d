"""Tests for booking price calculation."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from yardly.errors import InvalidDuration, ValidationError
from yardly.services.pricing import (
    billable_hours,
    calculate_booking_price,
    to_minor_units,
)

CHECK_IN = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)


def test_four_hour_booking_at_fifty_per_hour() -> None:
    quote = calculate_booking_price(50, CHECK_IN, CHECK_IN + timedelta(hours=4))

    assert quote.hours == 4
    assert quote.subtotal == Decimal("200")
    assert quote.service_fee == Decimal("20.00")
    assert quote.total == Decimal("220.00")
    assert quote.total_minor_units == 22000


def test_partial_hour_is_billed_as_a_full_hour() -> None:
    check_out = CHECK_IN + timedelta(hours=2, minutes=1)

    assert billable_hours(CHECK_IN, check_out) == 3
    assert calculate_booking_price(
        Decimal("40"), CHECK_IN, check_out
    ).subtotal == Decimal("120")


@pytest.mark.parametrize(
    ("rate", "hours"),
    [(Decimal("55"), 1), (Decimal("62.50"), 3), (Decimal("90"), 7)],
)
def test_total_is_rate_times_hours_plus_ten_percent(rate: Decimal, hours: int) -> None:
    quote = calculate_booking_price(rate, CHECK_IN, CHECK_IN + timedelta(hours=hours))

    assert quote.total == rate * hours * Decimal("1.10")
    assert quote.service_fee == quote.subtotal * Decimal("0.10")


@pytest.mark.parametrize("delta", [timedelta(0), timedelta(hours=-2)])
def test_non_positive_duration_is_rejected(delta: timedelta) -> None:
    with pytest.raises(InvalidDuration):
        calculate_booking_price(50, CHECK_IN, CHECK_IN + delta)


def test_invalid_duration_is_a_validation_error() -> None:
    with pytest.raises(ValidationError) as exc_info:
        calculate_booking_price(50, CHECK_IN, CHECK_IN)

    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("rate", [0, -10, "abc", "NaN"])
def test_non_positive_or_malformed_rate_is_rejected(rate: object) -> None:
    with pytest.raises(ValidationError):
        calculate_booking_price(rate, CHECK_IN, CHECK_IN + timedelta(hours=1))  # type: ignore[arg-type]


def test_minor_units_round_half_up() -> None:
    assert to_minor_units(Decimal("60.505")) == 6051
    assert to_minor_units(Decimal("60.504")) == 6050


def test_quote_to_dict_uses_plain_numbers() -> None:
    quote = calculate_booking_price(
        Decimal("75"), CHECK_IN, CHECK_IN + timedelta(hours=2)
    )

    assert quote.to_dict() == {
        "rate": 75.0,
        "hours": 2,
        "subtotal": 150.0,
        "service_fee": 15.0,
        "total": 165.0,
        "total_minor_units": 16500,
    }
