"""Booking price calculation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

from yardly.errors import InvalidDuration, ValidationError

SERVICE_FEE_RATE: Final = Decimal("0.10")
SECONDS_PER_HOUR: Final = 3600
MINOR_UNITS_PER_MAJOR: Final = 100


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Cost breakdown of a booking."""

    rate: Decimal
    hours: int
    subtotal: Decimal
    service_fee: Decimal
    total: Decimal

    @property
    def total_minor_units(self) -> int:
        return to_minor_units(self.total)

    def to_dict(self) -> dict[str, object]:
        return {
            "rate": float(self.rate),
            "hours": self.hours,
            "subtotal": float(self.subtotal),
            "service_fee": float(self.service_fee),
            "total": float(self.total),
            "total_minor_units": self.total_minor_units,
        }


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid hourly rate: {value!r}") from exc


def billable_hours(check_in: datetime, check_out: datetime) -> int:
    """Whole hours between two instants, rounding partial hours up."""

    seconds = (check_out - check_in).total_seconds()
    return math.ceil(seconds / SECONDS_PER_HOUR)


def calculate_booking_price(
    rate: Decimal | int | float | str, check_in: datetime, check_out: datetime
) -> PriceQuote:
    """Price a booking at ``rate`` per hour plus the service fee.

    Raises:
        ValidationError: the rate is not a positive number.
        InvalidDuration: check-out is not after check-in.
    """

    hourly_rate = _to_decimal(rate)
    if not hourly_rate.is_finite() or hourly_rate <= 0:
        raise ValidationError("Hourly rate must be a positive number")

    hours = billable_hours(check_in, check_out)
    if hours <= 0:
        raise InvalidDuration("Check-out must be after check-in")

    subtotal = hourly_rate * hours
    service_fee = subtotal * SERVICE_FEE_RATE
    return PriceQuote(
        rate=hourly_rate,
        hours=hours,
        subtotal=subtotal,
        service_fee=service_fee,
        total=subtotal + service_fee,
    )


def to_minor_units(amount: Decimal) -> int:
    """Express an amount in the smallest currency unit (e.g. cents)."""

    scaled = amount * MINOR_UNITS_PER_MAJOR
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
