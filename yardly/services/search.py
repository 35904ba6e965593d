"""Search criteria parsing and yard filtering."""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Final

from yardly.models.yard import Yard, guest_limit_capacity

PRICE_RANGE_UNDER_100: Final = "under-100"
PRICE_RANGE_100_TO_200: Final = "100-200"
PRICE_RANGE_200_PLUS: Final = "200-plus"
PRICE_RANGES: Final = (PRICE_RANGE_UNDER_100, PRICE_RANGE_100_TO_200, PRICE_RANGE_200_PLUS)

_LEADING_NUMBER = re.compile(r"\d+")
_MAX_GUEST_DIGITS: Final = 6

YardPredicate = Callable[[Yard], bool]


@dataclass(frozen=True, slots=True)
class MapBounds:
    """Visible map rectangle in degrees."""

    north: Decimal
    south: Decimal
    east: Decimal
    west: Decimal

    def contains(self, lat: Decimal, lng: Decimal) -> bool:
        if not self.south <= lat <= self.north:
            return False
        if self.west <= self.east:
            return self.west <= lng <= self.east
        # box crosses the antimeridian
        return lng >= self.west or lng <= self.east


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Request-scoped yard search filters; ``None``/empty means no filter."""

    city: str | None = None
    guests: int | None = None
    check_in: datetime | None = None
    check_out: datetime | None = None
    amenities: tuple[str, ...] = field(default_factory=tuple)
    price_range: str | None = None
    bounds: MapBounds | None = None

    @property
    def has_date_range(self) -> bool:
        return (
            self.check_in is not None
            and self.check_out is not None
            and self.check_out > self.check_in
        )

    @property
    def is_empty(self) -> bool:
        return (
            not self.city
            and not self.guests
            and not self.has_date_range
            and not self.amenities
            and self.price_range is None
            and self.bounds is None
        )

    @classmethod
    def from_params(cls, params: Mapping[str, object]) -> "SearchCriteria":
        """Build criteria from a query string or JSON body.

        Parsing is tolerant: anything malformed is treated as absent.
        """

        return cls(
            city=_parse_text(params.get("city")),
            guests=_parse_guests(params.get("guests")),
            check_in=parse_datetime(_first(params, "check_in", "checkIn")),
            check_out=parse_datetime(_first(params, "check_out", "checkOut")),
            amenities=_parse_amenities(params.get("amenities")),
            price_range=_parse_price_range(
                _first(params, "price_range", "priceRange")
            ),
            bounds=_parse_bounds(params),
        )


def _first(params: Mapping[str, object], *keys: str) -> object | None:
    for key in keys:
        value = params.get(key)
        if value not in (None, ""):
            return value
    return None


def _parse_text(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_guests(value: object | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value >= 1 else None
    # accepts "12" as well as tier labels such as "Up to 15 Guests"
    match = _LEADING_NUMBER.search(str(value))
    if match is None or len(match.group()) > _MAX_GUEST_DIGITS:
        return None
    guests = int(match.group())
    return guests if guests > 0 else None


def parse_datetime(value: object | None) -> datetime | None:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_amenities(value: object | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        raw_items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        raw_items = value
    else:
        return ()

    amenities: list[str] = []
    for raw_item in raw_items:
        amenity = str(raw_item).strip()
        if amenity and amenity not in amenities:
            amenities.append(amenity)
    return tuple(amenities)


def _parse_price_range(value: object | None) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip().lower()
    return normalized if normalized in PRICE_RANGES else None


def _parse_decimal(value: object | None) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def _parse_bounds(params: Mapping[str, object]) -> MapBounds | None:
    edges = {
        edge: _parse_decimal(params.get(edge))
        for edge in ("north", "south", "east", "west")
    }
    if any(value is None for value in edges.values()):
        return None
    return MapBounds(**edges)  # type: ignore[arg-type]


def price_in_range(price: Decimal, price_range: str | None) -> bool:
    """Match a price against a range tier; unknown or missing tiers match all."""

    if price_range == PRICE_RANGE_UNDER_100:
        return price < 100
    if price_range == PRICE_RANGE_100_TO_200:
        return 100 <= price <= 200
    if price_range == PRICE_RANGE_200_PLUS:
        return price > 200
    return True


def build_yard_predicate(
    criteria: SearchCriteria, unavailable_yard_ids: Iterable[int] = ()
) -> YardPredicate:
    """Build a predicate selecting yards that satisfy every given criterion.

    ``unavailable_yard_ids`` lists yards already booked during the requested
    date range; it is ignored when the criteria carry no valid range.
    """

    city = criteria.city.lower() if criteria.city else None
    required_amenities = frozenset(criteria.amenities)
    booked = frozenset(unavailable_yard_ids) if criteria.has_date_range else frozenset()

    def predicate(yard: Yard) -> bool:
        if city and city not in (yard.city or "").lower():
            return False
        if criteria.guests and guest_limit_capacity(yard.guest_limit) < criteria.guests:
            return False
        if required_amenities and not required_amenities.issubset(yard.amenities or ()):
            return False
        if not price_in_range(Decimal(yard.price), criteria.price_range):
            return False
        if yard.id in booked:
            return False
        if criteria.bounds is not None:
            if yard.lat is None or yard.lng is None:
                return False
            if not criteria.bounds.contains(Decimal(yard.lat), Decimal(yard.lng)):
                return False
        return True

    return predicate


def filter_yards(
    yards: Iterable[Yard],
    criteria: SearchCriteria,
    unavailable_yard_ids: Iterable[int] = (),
) -> list[Yard]:
    """Apply the criteria to ``yards``, preserving their order."""

    predicate = build_yard_predicate(criteria, unavailable_yard_ids)
    return [yard for yard in yards if predicate(yard)]
