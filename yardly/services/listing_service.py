"""Business logic for yard browsing, search and maintenance."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.repositories import (
    fetch_booked_yard_ids,
    fetch_yard_by_id,
    fetch_yards,
    update_yard_coordinates,
)
from yardly.errors import NotFound, ValidationError
from yardly.integrations.geocoding import GeocodingClient
from yardly.models.yard import Yard
from yardly.services.search import SearchCriteria, filter_yards

logger = logging.getLogger(__name__)


def yard_to_dict(yard: Yard) -> dict[str, object]:
    return {
        "id": yard.id,
        "host_id": yard.host_id,
        "name": yard.name,
        "description": yard.description,
        "price": float(yard.price),
        "image_url": yard.image_url,
        "amenities": list(yard.amenities or []),
        "city": yard.city,
        "address": yard.address,
        "lat": float(yard.lat) if yard.lat is not None else None,
        "lng": float(yard.lng) if yard.lng is not None else None,
        "guest_limit": yard.guest_limit,
        "rating": float(yard.rating) if yard.rating is not None else None,
        "reviews": yard.reviews,
        "created_at": yard.created_at.isoformat() if yard.created_at else None,
    }


def yard_to_map_marker(yard: Yard) -> dict[str, object]:
    return {
        "id": yard.id,
        "name": yard.name,
        "price": float(yard.price),
        "image_url": yard.image_url,
        "lat": float(yard.lat) if yard.lat is not None else None,
        "lng": float(yard.lng) if yard.lng is not None else None,
    }


class ListingService:
    """Service layer for yard listing endpoints and MCP tools."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_yard(self, yard_id: int) -> dict[str, object]:
        yard = await fetch_yard_by_id(self._session, yard_id)
        if yard is None:
            raise NotFound("Yard not found")
        return yard_to_dict(yard)

    async def _matching_yards(
        self, criteria: SearchCriteria, *, with_coordinates: bool, limit: int | None
    ) -> list[Yard]:
        # Only the city narrows the query; the row cap applies after filtering.
        rows = await fetch_yards(
            self._session,
            city=criteria.city,
            with_coordinates=with_coordinates,
            limit=None,
        )

        unavailable: set[int] = set()
        check_in, check_out = criteria.check_in, criteria.check_out
        if criteria.has_date_range and check_in is not None and check_out is not None:
            unavailable = await fetch_booked_yard_ids(
                self._session, check_in, check_out
            )

        matches = filter_yards(rows, criteria, unavailable)
        return matches if limit is None else matches[:limit]

    async def search_yards(
        self, criteria: SearchCriteria, limit: int | None = None
    ) -> list[dict[str, object]]:
        """Search yards with optional filters; ``limit`` caps the matches."""

        yards = await self._matching_yards(
            criteria, with_coordinates=False, limit=limit
        )
        return [yard_to_dict(yard) for yard in yards]

    async def map_yards(
        self, criteria: SearchCriteria, limit: int | None = None
    ) -> list[dict[str, object]]:
        """Yards that can be placed on the map, as compact markers."""

        yards = await self._matching_yards(criteria, with_coordinates=True, limit=limit)
        return [yard_to_map_marker(yard) for yard in yards]

    async def update_coordinates(
        self,
        yard_id: int,
        *,
        lat: Decimal | None = None,
        lng: Decimal | None = None,
        address: str | None = None,
        geocoder: GeocodingClient | None = None,
    ) -> dict[str, object]:
        """Correct a yard's coordinates, geocoding its address when not given."""

        yard = await fetch_yard_by_id(self._session, yard_id)
        if yard is None:
            raise NotFound("Yard not found")

        if lat is None or lng is None:
            lookup_address = address or yard.address
            if not lookup_address:
                raise ValidationError("lat/lng or an address is required")
            if geocoder is None:
                raise ValidationError("Geocoding is unavailable; provide lat/lng")
            coordinates = await geocoder.geocode(lookup_address)
            if coordinates is None:
                raise NotFound(f"Address not found: {lookup_address}")
            lat, lng = coordinates.lat, coordinates.lng

        updated = await update_yard_coordinates(self._session, yard_id, lat, lng)
        if updated is None:
            raise NotFound("Yard not found")

        logger.info("Updated coordinates for yard %s to (%s, %s)", yard_id, lat, lng)
        return yard_to_dict(updated)
