"""JSON API router for yards, events and favorites."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.session import get_db_session
from yardly.integrations.geocoding import GeocodingClient
from yardly.integrations.identity import AuthenticatedUser
from yardly.services import EventService, FavoriteService, ListingService
from yardly.services.search import SearchCriteria
from yardly.web.dependencies import get_current_user, get_geocoding_client
from yardly.web.schemas import CoordinatesUpdateRequest, FavoriteToggleRequest

router = APIRouter(prefix="/api", tags=["yards"])


def _query_params(request: Request) -> dict[str, object]:
    params: dict[str, object] = dict(request.query_params)
    amenities = request.query_params.getlist("amenities")
    if len(amenities) > 1:
        params["amenities"] = amenities
    return params


def _search_response(
    yards: list[dict[str, object]], criteria: SearchCriteria
) -> dict[str, object]:
    return {
        "yards": yards,
        "total": len(yards),
        "filters": {
            "city": criteria.city,
            "guests": criteria.guests,
            "check_in": criteria.check_in.isoformat() if criteria.check_in else None,
            "check_out": criteria.check_out.isoformat() if criteria.check_out else None,
            "amenities": list(criteria.amenities),
            "price_range": criteria.price_range,
        },
    }


@router.get("/yards")
async def list_yards(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """List yards newest first, filtered by any criteria in the query string."""

    criteria = SearchCriteria.from_params(_query_params(request))
    yards = await ListingService(session).search_yards(criteria)
    return _search_response(yards, criteria)


@router.post("/yards/search")
async def search_yards(
    body: dict[str, Any] = Body(default_factory=dict),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    criteria = SearchCriteria.from_params(body)
    yards = await ListingService(session).search_yards(criteria)
    return _search_response(yards, criteria)


@router.get("/yards/map")
async def yard_map(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """Map markers for yards with coordinates, optionally inside bounds."""

    criteria = SearchCriteria.from_params(_query_params(request))
    markers = await ListingService(session).map_yards(criteria)
    return {"yards": markers, "total": len(markers)}


@router.get("/yards/{yard_id}")
async def get_yard(
    yard_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await ListingService(session).get_yard(yard_id)


@router.patch(
    "/yards/{yard_id}/coordinates", dependencies=[Depends(get_current_user)]
)
async def update_yard_coordinates(
    yard_id: int,
    payload: CoordinatesUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
) -> dict[str, object]:
    """Correct a yard's coordinates from explicit values or its address."""

    yard = await ListingService(session).update_coordinates(
        yard_id,
        lat=payload.lat,
        lng=payload.lng,
        address=payload.address,
        geocoder=geocoder,
    )
    return {"message": "Yard coordinates updated successfully", "yard": yard}


@router.get("/events")
async def list_events(
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await EventService(session).list_events()


@router.get("/events/{event_id}")
async def get_event(
    event_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await EventService(session).get_event(event_id)


@router.get("/favorites")
async def list_favorites(
    session: AsyncSession = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    return await FavoriteService(session).list_favorites(user.id)


@router.post("/favorites")
async def toggle_favorite(
    payload: FavoriteToggleRequest,
    session: AsyncSession = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    """Toggle yard favorite status for the signed-in user."""

    return await FavoriteService(session).toggle_favorite(user.id, payload.yard_id)
