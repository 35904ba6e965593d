import importlib
from collections.abc import AsyncIterator, Iterator
from typing import Any, cast

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.session import get_db_session
from yardly.errors import NotFound, ValidationError
from yardly.integrations.identity import AuthenticatedUser
from yardly.main import app
from yardly.services.search import SearchCriteria
from yardly.web.dependencies import (
    get_calendar_client,
    get_current_user,
    get_http_client,
    get_payment_client,
)

web_router_module = importlib.import_module("yardly.web.router")
booking_router_module = importlib.import_module("yardly.web.booking_router")

GUEST = AuthenticatedUser(id="guest-1", display_name="Dana")


async def _override_db_session() -> AsyncIterator[AsyncSession]:
    yield cast(AsyncSession, object())


def _offline_http_client() -> httpx.AsyncClient:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no outbound request expected")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def override_dependencies() -> Iterator[None]:
    app.dependency_overrides[get_db_session] = _override_db_session
    app.dependency_overrides[get_http_client] = _offline_http_client
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(override_dependencies: None) -> None:
    _ = override_dependencies
    app.dependency_overrides[get_current_user] = lambda: GUEST


@pytest.fixture
async def web_client(override_dependencies: None) -> AsyncIterator[AsyncClient]:
    _ = override_dependencies
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as client:
        yield client


@pytest.mark.anyio
async def test_health_reports_status(web_client: AsyncClient) -> None:
    response = await web_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert "timestamp" in payload


@pytest.mark.anyio
async def test_list_yards_parses_query_criteria(
    monkeypatch: pytest.MonkeyPatch, web_client: AsyncClient
) -> None:
    seen: list[SearchCriteria] = []

    class FakeListingService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def search_yards(
            self, criteria: SearchCriteria, limit: int = 200
        ) -> list[dict[str, object]]:
            seen.append(criteria)
            return [{"id": 1, "name": "Santa Monica Garden"}]

    monkeypatch.setattr(web_router_module, "ListingService", FakeListingService)

    response = await web_client.get(
        "/api/yards",
        params=[
            ("city", "Santa"),
            ("guests", "12"),
            ("amenities", "Pool"),
            ("amenities", "Shade"),
            ("priceRange", "under-100"),
        ],
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 1
    assert payload["filters"]["city"] == "Santa"
    assert payload["filters"]["guests"] == 12
    assert payload["filters"]["amenities"] == ["Pool", "Shade"]
    assert seen[0].price_range == "under-100"


@pytest.mark.anyio
async def test_search_accepts_json_body(
    monkeypatch: pytest.MonkeyPatch, web_client: AsyncClient
) -> None:
    class FakeListingService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def search_yards(
            self, criteria: SearchCriteria, limit: int = 200
        ) -> list[dict[str, object]]:
            return [] if criteria.guests == 30 else [{"id": 1}]

    monkeypatch.setattr(web_router_module, "ListingService", FakeListingService)

    response = await web_client.post("/api/yards/search", json={"guests": 30})

    assert response.status_code == 200
    assert response.json()["yards"] == []


@pytest.mark.anyio
async def test_unknown_yard_returns_404(
    monkeypatch: pytest.MonkeyPatch, web_client: AsyncClient
) -> None:
    class FakeListingService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def get_yard(self, yard_id: int) -> dict[str, object]:
            raise NotFound("Yard not found")

    monkeypatch.setattr(web_router_module, "ListingService", FakeListingService)

    response = await web_client.get("/api/yards/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Yard not found"}


@pytest.mark.anyio
@pytest.mark.parametrize("authorization", [None, "Basic abc", "Bearer token-1"])
async def test_favorites_require_a_session(
    web_client: AsyncClient, authorization: str | None
) -> None:
    headers = {"Authorization": authorization} if authorization else {}

    response = await web_client.post(
        "/api/favorites", json={"yardId": 1}, headers=headers
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.anyio
async def test_toggle_favorite_for_signed_in_user(
    monkeypatch: pytest.MonkeyPatch, signed_in: None, web_client: AsyncClient
) -> None:
    _ = signed_in

    class FakeFavoriteService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def toggle_favorite(self, user_id: str, yard_id: int) -> dict[str, object]:
            return {"user_id": user_id, "yard_id": yard_id, "is_favorite": True}

    monkeypatch.setattr(web_router_module, "FavoriteService", FakeFavoriteService)

    response = await web_client.post("/api/favorites", json={"yard_id": 3})

    assert response.status_code == 200
    assert response.json() == {
        "user_id": "guest-1",
        "yard_id": 3,
        "is_favorite": True,
    }


@pytest.mark.anyio
async def test_quote_rejects_reversed_dates(web_client: AsyncClient) -> None:
    response = await web_client.post(
        "/api/bookings/quote",
        json={
            "yardId": 1,
            "checkIn": "2026-06-01T14:00:00Z",
            "checkOut": "2026-06-01T10:00:00Z",
            "guests": 2,
        },
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


@pytest.mark.anyio
async def test_create_checkout_session_returns_session(
    monkeypatch: pytest.MonkeyPatch, signed_in: None, web_client: AsyncClient
) -> None:
    _ = signed_in
    calls: list[dict[str, Any]] = []

    class FakeBookingService:
        def __init__(self, _session: AsyncSession, _settings: object) -> None:
            self._session = _session

        async def create_checkout(
            self, payments: object, user: AuthenticatedUser, **kwargs: Any
        ) -> dict[str, object]:
            calls.append({"user": user, **kwargs})
            return {"session_id": "cs_test_1", "url": "https://checkout/cs_test_1"}

    monkeypatch.setattr(booking_router_module, "BookingService", FakeBookingService)
    app.dependency_overrides[get_payment_client] = lambda: object()

    response = await web_client.post(
        "/api/create-checkout-session",
        json={
            "yardId": 7,
            "checkIn": "2026-06-01T10:00:00",
            "checkOut": "2026-06-01T14:00:00",
            "guests": 4,
        },
    )

    assert response.status_code == 200
    assert response.json()["session_id"] == "cs_test_1"
    assert calls[0]["user"] == GUEST
    assert calls[0]["yard_id"] == 7
    assert calls[0]["check_in"].tzinfo is not None


@pytest.mark.anyio
async def test_calendar_sync_without_connection_returns_400(
    monkeypatch: pytest.MonkeyPatch, signed_in: None, web_client: AsyncClient
) -> None:
    _ = signed_in

    class FakeCalendarSyncService:
        def __init__(self, *_args: object, **_kwargs: object) -> None:
            pass

        async def sync(self, user: AuthenticatedUser) -> dict[str, object]:
            raise ValidationError("Google Calendar not connected")

    monkeypatch.setattr(
        booking_router_module, "CalendarSyncService", FakeCalendarSyncService
    )
    app.dependency_overrides[get_calendar_client] = lambda: object()

    response = await web_client.post("/api/calendar/sync")

    assert response.status_code == 400
    assert response.json() == {"error": "Google Calendar not connected"}


@pytest.mark.anyio
async def test_events_listing(
    monkeypatch: pytest.MonkeyPatch, web_client: AsyncClient
) -> None:
    class FakeEventService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def list_events(self) -> list[dict[str, object]]:
            return [{"id": 1, "title": "Backyard Movie Night"}]

    monkeypatch.setattr(web_router_module, "EventService", FakeEventService)

    response = await web_client.get("/api/events")

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "title": "Backyard Movie Night"}]


@pytest.mark.anyio
async def test_search_ignores_an_overflowing_guest_count(
    monkeypatch: pytest.MonkeyPatch, web_client: AsyncClient
) -> None:
    seen: list[SearchCriteria] = []

    class FakeListingService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def search_yards(
            self, criteria: SearchCriteria, limit: int | None = None
        ) -> list[dict[str, object]]:
            seen.append(criteria)
            return []

    monkeypatch.setattr(web_router_module, "ListingService", FakeListingService)

    response = await web_client.post(
        "/api/yards/search",
        content=b'{"guests": 1e999}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json()["filters"]["guests"] is None
    assert seen[0].guests is None
