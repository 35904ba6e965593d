"""Google Calendar v3 and OAuth2 REST client."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Final

import httpx

from yardly.errors import UpstreamFailure
from yardly.integrations.base import HttpIntegration

logger = logging.getLogger(__name__)

AUTHORIZATION_URL: Final = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL: Final = "https://oauth2.googleapis.com/token"
CALENDAR_API_URL: Final = "https://www.googleapis.com/calendar/v3"
SCOPES: Final = (
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
)
BOOKING_ID_PROPERTY: Final = "yardlyBookingId"


@dataclass(frozen=True, slots=True)
class GoogleTokens:
    access_token: str
    refresh_token: str | None
    expires_at: datetime | None


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    """Existing calendar event as seen by booking dedup."""

    id: str | None
    description: str
    booking_id: str | None = None


def _parse_tokens(payload: dict[str, Any]) -> GoogleTokens:
    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise UpstreamFailure("Calendar provider returned no access token")
    expires_in = payload.get("expires_in")
    expires_at = (
        datetime.now(UTC) + timedelta(seconds=int(expires_in))
        if isinstance(expires_in, (int, float))
        else None
    )
    refresh_token = payload.get("refresh_token")
    return GoogleTokens(
        access_token=access_token,
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        expires_at=expires_at,
    )


def _parse_entry(item: dict[str, Any]) -> CalendarEntry:
    private = (item.get("extendedProperties") or {}).get("private") or {}
    booking_id = private.get(BOOKING_ID_PROPERTY)
    return CalendarEntry(
        id=item.get("id"),
        description=str(item.get("description") or ""),
        booking_id=str(booking_id) if booking_id else None,
    )


class GoogleCalendarClient(HttpIntegration):
    """Connect a host's Google Calendar and manage booking events on it."""

    service_name = "calendar provider"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        calendar_id: str = "primary",
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._events_url = f"{CALENDAR_API_URL}/calendars/{calendar_id}/events"

    def build_authorization_url(self, state: str) -> str:
        """Consent screen URL requesting offline calendar access."""

        url = httpx.URL(
            AUTHORIZATION_URL,
            params={
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "access_type": "offline",
                "prompt": "consent",
                "scope": " ".join(SCOPES),
                "state": state,
            },
        )
        return str(url)

    async def exchange_code(self, code: str) -> GoogleTokens:
        payload = await self._request_json(
            "POST",
            TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": self._redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        return _parse_tokens(payload)

    async def refresh_access_token(self, refresh_token: str) -> GoogleTokens:
        payload = await self._request_json(
            "POST",
            TOKEN_URL,
            data={
                "refresh_token": refresh_token,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "grant_type": "refresh_token",
            },
        )
        tokens = _parse_tokens(payload)
        if tokens.refresh_token is None:
            tokens = GoogleTokens(
                access_token=tokens.access_token,
                refresh_token=refresh_token,
                expires_at=tokens.expires_at,
            )
        return tokens

    async def list_events(
        self, access_token: str, *, time_min: datetime, query: str
    ) -> list[CalendarEntry]:
        """List upcoming events matching a free-text query, all pages."""

        entries: list[CalendarEntry] = []
        page_token: str | None = None
        while True:
            params: dict[str, str] = {
                "timeMin": time_min.isoformat(),
                "q": query,
                "singleEvents": "true",
            }
            if page_token:
                params["pageToken"] = page_token

            payload = await self._request_json(
                "GET",
                self._events_url,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            entries.extend(
                _parse_entry(item)
                for item in payload.get("items") or []
                if isinstance(item, dict)
            )

            page_token = payload.get("nextPageToken")
            if not page_token:
                return entries

    async def insert_event(
        self, access_token: str, event: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            self._events_url,
            json=event,
            headers={"Authorization": f"Bearer {access_token}"},
        )
