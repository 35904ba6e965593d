"""Google Calendar connection and booking sync for hosts."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any, Final

from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.repositories import (
    CalendarTokens,
    fetch_calendar_connection,
    fetch_confirmed_bookings,
    fetch_yards,
    save_calendar_connection,
)
from yardly.errors import UpstreamFailure, ValidationError
from yardly.integrations.google_calendar import (
    BOOKING_ID_PROPERTY,
    CalendarEntry,
    GoogleCalendarClient,
    GoogleTokens,
)
from yardly.integrations.identity import AuthenticatedUser
from yardly.models.booking import Booking

logger = logging.getLogger(__name__)

BOOKING_ID_PREFIX: Final = "Booking ID: "
EVENT_SUMMARY_PREFIX: Final = "Yardly Booking:"
TOKEN_EXPIRY_MARGIN: Final = timedelta(seconds=60)


def extract_booking_id(description: str) -> str | None:
    """Return the identifier written after ``Booking ID: `` in free text."""

    _, found, remainder = description.partition(BOOKING_ID_PREFIX)
    if not found:
        return None
    token = remainder.split(maxsplit=1)
    return token[0] if token else None


def booking_ids_in_calendar(entries: Iterable[CalendarEntry]) -> set[str]:
    """Booking identifiers already present in a calendar.

    The structured key wins; the description is read for events that
    predate it.
    """

    booking_ids: set[str] = set()
    for entry in entries:
        if entry.booking_id:
            booking_ids.add(entry.booking_id)
        described = extract_booking_id(entry.description)
        if described:
            booking_ids.add(described)
    return booking_ids


def select_new_bookings(
    entries: Iterable[CalendarEntry], bookings: Iterable[Booking]
) -> list[Booking]:
    known = booking_ids_in_calendar(entries)
    return [booking for booking in bookings if str(booking.id) not in known]


def build_calendar_event(
    booking: Booking, yard_name: str, time_zone: str
) -> dict[str, Any]:
    return {
        "summary": f"{EVENT_SUMMARY_PREFIX} {yard_name}",
        "description": (
            f"{BOOKING_ID_PREFIX}{booking.id}\n"
            f"Guest: {booking.guest_name}\n"
            f"Number of guests: {booking.guests}"
        ),
        "start": {"dateTime": booking.check_in.isoformat(), "timeZone": time_zone},
        "end": {"dateTime": booking.check_out.isoformat(), "timeZone": time_zone},
        "reminders": {"useDefault": True},
        "extendedProperties": {"private": {BOOKING_ID_PROPERTY: str(booking.id)}},
    }


class CalendarSyncService:
    """Service layer for calendar connection and sync endpoints."""

    def __init__(
        self,
        session: AsyncSession,
        calendar: GoogleCalendarClient,
        *,
        time_zone: str = "America/Los_Angeles",
    ) -> None:
        self._session = session
        self._calendar = calendar
        self._time_zone = time_zone

    def authorization_url(self) -> dict[str, str]:
        state = secrets.token_hex(32)
        return {"url": self._calendar.build_authorization_url(state), "state": state}

    async def connect(self, user: AuthenticatedUser, code: str) -> dict[str, object]:
        tokens = await self._calendar.exchange_code(code)
        await self._store(user.id, tokens)
        logger.info("Connected Google Calendar for %s", user.id)
        return {"success": True}

    async def is_connected(self, user: AuthenticatedUser) -> bool:
        return await fetch_calendar_connection(self._session, user.id) is not None

    async def _store(self, user_id: str, tokens: GoogleTokens) -> None:
        await save_calendar_connection(
            self._session,
            CalendarTokens(
                user_id=user_id,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                expires_at=tokens.expires_at,
            ),
        )

    async def _access_token(self, user_id: str) -> str:
        connection = await fetch_calendar_connection(self._session, user_id)
        if connection is None:
            raise ValidationError("Google Calendar not connected")

        expires_at = connection.expires_at
        if (
            expires_at is not None
            and expires_at <= datetime.now(UTC) + TOKEN_EXPIRY_MARGIN
            and connection.refresh_token
        ):
            tokens = await self._calendar.refresh_access_token(connection.refresh_token)
            await self._store(user_id, tokens)
            return tokens.access_token

        return connection.access_token

    async def sync(self, user: AuthenticatedUser) -> dict[str, object]:
        """Insert the host's upcoming confirmed bookings missing from the calendar.

        Inserts are independent: a failed one is logged and skipped.
        """

        access_token = await self._access_token(user.id)
        now = datetime.now(UTC)

        yards = await fetch_yards(self._session, host_id=user.id, limit=None)
        yard_names = {yard.id: yard.name for yard in yards}
        bookings = [
            booking
            for booking in await fetch_confirmed_bookings(
                self._session, list(yard_names)
            )
            if booking.check_out > now
        ]

        entries = await self._calendar.list_events(
            access_token, time_min=now, query=EVENT_SUMMARY_PREFIX
        )
        new_bookings = select_new_bookings(entries, bookings)

        added_events: list[dict[str, object]] = []
        failed = 0
        for booking in new_bookings:
            event = build_calendar_event(
                booking, yard_names.get(booking.yard_id, "Yard"), self._time_zone
            )
            try:
                created = await self._calendar.insert_event(access_token, event)
            except UpstreamFailure as e:
                failed += 1
                logger.error("Error adding event for booking %s: %s", booking.id, e)
                continue
            added_events.append(
                {
                    "id": created.get("id"),
                    "html_link": created.get("htmlLink"),
                    "booking_id": booking.id,
                }
            )

        logger.info(
            "Calendar sync for %s: %s added, %s failed, %s already present",
            user.id,
            len(added_events),
            failed,
            len(bookings) - len(new_bookings),
        )
        return {
            "success": True,
            "message": f"Added {len(added_events)} events to Google Calendar",
            "added_count": len(added_events),
            "failed_count": failed,
            "skipped_count": len(bookings) - len(new_bookings),
            "added_events": added_events,
        }
