"""Repository helpers for yard, booking, favorite and event persistence."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.models.booking import BOOKING_STATUS_CONFIRMED, Booking
from yardly.models.calendar_connection import CalendarConnection
from yardly.models.event import Event
from yardly.models.favorite import Favorite
from yardly.models.yard import Yard


@dataclass(slots=True)
class YardInsert:
    """Payload used to insert yard records."""

    name: str
    description: str
    price: Decimal
    city: str
    guest_limit: str
    amenities: list[str]
    image_url: str | None = None
    address: str | None = None
    lat: Decimal | None = None
    lng: Decimal | None = None
    host_id: str | None = None
    rating: Decimal | None = None
    reviews: int = 0


@dataclass(slots=True)
class BookingInsert:
    """Payload used to record a paid booking."""

    yard_id: int
    guest_id: str | None
    guest_name: str
    guests: int
    check_in: datetime
    check_out: datetime
    total_amount: int | None
    checkout_session_id: str | None
    status: str = BOOKING_STATUS_CONFIRMED


@dataclass(slots=True)
class CalendarTokens:
    """OAuth tokens granted for a user's Google Calendar."""

    user_id: str
    access_token: str
    refresh_token: str | None
    expires_at: datetime | None


async def fetch_yards(
    session: AsyncSession,
    *,
    city: str | None = None,
    host_id: str | None = None,
    with_coordinates: bool = False,
    limit: int | None = 200,
) -> list[Yard]:
    """Fetch yards newest first with optional filters; ``limit=None`` fetches all."""

    stmt = select(Yard).order_by(Yard.created_at.desc(), Yard.id.desc())

    if city:
        stmt = stmt.where(Yard.city.ilike(f"%{city}%"))

    if host_id:
        stmt = stmt.where(Yard.host_id == host_id)

    if with_coordinates:
        stmt = stmt.where(Yard.lat.is_not(None)).where(Yard.lng.is_not(None))

    if limit is not None:
        stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_yard_by_id(session: AsyncSession, yard_id: int) -> Yard | None:
    result = await session.execute(select(Yard).where(Yard.id == yard_id))
    return result.scalar_one_or_none()


async def fetch_yards_by_ids(session: AsyncSession, yard_ids: list[int]) -> list[Yard]:
    """Fetch yards by exact IDs.

    Preserves input order in the returned list.
    """
    if not yard_ids:
        return []

    result = await session.execute(select(Yard).where(Yard.id.in_(yard_ids)))
    yards = {yard.id: yard for yard in result.scalars().all()}

    return [yards[yid] for yid in yard_ids if yid in yards]


async def update_yard_coordinates(
    session: AsyncSession, yard_id: int, lat: Decimal, lng: Decimal
) -> Yard | None:
    """Set a yard's coordinates and return the updated row."""

    stmt = (
        update(Yard)
        .where(Yard.id == yard_id)
        .values(lat=lat, lng=lng)
        .returning(Yard)
    )
    result = await session.execute(stmt)
    yard = result.scalar_one_or_none()
    await session.commit()
    return yard


async def insert_yards(session: AsyncSession, rows: list[YardInsert]) -> int:
    """Insert yards whose name is not taken yet."""

    if not rows:
        return 0

    existing = set(
        (
            await session.execute(
                select(Yard.name).where(Yard.name.in_([row.name for row in rows]))
            )
        )
        .scalars()
        .all()
    )

    inserted = 0
    for row in rows:
        if row.name in existing:
            continue
        session.add(Yard(**asdict(row)))
        existing.add(row.name)
        inserted += 1

    await session.commit()
    return inserted


async def fetch_booked_yard_ids(
    session: AsyncSession, check_in: datetime, check_out: datetime
) -> set[int]:
    """Return yards with a confirmed booking overlapping ``[check_in, check_out)``."""

    stmt = (
        select(Booking.yard_id)
        .where(Booking.status == BOOKING_STATUS_CONFIRMED)
        .where(Booking.check_in < check_out)
        .where(Booking.check_out > check_in)
        .distinct()
    )
    result = await session.execute(stmt)
    return set(result.scalars().all())


async def fetch_confirmed_bookings(
    session: AsyncSession, yard_ids: list[int]
) -> list[Booking]:
    """Fetch confirmed bookings for the given yards ordered by check-in."""

    if not yard_ids:
        return []

    stmt = (
        select(Booking)
        .where(Booking.yard_id.in_(yard_ids))
        .where(Booking.status == BOOKING_STATUS_CONFIRMED)
        .order_by(Booking.check_in.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_booking_by_checkout_session(
    session: AsyncSession, checkout_session_id: str
) -> Booking | None:
    stmt = select(Booking).where(Booking.checkout_session_id == checkout_session_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def insert_booking(session: AsyncSession, row: BookingInsert) -> Booking:
    """Insert a booking once per checkout session and return the stored row."""

    if row.checkout_session_id:
        existing = await fetch_booking_by_checkout_session(
            session, row.checkout_session_id
        )
        if existing is not None:
            return existing

    booking = Booking(**asdict(row))
    session.add(booking)
    await session.commit()
    await session.refresh(booking)
    return booking


async def upsert_favorite(session: AsyncSession, user_id: str, yard_id: int) -> bool:
    """Insert a favorite with ON CONFLICT DO NOTHING; return whether it was new."""

    dialect_name = session.get_bind().dialect.name

    if dialect_name == "postgresql":
        stmt = (
            pg_insert(Favorite)
            .values(user_id=user_id, yard_id=yard_id)
            .on_conflict_do_nothing(constraint="uq_favorites_user_yard")
            .returning(Favorite.id)
        )
        result = await session.execute(stmt)
        inserted_ids = result.scalars().all()
        await session.commit()
        return bool(inserted_ids)

    exists_stmt = (
        select(Favorite.id)
        .where(Favorite.user_id == user_id)
        .where(Favorite.yard_id == yard_id)
    )
    if (await session.execute(exists_stmt)).scalar_one_or_none() is not None:
        return False
    session.add(Favorite(user_id=user_id, yard_id=yard_id))
    await session.commit()
    return True


async def fetch_favorites(
    session: AsyncSession,
    *,
    user_id: str | None = None,
    yard_id: int | None = None,
    limit: int = 200,
) -> list[Favorite]:
    """Fetch favorite records with optional filters."""

    stmt = select(Favorite).order_by(Favorite.created_at.desc())

    if user_id:
        stmt = stmt.where(Favorite.user_id == user_id)

    if yard_id:
        stmt = stmt.where(Favorite.yard_id == yard_id)

    stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def delete_favorite(session: AsyncSession, user_id: str, yard_id: int) -> bool:
    """Delete a favorite record; return whether a row was removed."""

    stmt = (
        delete(Favorite)
        .where(Favorite.user_id == user_id)
        .where(Favorite.yard_id == yard_id)
        .returning(Favorite.id)
    )
    result = await session.execute(stmt)
    deleted_ids = result.scalars().all()
    await session.commit()
    return bool(deleted_ids)


async def fetch_events(session: AsyncSession, *, limit: int = 200) -> list[Event]:
    stmt = select(Event).order_by(Event.date.asc(), Event.id.asc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_event_by_id(session: AsyncSession, event_id: int) -> Event | None:
    result = await session.execute(select(Event).where(Event.id == event_id))
    return result.scalar_one_or_none()


async def fetch_calendar_connection(
    session: AsyncSession, user_id: str
) -> CalendarConnection | None:
    stmt = select(CalendarConnection).where(CalendarConnection.user_id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def save_calendar_connection(
    session: AsyncSession, tokens: CalendarTokens
) -> None:
    """Store tokens for a user, replacing any previous grant."""

    values = asdict(tokens)
    dialect_name = session.get_bind().dialect.name

    if dialect_name == "postgresql":
        stmt = pg_insert(CalendarConnection).values(values)
        update_values = {
            "access_token": stmt.excluded.access_token,
            "expires_at": stmt.excluded.expires_at,
        }
        # Google only returns a refresh token on the first consent.
        if tokens.refresh_token:
            update_values["refresh_token"] = stmt.excluded.refresh_token
        stmt = stmt.on_conflict_do_update(
            constraint="uq_calendar_connections_user", set_=update_values
        )
        await session.execute(stmt)
        await session.commit()
        return

    existing = await fetch_calendar_connection(session, tokens.user_id)
    if existing is None:
        session.add(CalendarConnection(**values))
    else:
        existing.access_token = tokens.access_token
        existing.expires_at = tokens.expires_at
        if tokens.refresh_token:
            existing.refresh_token = tokens.refresh_token
    await session.commit()
