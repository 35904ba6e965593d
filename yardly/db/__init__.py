"""Database session and repository utilities."""

from yardly.db.session import get_db_session, get_engine, get_sessionmaker, session_context
from yardly.db.repositories import (
    fetch_yards,
    fetch_yard_by_id,
    fetch_yards_by_ids,
    update_yard_coordinates,
    insert_yards,
    fetch_booked_yard_ids,
    fetch_confirmed_bookings,
    insert_booking,
    upsert_favorite,
    fetch_favorites,
    delete_favorite,
    fetch_events,
    fetch_calendar_connection,
    save_calendar_connection,
)

__all__ = [
    "get_db_session",
    "get_engine",
    "get_sessionmaker",
    "session_context",
    "fetch_yards",
    "fetch_yard_by_id",
    "fetch_yards_by_ids",
    "update_yard_coordinates",
    "insert_yards",
    "fetch_booked_yard_ids",
    "fetch_confirmed_bookings",
    "insert_booking",
    "upsert_favorite",
    "fetch_favorites",
    "delete_favorite",
    "fetch_events",
    "fetch_calendar_connection",
    "save_calendar_connection",
]
