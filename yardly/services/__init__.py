"""Business services."""

from yardly.services.booking_service import BookingService
from yardly.services.calendar_service import CalendarSyncService
from yardly.services.event_service import EventService
from yardly.services.favorite_service import FavoriteService
from yardly.services.listing_service import ListingService

__all__ = [
    "BookingService",
    "CalendarSyncService",
    "EventService",
    "FavoriteService",
    "ListingService",
]
