"""SQLAlchemy ORM models."""

from yardly.models.booking import Booking
from yardly.models.calendar_connection import CalendarConnection
from yardly.models.event import Event
from yardly.models.favorite import Favorite
from yardly.models.yard import Yard

__all__ = ["Booking", "CalendarConnection", "Event", "Favorite", "Yard"]
