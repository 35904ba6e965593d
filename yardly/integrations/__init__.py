"""Clients for hosted third-party services."""

from yardly.integrations.geocoding import Coordinates, GeocodingClient
from yardly.integrations.google_calendar import (
    CalendarEntry,
    GoogleCalendarClient,
    GoogleTokens,
)
from yardly.integrations.identity import AuthenticatedUser, IdentityClient
from yardly.integrations.stripe_checkout import CheckoutSession, StripeCheckoutClient

__all__ = [
    "AuthenticatedUser",
    "CalendarEntry",
    "CheckoutSession",
    "Coordinates",
    "GeocodingClient",
    "GoogleCalendarClient",
    "GoogleTokens",
    "IdentityClient",
    "StripeCheckoutClient",
]
