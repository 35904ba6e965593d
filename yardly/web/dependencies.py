"""FastAPI dependencies for clients and the authenticated user."""

import logging

import httpx
from fastapi import Depends, Header, Request

from yardly.config import Settings, get_settings
from yardly.errors import Unauthenticated
from yardly.integrations.geocoding import GeocodingClient
from yardly.integrations.google_calendar import GoogleCalendarClient
from yardly.integrations.identity import AuthenticatedUser, IdentityClient
from yardly.integrations.stripe_checkout import StripeCheckoutClient

logger = logging.getLogger(__name__)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Process-wide outbound HTTP pool created in the app lifespan."""

    return request.app.state.http_client


def get_identity_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> IdentityClient:
    return IdentityClient(
        client,
        auth_url=settings.auth_url,
        anon_key=settings.auth_anon_key,
        timeout=settings.http_timeout_seconds,
    )


def get_payment_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> StripeCheckoutClient:
    return StripeCheckoutClient(
        client,
        secret_key=settings.stripe_secret_key,
        api_base_url=settings.stripe_api_base_url,
        timeout=settings.http_timeout_seconds,
    )


def get_calendar_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GoogleCalendarClient:
    return GoogleCalendarClient(
        client,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_uri=settings.google_redirect_uri,
        timeout=settings.http_timeout_seconds,
    )


def get_geocoding_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GeocodingClient:
    return GeocodingClient(
        client,
        api_key=settings.google_maps_api_key,
        timeout=settings.http_timeout_seconds,
    )


async def get_current_user(
    authorization: str | None = Header(default=None),
    identity: IdentityClient = Depends(get_identity_client),
) -> AuthenticatedUser:
    """Resolve ``Authorization: Bearer <token>`` to the signed-in user."""

    if not authorization:
        raise Unauthenticated("Unauthorized")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Unauthorized")

    user = await identity.get_user(token.strip())
    logger.debug("Authenticated request for user %s", user.id)
    return user
