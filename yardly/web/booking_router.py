"""JSON API router for checkout, bookings and host calendar sync."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.config import Settings, get_settings
from yardly.db.session import get_db_session
from yardly.integrations.google_calendar import GoogleCalendarClient
from yardly.integrations.identity import AuthenticatedUser
from yardly.integrations.stripe_checkout import StripeCheckoutClient
from yardly.services import BookingService, CalendarSyncService
from yardly.web.dependencies import (
    get_calendar_client,
    get_current_user,
    get_payment_client,
)
from yardly.web.schemas import (
    BookingRequest,
    CalendarCodeRequest,
    CheckoutConfirmRequest,
)

router = APIRouter(prefix="/api", tags=["bookings"])


def _calendar_service(
    session: AsyncSession, calendar: GoogleCalendarClient, settings: Settings
) -> CalendarSyncService:
    return CalendarSyncService(
        session, calendar, time_zone=settings.google_calendar_time_zone
    )


@router.post("/bookings/quote")
async def quote_booking(
    payload: BookingRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """Price a prospective booking without contacting the payment processor."""

    return await BookingService(session, settings).quote(
        payload.yard_id, payload.check_in, payload.check_out, payload.guests
    )


@router.post("/create-checkout-session")
async def create_checkout_session(
    payload: BookingRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    payments: StripeCheckoutClient = Depends(get_payment_client),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    return await BookingService(session, settings).create_checkout(
        payments,
        user,
        yard_id=payload.yard_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guests=payload.guests,
    )


@router.post("/bookings/confirm")
async def confirm_booking(
    payload: CheckoutConfirmRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    payments: StripeCheckoutClient = Depends(get_payment_client),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    """Record the booking behind a paid checkout session."""

    booking = await BookingService(session, settings).confirm_checkout(
        payments, user, payload.session_id
    )
    return {"booking": booking}


@router.get("/auth/google-calendar")
async def google_calendar_authorization_url(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    calendar: GoogleCalendarClient = Depends(get_calendar_client),
) -> dict[str, str]:
    return _calendar_service(session, calendar, settings).authorization_url()


@router.post("/auth/google-calendar")
async def connect_google_calendar(
    payload: CalendarCodeRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    calendar: GoogleCalendarClient = Depends(get_calendar_client),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    return await _calendar_service(session, calendar, settings).connect(
        user, payload.code
    )


@router.get("/auth/google-calendar/status")
async def google_calendar_status(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    calendar: GoogleCalendarClient = Depends(get_calendar_client),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, bool]:
    service = _calendar_service(session, calendar, settings)
    return {"is_connected": await service.is_connected(user)}


@router.post("/calendar/sync")
async def sync_calendar(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    calendar: GoogleCalendarClient = Depends(get_calendar_client),
    user: AuthenticatedUser = Depends(get_current_user),
) -> dict[str, object]:
    """Push the host's confirmed bookings to their Google Calendar."""

    return await _calendar_service(session, calendar, settings).sync(user)
