"""Business logic for quoting, paying for and recording bookings."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from yardly.config import Settings
from yardly.db.repositories import (
    BookingInsert,
    fetch_booking_by_checkout_session,
    fetch_yard_by_id,
    insert_booking,
)
from yardly.errors import NotFound, ValidationError
from yardly.integrations.identity import AuthenticatedUser
from yardly.integrations.stripe_checkout import StripeCheckoutClient
from yardly.models.booking import Booking
from yardly.models.yard import Yard, guest_limit_capacity
from yardly.services.pricing import PriceQuote, calculate_booking_price
from yardly.services.search import parse_datetime

logger = logging.getLogger(__name__)

_DISPLAY_FORMAT = "%b %d, %Y %I:%M %p"


def booking_to_dict(booking: Booking) -> dict[str, object]:
    return {
        "id": booking.id,
        "yard_id": booking.yard_id,
        "guest_id": booking.guest_id,
        "guest_name": booking.guest_name,
        "guests": booking.guests,
        "check_in": booking.check_in.isoformat(),
        "check_out": booking.check_out.isoformat(),
        "status": booking.status,
        "total_amount": booking.total_amount,
        "checkout_session_id": booking.checkout_session_id,
    }


def _checkout_description(check_in: datetime, check_out: datetime, guests: int) -> str:
    return (
        f"Booking from {check_in.strftime(_DISPLAY_FORMAT)} "
        f"to {check_out.strftime(_DISPLAY_FORMAT)} for {guests} guests"
    )


class BookingService:
    """Service layer for quote, checkout and confirmation endpoints."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    async def _load_yard(self, yard_id: int) -> Yard:
        yard = await fetch_yard_by_id(self._session, yard_id)
        if yard is None:
            raise NotFound("Yard not found")
        return yard

    @staticmethod
    def _price(
        yard: Yard, check_in: datetime, check_out: datetime, guests: int
    ) -> PriceQuote:
        if guests < 1:
            raise ValidationError("At least one guest is required")
        capacity = guest_limit_capacity(yard.guest_limit)
        if guests > capacity:
            raise ValidationError(
                f"This yard allows up to {capacity} guests, got {guests}"
            )
        return calculate_booking_price(yard.price, check_in, check_out)

    async def quote(
        self, yard_id: int, check_in: datetime, check_out: datetime, guests: int
    ) -> dict[str, object]:
        yard = await self._load_yard(yard_id)
        quote = self._price(yard, check_in, check_out, guests)
        return {"yard_id": yard.id, "guests": guests, "quote": quote.to_dict()}

    async def create_checkout(
        self,
        payments: StripeCheckoutClient,
        user: AuthenticatedUser,
        *,
        yard_id: int,
        check_in: datetime,
        check_out: datetime,
        guests: int,
    ) -> dict[str, object]:
        """Price the booking with the yard's rate and open a hosted checkout."""

        yard = await self._load_yard(yard_id)
        quote = self._price(yard, check_in, check_out, guests)

        base_url = self._settings.public_base_url.rstrip("/")
        checkout = await payments.create_checkout_session(
            name=f"Yard Rental: {yard.name}",
            description=_checkout_description(check_in, check_out, guests),
            amount=quote.total_minor_units,
            currency=self._settings.stripe_currency,
            success_url=f"{base_url}/booking/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base_url}/yards/{yard.id}/book",
            metadata={
                "yard_id": str(yard.id),
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
                "guests": str(guests),
                "guest_id": user.id,
                "guest_name": user.display_name,
            },
        )

        return {
            "session_id": checkout.id,
            "url": checkout.url,
            "yard_id": yard.id,
            "quote": quote.to_dict(),
        }

    async def confirm_checkout(
        self,
        payments: StripeCheckoutClient,
        user: AuthenticatedUser,
        session_id: str,
    ) -> dict[str, object]:
        """Record the booking once the payment processor reports it paid."""

        existing = await fetch_booking_by_checkout_session(self._session, session_id)
        if existing is not None:
            return booking_to_dict(existing)

        checkout = await payments.retrieve_checkout_session(session_id)
        metadata = checkout.metadata
        if metadata.get("guest_id") and metadata["guest_id"] != user.id:
            raise NotFound("Checkout session not found")
        if not checkout.is_paid:
            raise ValidationError("Payment has not been completed")

        check_in = parse_datetime(metadata.get("check_in"))
        check_out = parse_datetime(metadata.get("check_out"))
        try:
            yard_id = int(metadata["yard_id"])
            guests = int(metadata["guests"])
        except (KeyError, ValueError) as e:
            raise ValidationError("Checkout session is missing booking details") from e
        if check_in is None or check_out is None:
            raise ValidationError("Checkout session is missing booking details")
        if check_out <= check_in:
            raise ValidationError("Check-out must be after check-in")

        booking = await insert_booking(
            self._session,
            BookingInsert(
                yard_id=yard_id,
                guest_id=user.id,
                guest_name=metadata.get("guest_name") or user.display_name,
                guests=guests,
                check_in=check_in,
                check_out=check_out,
                total_amount=checkout.amount_total,
                checkout_session_id=checkout.id,
            ),
        )
        logger.info("Confirmed booking %s for yard %s", booking.id, yard_id)
        return booking_to_dict(booking)
