"""Tests for booking quotes, checkout and confirmation."""

import importlib
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any, cast

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.config import Settings
from yardly.db.repositories import BookingInsert
from yardly.errors import InvalidDuration, NotFound, ValidationError
from yardly.integrations.identity import AuthenticatedUser
from yardly.integrations.stripe_checkout import CheckoutSession, StripeCheckoutClient
from yardly.models.booking import Booking
from yardly.models.yard import Yard
from yardly.services.booking_service import BookingService

booking_service_module = importlib.import_module("yardly.services.booking_service")

GUEST = AuthenticatedUser(id="guest-1", display_name="Dana")
CHECK_IN = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)
CHECK_OUT = CHECK_IN + timedelta(hours=4)


class FakePayments:
    def __init__(self, session: CheckoutSession | None = None) -> None:
        self.created: list[dict[str, Any]] = []
        self.session = session

    async def create_checkout_session(self, **kwargs: Any) -> CheckoutSession:
        self.created.append(kwargs)
        return CheckoutSession(
            id="cs_test_1",
            url="https://checkout.example/cs_test_1",
            payment_status="unpaid",
            amount_total=kwargs["amount"],
            metadata=kwargs["metadata"],
        )

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        assert self.session is not None
        assert session_id == self.session.id
        return self.session


@pytest.fixture
def inserted(monkeypatch: pytest.MonkeyPatch) -> list[BookingInsert]:
    rows: list[BookingInsert] = []

    async def fake_fetch_yard_by_id(_session: AsyncSession, yard_id: int) -> Yard | None:
        if yard_id != 7:
            return None
        return Yard(
            id=7,
            name="Ocean View Patio",
            price=Decimal("50"),
            guest_limit="Up to 20 guests",
        )

    async def fake_fetch_booking_by_checkout_session(
        _session: AsyncSession, session_id: str
    ) -> Booking | None:
        for index, row in enumerate(rows, start=1):
            if row.checkout_session_id == session_id:
                return Booking(id=index, **_row_fields(row))
        return None

    async def fake_insert_booking(_session: AsyncSession, row: BookingInsert) -> Booking:
        rows.append(row)
        return Booking(id=len(rows), **_row_fields(row))

    monkeypatch.setattr(
        booking_service_module, "fetch_yard_by_id", fake_fetch_yard_by_id
    )
    monkeypatch.setattr(
        booking_service_module,
        "fetch_booking_by_checkout_session",
        fake_fetch_booking_by_checkout_session,
    )
    monkeypatch.setattr(booking_service_module, "insert_booking", fake_insert_booking)
    return rows


def _row_fields(row: BookingInsert) -> dict[str, Any]:
    return {
        "yard_id": row.yard_id,
        "guest_id": row.guest_id,
        "guest_name": row.guest_name,
        "guests": row.guests,
        "check_in": row.check_in,
        "check_out": row.check_out,
        "status": row.status,
        "total_amount": row.total_amount,
        "checkout_session_id": row.checkout_session_id,
    }


def _service() -> BookingService:
    settings = Settings(public_base_url="https://www.goyardly.com/")
    return BookingService(cast(AsyncSession, object()), settings)


@pytest.mark.anyio
async def test_quote_uses_the_yard_rate(inserted: list[BookingInsert]) -> None:
    result = await _service().quote(7, CHECK_IN, CHECK_OUT, 10)

    assert result["yard_id"] == 7
    assert result["quote"] == {
        "rate": 50.0,
        "hours": 4,
        "subtotal": 200.0,
        "service_fee": 20.0,
        "total": 220.0,
        "total_minor_units": 22000,
    }
    assert inserted == []


@pytest.mark.anyio
async def test_quote_rejects_party_over_the_tier(inserted: list[BookingInsert]) -> None:
    with pytest.raises(ValidationError, match="up to 20 guests"):
        await _service().quote(7, CHECK_IN, CHECK_OUT, 21)


@pytest.mark.anyio
async def test_quote_rejects_reversed_span(inserted: list[BookingInsert]) -> None:
    with pytest.raises(InvalidDuration):
        await _service().quote(7, CHECK_OUT, CHECK_IN, 2)


@pytest.mark.anyio
async def test_quote_unknown_yard(inserted: list[BookingInsert]) -> None:
    with pytest.raises(NotFound):
        await _service().quote(8, CHECK_IN, CHECK_OUT, 2)


@pytest.mark.anyio
async def test_create_checkout_charges_total_in_cents(
    inserted: list[BookingInsert],
) -> None:
    payments = FakePayments()

    result = await _service().create_checkout(
        cast(StripeCheckoutClient, payments),
        GUEST,
        yard_id=7,
        check_in=CHECK_IN,
        check_out=CHECK_OUT,
        guests=10,
    )

    assert result["session_id"] == "cs_test_1"
    assert result["url"] == "https://checkout.example/cs_test_1"
    request = payments.created[0]
    assert request["amount"] == 22000
    assert request["currency"] == "usd"
    assert request["name"] == "Yard Rental: Ocean View Patio"
    assert request["success_url"] == (
        "https://www.goyardly.com/booking/success?session_id={CHECKOUT_SESSION_ID}"
    )
    assert request["cancel_url"] == "https://www.goyardly.com/yards/7/book"
    assert request["metadata"]["guest_id"] == "guest-1"
    assert request["metadata"]["guests"] == "10"
    assert inserted == []


def _paid_session(**overrides: Any) -> CheckoutSession:
    metadata = {
        "yard_id": "7",
        "check_in": CHECK_IN.isoformat(),
        "check_out": CHECK_OUT.isoformat(),
        "guests": "10",
        "guest_id": "guest-1",
        "guest_name": "Dana",
    }
    metadata.update(overrides.pop("metadata", {}))
    fields: dict[str, Any] = {
        "id": "cs_test_1",
        "url": None,
        "payment_status": "paid",
        "amount_total": 22000,
        "metadata": metadata,
    }
    fields.update(overrides)
    return CheckoutSession(**fields)


@pytest.mark.anyio
async def test_confirm_records_a_paid_session_once(
    inserted: list[BookingInsert],
) -> None:
    payments = cast(StripeCheckoutClient, FakePayments(_paid_session()))
    service = _service()

    first = await service.confirm_checkout(payments, GUEST, "cs_test_1")
    second = await service.confirm_checkout(payments, GUEST, "cs_test_1")

    assert first == second
    assert first["status"] == "confirmed"
    assert first["total_amount"] == 22000
    assert first["check_in"] == CHECK_IN.isoformat()
    assert len(inserted) == 1


@pytest.mark.anyio
async def test_confirm_rejects_unpaid_session(inserted: list[BookingInsert]) -> None:
    payments = cast(
        StripeCheckoutClient, FakePayments(_paid_session(payment_status="unpaid"))
    )

    with pytest.raises(ValidationError, match="Payment has not been completed"):
        await _service().confirm_checkout(payments, GUEST, "cs_test_1")
    assert inserted == []


@pytest.mark.anyio
async def test_confirm_hides_another_guests_session(
    inserted: list[BookingInsert],
) -> None:
    payments = cast(
        StripeCheckoutClient,
        FakePayments(_paid_session(metadata={"guest_id": "someone-else"})),
    )

    with pytest.raises(NotFound):
        await _service().confirm_checkout(payments, GUEST, "cs_test_1")
    assert inserted == []


@pytest.mark.anyio
async def test_confirm_rejects_incomplete_metadata(
    inserted: list[BookingInsert],
) -> None:
    payments = cast(
        StripeCheckoutClient, FakePayments(_paid_session(metadata={"guests": "many"}))
    )

    with pytest.raises(ValidationError, match="missing booking details"):
        await _service().confirm_checkout(payments, GUEST, "cs_test_1")
