"""Stripe Checkout REST client."""

import logging
from dataclasses import dataclass, field

import httpx

from yardly.errors import UpstreamFailure
from yardly.integrations.base import HttpIntegration

logger = logging.getLogger(__name__)

PAYMENT_STATUS_PAID = "paid"


@dataclass(slots=True)
class CheckoutSession:
    """Subset of a Stripe Checkout Session the application reads."""

    id: str
    url: str | None
    payment_status: str | None
    amount_total: int | None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PAYMENT_STATUS_PAID


def _parse_session(payload: dict[str, object]) -> CheckoutSession:
    session_id = payload.get("id")
    if not isinstance(session_id, str) or not session_id:
        raise UpstreamFailure("Payment processor returned a session without id")

    metadata = payload.get("metadata")
    amount_total = payload.get("amount_total")
    url = payload.get("url")
    payment_status = payload.get("payment_status")
    return CheckoutSession(
        id=session_id,
        url=url if isinstance(url, str) else None,
        payment_status=payment_status if isinstance(payment_status, str) else None,
        amount_total=amount_total if isinstance(amount_total, int) else None,
        metadata={str(k): str(v) for k, v in metadata.items()}
        if isinstance(metadata, dict)
        else {},
    )


class StripeCheckoutClient(HttpIntegration):
    """Create and look up hosted checkout sessions."""

    service_name = "payment processor"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        secret_key: str,
        api_base_url: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._secret_key = secret_key
        self._api_base_url = api_base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        if not self._secret_key:
            raise UpstreamFailure("Payment processor is not configured")
        return {"Authorization": f"Bearer {self._secret_key}"}

    async def create_checkout_session(
        self,
        *,
        name: str,
        description: str,
        amount: int,
        currency: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        """Create a one-item payment session for ``amount`` minor units."""

        form: dict[str, str] = {
            "mode": "payment",
            "payment_method_types[0]": "card",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": currency,
            "line_items[0][price_data][unit_amount]": str(amount),
            "line_items[0][price_data][product_data][name]": name,
            "line_items[0][price_data][product_data][description]": description,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value

        payload = await self._request_json(
            "POST",
            f"{self._api_base_url}/checkout/sessions",
            data=form,
            headers=self._headers(),
        )
        session = _parse_session(payload)
        logger.info("Created checkout session %s for %s", session.id, amount)
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        payload = await self._request_json(
            "GET",
            f"{self._api_base_url}/checkout/sessions/{session_id}",
            headers=self._headers(),
        )
        return _parse_session(payload)
