"""Google Geocoding REST client."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Final

import httpx

from yardly.errors import UpstreamFailure
from yardly.integrations.base import HttpIntegration

logger = logging.getLogger(__name__)

GEOCODE_URL: Final = "https://maps.googleapis.com/maps/api/geocode/json"


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: Decimal
    lng: Decimal


class GeocodingClient(HttpIntegration):
    """Forward geocoding (address to coordinates)."""

    service_name = "geocoding service"

    def __init__(
        self, client: httpx.AsyncClient, *, api_key: str, timeout: float = 10.0
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key

    async def geocode(self, address: str) -> Coordinates | None:
        """Return the best match for ``address`` or ``None`` when nothing matches."""

        if not self._api_key:
            raise UpstreamFailure("Geocoding service is not configured")

        payload = await self._request_json(
            "GET", GEOCODE_URL, params={"address": address, "key": self._api_key}
        )
        status = payload.get("status")
        if status == "ZERO_RESULTS":
            logger.info("No geocoding results for address=%s", address)
            return None
        if status != "OK":
            logger.error(
                "Geocoding failed: status=%s message=%s",
                status,
                payload.get("error_message", ""),
            )
            raise UpstreamFailure(f"Geocoding failed with status {status}")

        try:
            location = payload["results"][0]["geometry"]["location"]
            return Coordinates(
                lat=Decimal(str(location["lat"])), lng=Decimal(str(location["lng"]))
            )
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamFailure("Geocoding returned an unexpected payload") from e
