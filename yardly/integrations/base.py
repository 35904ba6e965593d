"""Shared plumbing for hosted API clients."""

import logging
from typing import Any

import httpx

from yardly.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class HttpIntegration:
    """Base for clients that talk JSON to a third-party HTTP API.

    The ``httpx.AsyncClient`` is owned by the caller so one connection pool
    can be shared per process.
    """

    service_name: str = "upstream"

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = 10.0) -> None:
        self._client = client
        self._timeout = httpx.Timeout(timeout)

    async def _request(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, url, timeout=self._timeout, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "%s HTTP error %s for %s %s",
                self.service_name,
                e.response.status_code,
                method,
                url,
            )
            raise UpstreamFailure(
                f"{self.service_name} request failed with status "
                f"{e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("%s request failed: %s", self.service_name, e)
            raise UpstreamFailure(f"{self.service_name} request failed") from e
        return response

    async def _request_json(
        self, method: str, url: str, **kwargs: Any
    ) -> dict[str, Any]:
        response = await self._request(method, url, **kwargs)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamFailure(
                f"{self.service_name} returned a non-JSON response"
            ) from e
        if not isinstance(payload, dict):
            raise UpstreamFailure(f"{self.service_name} returned an unexpected payload")
        return payload
