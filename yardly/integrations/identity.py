"""Hosted identity provider lookups."""

import logging
from dataclasses import dataclass

import httpx

from yardly.errors import Unauthenticated, UpstreamFailure
from yardly.integrations.base import HttpIntegration

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identity resolved from a session token."""

    id: str
    display_name: str


class IdentityClient(HttpIntegration):
    """Resolve bearer access tokens against the auth server's user endpoint."""

    service_name = "identity provider"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        auth_url: str,
        anon_key: str,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._user_url = f"{auth_url.rstrip('/')}/auth/v1/user"
        self._anon_key = anon_key

    async def get_user(self, access_token: str) -> AuthenticatedUser:
        if not self._anon_key:
            logger.warning("Identity provider key not configured, rejecting session")
            raise Unauthenticated("Unauthorized")

        try:
            payload = await self._request_json(
                "GET",
                self._user_url,
                headers={
                    "apikey": self._anon_key,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except UpstreamFailure as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code in (
                401,
                403,
            ):
                raise Unauthenticated("Unauthorized") from e
            raise

        user_id = payload.get("id")
        if not user_id:
            raise Unauthenticated("Unauthorized")

        return AuthenticatedUser(id=str(user_id), display_name=_display_name(payload))


def _display_name(payload: dict[str, object]) -> str:
    metadata = payload.get("user_metadata")
    if isinstance(metadata, dict):
        for key in ("full_name", "name"):
            value = metadata.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    email = payload.get("email")
    if isinstance(email, str) and email:
        return email
    return "Guest"
