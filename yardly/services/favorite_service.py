"""Business logic for user favorite management."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.repositories import (
    delete_favorite,
    fetch_favorites,
    fetch_yard_by_id,
    fetch_yards_by_ids,
    upsert_favorite,
)
from yardly.errors import NotFound
from yardly.services.listing_service import yard_to_dict

logger = logging.getLogger(__name__)


class FavoriteService:
    """Service layer for favorite endpoints and MCP tools."""

    _session: AsyncSession

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def toggle_favorite(self, user_id: str, yard_id: int) -> dict[str, object]:
        """Flip membership of ``yard_id`` in the user's favorites.

        Two concurrent toggles of the same pair resolve last-write-wins.
        """

        existing = await fetch_favorites(
            self._session, user_id=user_id, yard_id=yard_id, limit=1
        )
        if existing:
            await delete_favorite(self._session, user_id, yard_id)
            logger.info("Removed yard %s from favorites of %s", yard_id, user_id)
            return {"user_id": user_id, "yard_id": yard_id, "is_favorite": False}

        yard = await fetch_yard_by_id(self._session, yard_id)
        if yard is None:
            raise NotFound("Yard not found")

        await upsert_favorite(self._session, user_id, yard_id)
        logger.info("Added yard %s to favorites of %s", yard_id, user_id)
        return {"user_id": user_id, "yard_id": yard_id, "is_favorite": True}

    async def list_favorites(
        self, user_id: str, limit: int = 200
    ) -> dict[str, object]:
        """Favorite yard ids (newest first) with the yards themselves."""

        favorites = await fetch_favorites(self._session, user_id=user_id, limit=limit)
        yard_ids = [fav.yard_id for fav in favorites]
        yards = await fetch_yards_by_ids(self._session, yard_ids)

        return {
            "user_id": user_id,
            "favorites": yard_ids,
            "yards": [yard_to_dict(yard) for yard in yards],
        }
