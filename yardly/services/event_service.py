"""Business logic for the community events listing."""

from sqlalchemy.ext.asyncio import AsyncSession

from yardly.db.repositories import fetch_event_by_id, fetch_events
from yardly.errors import NotFound
from yardly.models.event import Event


def event_to_dict(event: Event) -> dict[str, object]:
    return {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "time": event.time,
        "location": event.location,
        "description": event.description,
        "image": event.image_url,
        "hosts": [
            {"name": host.get("name", ""), "image": host.get("image_url")}
            for host in event.hosts or []
        ],
    }


class EventService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_events(self, limit: int = 200) -> list[dict[str, object]]:
        rows = await fetch_events(self._session, limit=limit)
        return [event_to_dict(row) for row in rows]

    async def get_event(self, event_id: int) -> dict[str, object]:
        event = await fetch_event_by_id(self._session, event_id)
        if event is None:
            raise NotFound("Event not found")
        return event_to_dict(event)
