import datetime as dt
import importlib
from typing import cast

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from yardly.errors import NotFound
from yardly.models.event import Event
from yardly.services.event_service import EventService, event_to_dict

event_service_module = importlib.import_module("yardly.services.event_service")


def test_event_to_dict_renames_images() -> None:
    event = Event(
        id=1,
        title="Backyard Movie Night",
        date=dt.date(2026, 7, 4),
        time="8:00 PM",
        location="Echo Park",
        description="Bring a blanket.",
        image_url="/images/events/movie.jpg",
        hosts=[{"name": "Sam", "image_url": "/images/hosts/sam.jpg"}],
    )

    assert event_to_dict(event) == {
        "id": 1,
        "title": "Backyard Movie Night",
        "date": "2026-07-04",
        "time": "8:00 PM",
        "location": "Echo Park",
        "description": "Bring a blanket.",
        "image": "/images/events/movie.jpg",
        "hosts": [{"name": "Sam", "image": "/images/hosts/sam.jpg"}],
    }


@pytest.mark.anyio
async def test_get_event_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_fetch_event_by_id(_session: AsyncSession, _event_id: int) -> None:
        return None

    monkeypatch.setattr(
        event_service_module, "fetch_event_by_id", fake_fetch_event_by_id
    )

    with pytest.raises(NotFound, match="Event not found"):
        await EventService(cast(AsyncSession, object())).get_event(5)
