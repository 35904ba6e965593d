from __future__ import annotations

# ruff: noqa: E402

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import cast

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from yardly.db.repositories import YardInsert, insert_yards
from yardly.db.session import session_context
from yardly.models.booking import Booking
from yardly.models.favorite import Favorite
from yardly.models.yard import Yard

SEED_HOST_ID = "seed-host"


@dataclass(frozen=True)
class CliArgs:
    reset: bool


def _parse_args() -> CliArgs:
    parser = argparse.ArgumentParser(
        description="Seed the Los Angeles starter yards with varied guest limits."
    )
    _ = parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete seed-host yards, with their bookings and favorites, before inserting.",
    )
    namespace = parser.parse_args()
    return CliArgs(reset=cast(bool, namespace.reset))


def _yard(
    name: str,
    description: str,
    price: int,
    city: str,
    lat: str,
    lng: str,
    guest_limit: str,
    amenities: list[str],
) -> YardInsert:
    return YardInsert(
        name=name,
        description=description,
        price=Decimal(price),
        city=city,
        guest_limit=guest_limit,
        amenities=amenities,
        image_url=f"/images/yards/{name}.jpg",
        lat=Decimal(lat),
        lng=Decimal(lng),
        host_id=SEED_HOST_ID,
    )


def _build_seed_rows() -> list[YardInsert]:
    return [
        _yard(
            "Beachfront Garden Oasis",
            "A stunning beachfront garden space in Venice",
            90,
            "Venice",
            "33.985",
            "-118.4695",
            "Up to 20 guests",
            ["Garden", "Outdoor Seating", "Ocean View"],
        ),
        _yard(
            "Bohemian Backyard",
            "A vibrant, artistic outdoor space in the heart of Echo Park",
            75,
            "Echo Park",
            "34.0904",
            "-118.2783",
            "Up to 15 guests",
            ["Fire Pit", "String Lights", "Outdoor Seating"],
        ),
        _yard(
            "Los Angeles Downtown Rooftop",
            "A modern rooftop space with panoramic city views",
            65,
            "Los Angeles",
            "34.0407",
            "-118.2468",
            "Up to 25 guests",
            ["City View", "Sound System", "Outdoor Seating"],
        ),
        _yard(
            "Ocean View Patio",
            "A beautiful oceanfront patio in Malibu with stunning views",
            85,
            "Malibu",
            "34.0369",
            "-118.7066",
            "Up to 20 guests",
            ["Ocean View", "BBQ Grill", "Outdoor Seating"],
        ),
        _yard(
            "Santa Monica Garden",
            "A serene garden space in Santa Monica featuring lush landscaping",
            55,
            "Santa Monica",
            "34.0195",
            "-118.4912",
            "Up to 10 guests",
            ["Garden", "Shade"],
        ),
        _yard(
            "Urban Rooftop Garden",
            "A modern rooftop garden in West Hollywood",
            60,
            "West Hollywood",
            "34.09",
            "-118.3617",
            "Up to 15 guests",
            ["Garden", "City View", "String Lights"],
        ),
    ]


async def _delete_seed_rows(session: AsyncSession) -> dict[str, int]:
    seed_yard_ids = select(Yard.id).where(Yard.host_id == SEED_HOST_ID)

    # bookings and favorites reference yards, so they go first
    bookings = await session.execute(
        delete(Booking).where(Booking.yard_id.in_(seed_yard_ids))
    )
    favorites = await session.execute(
        delete(Favorite).where(Favorite.yard_id.in_(seed_yard_ids))
    )
    yards = await session.execute(delete(Yard).where(Yard.host_id == SEED_HOST_ID))
    await session.commit()
    return {
        "deleted_bookings": int(bookings.rowcount or 0),
        "deleted_favorites": int(favorites.rowcount or 0),
        "deleted_yards": int(yards.rowcount or 0),
    }


async def _count_seed_rows(session: AsyncSession) -> int:
    stmt = select(func.count()).select_from(Yard).where(Yard.host_id == SEED_HOST_ID)
    return int((await session.execute(stmt)).scalar_one())


async def _run(args: CliArgs) -> dict[str, object]:
    failures: list[str] = []
    deleted: dict[str, int] | None = None

    if args.reset:
        async with session_context() as session:
            deleted = await _delete_seed_rows(session)

    seed_rows = _build_seed_rows()
    async with session_context() as session:
        inserted_count = await insert_yards(session, seed_rows)
    async with session_context() as session:
        observed_seed_row_count = await _count_seed_rows(session)

    if observed_seed_row_count < len(seed_rows):
        failures.append("observed_seed_row_count < expected_seed_rows")

    report: dict[str, object] = {
        "status": "success" if not failures else "failure",
        "executed_at": datetime.now(UTC).isoformat(),
        "reset_requested": args.reset,
        "deleted": deleted,
        "expected_seed_rows": len(seed_rows),
        "inserted_count": inserted_count,
        "observed_seed_row_count": observed_seed_row_count,
        "message": f"Created {inserted_count} yards with varied guest limits",
    }
    if failures:
        report["failures"] = failures
    return report


async def _async_main() -> int:
    args = _parse_args()
    try:
        report = await _run(args)
    except Exception as exc:  # noqa: BLE001
        error_report = {
            "status": "failure",
            "executed_at": datetime.now(UTC).isoformat(),
            "error": str(exc),
        }
        print(json.dumps(error_report, ensure_ascii=False, indent=2))
        return 1

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0 if report.get("status") == "success" else 1


def main() -> None:
    raise SystemExit(asyncio.run(_async_main()))


if __name__ == "__main__":
    main()
