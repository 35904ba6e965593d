"""Yard (listing) table model."""

from datetime import datetime
from decimal import Decimal
from typing import Final

from sqlalchemy import (
    ARRAY,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from yardly.models.base import Base

GUEST_LIMIT_TIERS: Final = (
    "Up to 10 guests",
    "Up to 15 guests",
    "Up to 20 guests",
    "Up to 25 guests",
)
DEFAULT_GUEST_LIMIT: Final = GUEST_LIMIT_TIERS[0]


def guest_limit_capacity(guest_limit: str) -> int:
    """Return the number of guests a capacity tier allows."""

    if guest_limit not in GUEST_LIMIT_TIERS:
        raise ValueError(
            f"Invalid guest_limit: {guest_limit!r}. "
            f"Valid values are: {', '.join(GUEST_LIMIT_TIERS)}"
        )
    return int(guest_limit.split()[2])


class Yard(Base):
    """Outdoor space a host rents out by the hour."""

    __tablename__ = "yards"
    __table_args__ = (
        CheckConstraint(
            "guest_limit IN ("
            + ", ".join(f"'{tier}'" for tier in GUEST_LIMIT_TIERS)
            + ")",
            name="ck_yards_guest_limit",
        ),
        Index("idx_yards_city", "city"),
        Index("idx_yards_host", "host_id"),
        Index("idx_yards_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    host_id: Mapped[str | None] = mapped_column(nullable=True)
    name: Mapped[str] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    amenities: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, default=list, server_default="{}"
    )
    city: Mapped[str] = mapped_column(nullable=False, server_default="")
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    lat: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    lng: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    guest_limit: Mapped[str] = mapped_column(
        nullable=False, default=DEFAULT_GUEST_LIMIT, server_default=DEFAULT_GUEST_LIMIT
    )
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), nullable=True)
    reviews: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    @property
    def guest_capacity(self) -> int:
        return guest_limit_capacity(self.guest_limit)
