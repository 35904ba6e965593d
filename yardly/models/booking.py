"""Booking table model."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from yardly.models.base import Base

BOOKING_STATUS_CONFIRMED = "confirmed"


class Booking(Base):
    """Paid reservation of a yard for a time span."""

    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint(
            "checkout_session_id", name="uq_bookings_checkout_session_id"
        ),
        CheckConstraint("check_out > check_in", name="ck_bookings_span"),
        Index("idx_bookings_yard_status", "yard_id", "status"),
        Index("idx_bookings_span", "check_in", "check_out"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    yard_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("yards.id"), nullable=False
    )
    guest_id: Mapped[str | None] = mapped_column(nullable=True)
    guest_name: Mapped[str] = mapped_column(nullable=False)
    guests: Mapped[int] = mapped_column(Integer, nullable=False)
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    status: Mapped[str] = mapped_column(
        nullable=False,
        default=BOOKING_STATUS_CONFIRMED,
        server_default=BOOKING_STATUS_CONFIRMED,
    )
    total_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    checkout_session_id: Mapped[str | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
