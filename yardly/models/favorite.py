"""User favorite yards table model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from yardly.models.base import Base


class Favorite(Base):
    """User favorite yards."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "yard_id", name="uq_favorites_user_yard"),
        Index("idx_favorites_user", "user_id"),
        Index("idx_favorites_yard", "yard_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(nullable=False)
    yard_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("yards.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
