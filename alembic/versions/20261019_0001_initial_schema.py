"""Initial tables for yards, bookings, favorites, events and calendar tokens.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "yards",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("host_id", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "amenities",
            postgresql.ARRAY(sa.Text()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("city", sa.String(), server_default="", nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("lat", sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column("lng", sa.Numeric(precision=10, scale=7), nullable=True),
        sa.Column(
            "guest_limit",
            sa.String(),
            server_default="Up to 10 guests",
            nullable=False,
        ),
        sa.Column("rating", sa.Numeric(precision=3, scale=2), nullable=True),
        sa.Column("reviews", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_yards"),
        sa.CheckConstraint(
            "guest_limit IN ('Up to 10 guests', 'Up to 15 guests', "
            "'Up to 20 guests', 'Up to 25 guests')",
            name="ck_yards_guest_limit",
        ),
    )
    op.create_index("idx_yards_city", "yards", ["city"], unique=False)
    op.create_index("idx_yards_host", "yards", ["host_id"], unique=False)
    op.create_index("idx_yards_created", "yards", ["created_at"], unique=False)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("yard_id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.String(), nullable=True),
        sa.Column("guest_name", sa.String(), nullable=False),
        sa.Column("guests", sa.Integer(), nullable=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=False),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(), server_default="confirmed", nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=True),
        sa.Column("checkout_session_id", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        sa.ForeignKeyConstraint(["yard_id"], ["yards.id"], name="fk_bookings_yard"),
        sa.UniqueConstraint(
            "checkout_session_id", name="uq_bookings_checkout_session_id"
        ),
        sa.CheckConstraint("check_out > check_in", name="ck_bookings_span"),
    )
    op.create_index(
        "idx_bookings_yard_status", "bookings", ["yard_id", "status"], unique=False
    )
    op.create_index(
        "idx_bookings_span", "bookings", ["check_in", "check_out"], unique=False
    )

    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("yard_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_favorites"),
        sa.ForeignKeyConstraint(["yard_id"], ["yards.id"], name="fk_favorites_yard"),
        sa.UniqueConstraint("user_id", "yard_id", name="uq_favorites_user_yard"),
    )
    op.create_index("idx_favorites_user", "favorites", ["user_id"], unique=False)
    op.create_index("idx_favorites_yard", "favorites", ["yard_id"], unique=False)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(), server_default="", nullable=False),
        sa.Column("location", sa.Text(), server_default="", nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "hosts",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="[]",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_events"),
    )
    op.create_index("idx_events_date", "events", ["date"], unique=False)

    op.create_table(
        "calendar_connections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_calendar_connections"),
        sa.UniqueConstraint("user_id", name="uq_calendar_connections_user"),
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("calendar_connections")

    op.drop_index("idx_events_date", table_name="events")
    op.drop_table("events")

    op.drop_index("idx_favorites_yard", table_name="favorites")
    op.drop_index("idx_favorites_user", table_name="favorites")
    op.drop_table("favorites")

    op.drop_index("idx_bookings_span", table_name="bookings")
    op.drop_index("idx_bookings_yard_status", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("idx_yards_created", table_name="yards")
    op.drop_index("idx_yards_host", table_name="yards")
    op.drop_index("idx_yards_city", table_name="yards")
    op.drop_table("yards")
