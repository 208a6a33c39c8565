"""Create users, rooms, reservations and reservation_attendees

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema for the meeting-room reservation service.
How:   Portable column types only (works on PostgreSQL and SQLite).

Rollback: downgrade() drops all four tables.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False, comment="Display name"),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login / contact email, unique across users",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the user was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False, comment="Room name, unique across rooms"),
        sa.Column("floor", sa.Integer(), nullable=False, comment="Floor number"),
        sa.Column("capacity", sa.Integer(), nullable=False, comment="Maximum number of people"),
        sa.Column("location", sa.String(255), nullable=True, comment="Free-form location hint"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_rooms_name"),
        sa.CheckConstraint("capacity >= 1", name="ck_rooms_capacity_positive"),
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "start_time",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Reservation start (UTC, inclusive)",
        ),
        sa.Column(
            "end_time",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Reservation end (UTC, exclusive)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the reservation was made (UTC)",
        ),
        sa.Column("reserver_id", sa.Integer(), nullable=False, comment="Owner of the reservation"),
        sa.Column("room_id", sa.Integer(), nullable=False, comment="Reserved room"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["reserver_id"], ["users.id"], name="fk_reservations_reserver"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], name="fk_reservations_room"),
        sa.CheckConstraint("end_time > start_time", name="ck_reservations_time_order"),
    )

    # Serves the overlap query: room_id equality + start/end range predicates
    op.create_index(
        "ix_reservations_room_time",
        "reservations",
        ["room_id", "start_time", "end_time"],
    )
    op.create_index("ix_reservations_reserver_id", "reservations", ["reserver_id"])

    op.create_table(
        "reservation_attendees",
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("reservation_id", "user_id"),
        sa.ForeignKeyConstraint(
            ["reservation_id"], ["reservations.id"],
            name="fk_reservation_attendees_reservation", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_reservation_attendees_user", ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    """Drop all tables. Destructive: every user, room and reservation is lost."""
    op.drop_table("reservation_attendees")
    op.drop_index("ix_reservations_reserver_id", table_name="reservations")
    op.drop_index("ix_reservations_room_time", table_name="reservations")
    op.drop_table("reservations")
    op.drop_table("rooms")
    op.drop_table("users")
