"""Initial schema: staff, services, staff_services, bookings, schedule_blocks.

Revision ID: 001_initial
Revises:
Create Date: 2025-09-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "staff",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_staff_email"), "staff", ["email"], unique=False)

    op.create_table(
        "services",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("base_duration", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("base_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_chemical", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_services_category"), "services", ["category"], unique=False)

    op.create_table(
        "staff_services",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("staff_id", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default="true"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_staff_services_staff_id"), "staff_services", ["staff_id"], unique=False)
    op.create_index(op.f("ix_staff_services_service_id"), "staff_services", ["service_id"], unique=False)

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("booking_id", sa.String(), nullable=True),
        sa.Column("client_id", sa.String(), nullable=True),
        sa.Column("resource_id", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("start", sa.DateTime(), nullable=False),
        sa.Column("end", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resource_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bookings_booking_id"), "bookings", ["booking_id"], unique=False)
    op.create_index(op.f("ix_bookings_client_id"), "bookings", ["client_id"], unique=False)
    op.create_index(op.f("ix_bookings_resource_id"), "bookings", ["resource_id"], unique=False)
    op.create_index(op.f("ix_bookings_start"), "bookings", ["start"], unique=False)
    op.create_index(op.f("ix_bookings_end"), "bookings", ["end"], unique=False)

    if op.get_bind().dialect.name == "postgresql":
        # No two bookings of one stylist may overlap once a transaction commits.
        # Deferred so a multi-row reschedule can shuffle rows within one transaction.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            'ALTER TABLE bookings ADD CONSTRAINT bookings_no_overlap '
            'EXCLUDE USING gist (resource_id WITH =, tsrange(start, "end") WITH &&) '
            "DEFERRABLE INITIALLY DEFERRED"
        )

    op.create_table(
        "schedule_blocks",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("staff_id", sa.String(), nullable=True),
        sa.Column("start", sa.DateTime(), nullable=False),
        sa.Column("end", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schedule_blocks_staff_id"), "schedule_blocks", ["staff_id"], unique=False)
    op.create_index(op.f("ix_schedule_blocks_start"), "schedule_blocks", ["start"], unique=False)
    op.create_index(op.f("ix_schedule_blocks_end"), "schedule_blocks", ["end"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_schedule_blocks_end"), table_name="schedule_blocks")
    op.drop_index(op.f("ix_schedule_blocks_start"), table_name="schedule_blocks")
    op.drop_index(op.f("ix_schedule_blocks_staff_id"), table_name="schedule_blocks")
    op.drop_table("schedule_blocks")
    op.drop_index(op.f("ix_bookings_end"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_start"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_resource_id"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_client_id"), table_name="bookings")
    op.drop_index(op.f("ix_bookings_booking_id"), table_name="bookings")
    op.drop_table("bookings")
    op.drop_index(op.f("ix_staff_services_service_id"), table_name="staff_services")
    op.drop_index(op.f("ix_staff_services_staff_id"), table_name="staff_services")
    op.drop_table("staff_services")
    op.drop_index(op.f("ix_services_category"), table_name="services")
    op.drop_table("services")
    op.drop_index(op.f("ix_staff_email"), table_name="staff")
    op.drop_table("staff")
