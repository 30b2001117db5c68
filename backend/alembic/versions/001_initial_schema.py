"""Initial schema: users, tickets, bookings with inventory constraints.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'customer'")),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "tickets",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("from_location", sa.String(255), nullable=True),
        sa.Column("to_location", sa.String(255), nullable=True),
        sa.Column("transport_type", sa.String(50), nullable=True),
        sa.Column("vendor_email", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("approved_quantity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("departure", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        # Last line of defence for the inventory floor
        sa.CheckConstraint("quantity >= 0", name="check_ticket_quantity_non_negative"),
        sa.CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'hidden')",
            name="check_ticket_status",
        ),
    )
    op.create_index("ix_tickets_vendor_email", "tickets", ["vendor_email"])
    op.create_index("ix_tickets_status_departure", "tickets", ["status", "departure"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("ticket_id", sa.String(36), sa.ForeignKey("tickets.id"), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'paid', 'cancelled')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_ticket_id", "bookings", ["ticket_id"])
    op.create_index("ix_bookings_customer_email", "bookings", ["customer_email"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("tickets")
    op.drop_table("users")
