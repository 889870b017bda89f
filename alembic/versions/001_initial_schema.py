"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-19

Creates the bookings table.
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("org_id", sa.Uuid(as_uuid=True), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING", index=True),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("event_title", sa.String(255), nullable=False),
        sa.Column("event_location_id", sa.Uuid(as_uuid=True), nullable=False, index=True),
        sa.Column("event_start", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("event_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("event_details", sa.Text, nullable=False, server_default=""),
        sa.Column("request_note", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("event_start < event_end", name="ck_bookings_event_interval"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("bookings")
