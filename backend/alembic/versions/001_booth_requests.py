"""Booth request schema: users, events, event booths, requests.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
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
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("local", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_events_id", "events", ["id"])
    # The creator inbox joins requests -> booths -> events and filters here
    op.create_index("ix_events_creator_id", "events", ["creator_id"])

    op.create_table(
        "event_booths",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_event_booths_id", "event_booths", ["id"])
    op.create_index("ix_event_booths_event_id", "event_booths", ["event_id"])

    op.create_table(
        "requests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_booth_id", sa.Integer(), sa.ForeignKey("event_booths.id"), nullable=False),
        sa.Column("applicant_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(1), nullable=False, server_default=sa.text("'O'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('O', 'A', 'D')", name="request_status"),
    )
    op.create_index("ix_requests_id", "requests", ["id"])
    # Sibling decline in accept_and_decline_others filters on event_booth_id
    op.create_index("ix_requests_event_booth_id", "requests", ["event_booth_id"])
    op.create_index("ix_requests_applicant_id", "requests", ["applicant_id"])


def downgrade() -> None:
    op.drop_table("requests")
    op.drop_table("event_booths")
    op.drop_table("events")
    op.drop_table("users")
