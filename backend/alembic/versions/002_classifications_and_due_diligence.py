"""Vendor classifications and due-diligence verifications

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    ]


def _verification_columns(area: str):
    return [
        sa.Column(f"{area}_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(f"{area}_comment", sa.Text()),
    ]


def upgrade() -> None:
    op.create_table(
        "vendor_classifications",
        *_base_columns(),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False, unique=True),
        sa.Column("vendor_type", sa.String(16)),
        sa.Column("opex_sub_type", sa.String(32)),
        sa.Column("capex_sub_type", sa.String(32)),
        sa.Column("capex_band", sa.String(32)),
        sa.Column("notes", sa.Text()),
        sa.Column("due_diligence_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("due_diligence_date", sa.DateTime(timezone=True)),
        sa.Column("info_request_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("info_request_date", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "due_diligence_verifications",
        *_base_columns(),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False, unique=True),
        *_verification_columns("company_details"),
        *_verification_columns("financial_details"),
        *_verification_columns("bank_details"),
        *_verification_columns("references"),
        *_verification_columns("documents"),
        sa.Column("overall_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("assigned_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("verified_by", sa.String(320)),
    )
    op.create_index(
        "ix_due_diligence_verifications_overall_status", "due_diligence_verifications", ["overall_status"]
    )


def downgrade() -> None:
    op.drop_index("ix_due_diligence_verifications_overall_status", "due_diligence_verifications")
    op.drop_table("due_diligence_verifications")
    op.drop_table("vendor_classifications")
