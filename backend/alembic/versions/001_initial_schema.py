"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    op.create_table(
        "vendors",
        *_base_columns(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("company_name", sa.String(512)),
        sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("submitted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("submitted_at", sa.DateTime(timezone=True)),
        sa.Column("form_json", postgresql.JSONB(), server_default="{}"),
    )
    op.create_index("ix_vendors_email", "vendors", ["email"])

    op.create_table(
        "reviewer_assignments",
        *_base_columns(),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("section", sa.String(32), nullable=False),
        sa.Column("reviewer_email", sa.String(320), nullable=False),
        sa.Column("assigned_by", sa.String(320), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("vendor_id", "section", "reviewer_email", name="uq_reviewer_assignment"),
    )
    op.create_index("ix_reviewer_assignments_vendor_id", "reviewer_assignments", ["vendor_id"])
    op.create_index("ix_reviewer_assignments_reviewer_email", "reviewer_assignments", ["reviewer_email"])

    op.create_table(
        "vendor_ratings",
        *_base_columns(),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("section", sa.String(32), nullable=False),
        sa.Column("parameter_key", sa.String(64), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("rated_by", sa.String(320), nullable=False),
        sa.Column("rated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("vendor_id", "section", "parameter_key", "rated_by", name="uq_vendor_rating"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_vendor_rating_range"),
    )
    op.create_index("ix_vendor_ratings_vendor_id", "vendor_ratings", ["vendor_id"])
    op.create_index("ix_vendor_ratings_rated_by", "vendor_ratings", ["rated_by"])

    op.create_table(
        "vendor_grades",
        *_base_columns(),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False, unique=True),
        sa.Column("site_score", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("procurement_score", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("financial_score", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("computed_grade", sa.String(1)),
        sa.Column("admin_override_grade", sa.String(1)),
        sa.Column("overridden_by", sa.String(320)),
        sa.Column("overridden_at", sa.DateTime(timezone=True)),
        sa.Column("final_grade", sa.String(1)),
        sa.Column("computed_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_vendor_grades_total_score", "vendor_grades", ["total_score"])
    op.create_index("ix_vendor_grades_final_grade", "vendor_grades", ["final_grade"])

    op.create_table(
        "audit_log",
        *_base_columns(),
        sa.Column("actor_email", sa.String(320)),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=False),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True)),
        sa.Column("diff_json", postgresql.JSONB(), server_default="{}"),
    )


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_index("ix_vendor_grades_final_grade", "vendor_grades")
    op.drop_index("ix_vendor_grades_total_score", "vendor_grades")
    op.drop_table("vendor_grades")
    op.drop_index("ix_vendor_ratings_rated_by", "vendor_ratings")
    op.drop_index("ix_vendor_ratings_vendor_id", "vendor_ratings")
    op.drop_table("vendor_ratings")
    op.drop_index("ix_reviewer_assignments_reviewer_email", "reviewer_assignments")
    op.drop_index("ix_reviewer_assignments_vendor_id", "reviewer_assignments")
    op.drop_table("reviewer_assignments")
    op.drop_index("ix_vendors_email", "vendors")
    op.drop_table("vendors")
