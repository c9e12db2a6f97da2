"""Initial schema: standards, requirements, variables, history, assessments

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates: standards, requirements, requirement_variables, requirement_history,
         assessments, assessment_standards.
"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── 1. standards ──────────────────────────────────────────────
    op.create_table(
        "standards",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("version", sa.String(50), server_default="1.0", nullable=False),
        sa.Column("type", sa.String(20), server_default="framework", nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )

    # ── 2. requirements ───────────────────────────────────────────
    op.create_table(
        "requirements",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("standard_id", sa.Integer, sa.ForeignKey("standards.id"), nullable=False),
        sa.Column("section", sa.String(200), server_default="General", nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("guidance", sa.Text, nullable=True),
        sa.Column("status", sa.String(30), server_default="not-fulfilled", nullable=False),
        sa.Column("evidence", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("responsible_party", sa.String(200), nullable=True),
        sa.Column("last_assessment_date", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_requirements_standard_status", "requirements", ["standard_id", "status"])

    # ── 3. requirement_variables ──────────────────────────────────
    op.create_table(
        "requirement_variables",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "requirement_id", sa.Integer,
            sa.ForeignKey("requirements.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )

    # ── 4. requirement_history (append-only) ──────────────────────
    op.create_table(
        "requirement_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "requirement_id", sa.Integer,
            sa.ForeignKey("requirements.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("updated_by", sa.String(200), server_default="system", nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_requirement_history_requirement_id", "requirement_history", ["requirement_id"])

    # ── 5. assessments + link table ───────────────────────────────
    op.create_table(
        "assessments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        sa.Column("progress", sa.Integer, server_default="0", nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("assessor_name", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "assessment_standards",
        sa.Column(
            "assessment_id", sa.Integer,
            sa.ForeignKey("assessments.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "standard_id", sa.Integer,
            sa.ForeignKey("standards.id", ondelete="CASCADE"), primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("assessment_standards")
    op.drop_table("assessments")
    op.drop_index("ix_requirement_history_requirement_id", table_name="requirement_history")
    op.drop_table("requirement_history")
    op.drop_table("requirement_variables")
    op.drop_index("ix_requirements_standard_status", table_name="requirements")
    op.drop_table("requirements")
    op.drop_table("standards")
