"""create registrations table

Revision ID: a7c3e91d2b40
Revises:
Create Date: 2026-10-18 09:00:00.000000

Creates the registrations table. serial_number is unique: it is the
registration identifier printed on the certificate and the last line of
defence against two submissions being given the same serial.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c3e91d2b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create registrations table."""
    op.create_table(
        "registrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("serial_number", sa.String(length=20), nullable=False),
        sa.Column("admission_no", sa.String(length=50), nullable=True),
        sa.Column("sdmis_ref_no", sa.String(length=50), nullable=True),
        sa.Column("course_name", sa.String(length=200), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("duration", sa.String(length=100), nullable=True),
        sa.Column("from_date", sa.String(length=20), nullable=True),
        sa.Column("to_date", sa.String(length=20), nullable=True),
        sa.Column("course_fees", sa.String(length=50), nullable=True),
        sa.Column("applicant_name", sa.String(length=200), nullable=False),
        sa.Column("dob", sa.String(length=20), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("father_name", sa.String(length=200), nullable=True),
        sa.Column("mother_name", sa.String(length=200), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("mobile", sa.String(length=20), nullable=True),
        sa.Column("aadhar", sa.String(length=20), nullable=True),
        sa.Column("caste_category", sa.String(length=50), nullable=True),
        sa.Column("education", sa.JSON(), nullable=False),
        sa.Column("certificate_url", sa.Text(), nullable=True),
        sa.Column("application_form_url", sa.Text(), nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.UniqueConstraint("serial_number", name="uq_registrations_serial_number"),
    )


def downgrade() -> None:
    """Drop registrations table."""
    op.drop_table("registrations")
