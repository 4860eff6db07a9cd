"""Create leads and clients tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _profile_columns() -> list[sa.Column]:
    return [
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("phone_country_code", sa.String(), nullable=False),
        sa.Column("secondary_phone_number", sa.String(), nullable=True),
        sa.Column("secondary_phone_country_code", sa.String(), nullable=True),
        sa.Column("whatsapp_number", sa.String(), nullable=True),
        sa.Column("whatsapp_country_code", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("occupation", sa.String(), nullable=True),
        sa.Column("qualification", sa.String(), nullable=True),
        sa.Column("year_of_experience", sa.Integer(), nullable=True),
        sa.Column("target_country", sa.String(), nullable=True),
        sa.Column("residing_country", sa.String(), nullable=True),
        sa.Column("program", sa.String(), nullable=True),
        sa.Column("ielts_score", sa.Float(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
    ]


def upgrade() -> None:
    # Create leads table
    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_profile_columns(),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("priority", sa.String(), nullable=True),
        sa.Column("assigned_staff_id", sa.Integer(), nullable=True),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        sa.Column("follow_up_status", sa.String(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_leads_phone_number"), "leads", ["phone_number"], unique=False)
    op.create_index(op.f("ix_leads_email"), "leads", ["email"], unique=False)
    op.create_index(op.f("ix_leads_status"), "leads", ["status"], unique=False)
    op.create_index(op.f("ix_leads_assigned_staff_id"), "leads", ["assigned_staff_id"], unique=False)

    # Create clients table; lead_id is a plain column so clients survive lead deletion
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lead_id", sa.Integer(), nullable=True),
        *_profile_columns(),
        sa.Column("assessment_authority", sa.String(), nullable=False),
        sa.Column("occupation_mapped", sa.String(), nullable=False),
        sa.Column("registration_fee_paid", sa.Boolean(), nullable=False),
        sa.Column("fee_status", sa.String(), nullable=True),
        sa.Column("amount_paid", sa.Float(), nullable=False),
        sa.Column("payment_due_date", sa.Date(), nullable=True),
        sa.Column("assigned_staff_id", sa.Integer(), nullable=True),
        sa.Column("processing_staff_id", sa.Integer(), nullable=True),
        sa.Column("processing_status", sa.String(), nullable=True),
        sa.Column("completed_actions", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clients_lead_id"), "clients", ["lead_id"], unique=True)
    op.create_index(op.f("ix_clients_fee_status"), "clients", ["fee_status"], unique=False)
    op.create_index(op.f("ix_clients_assigned_staff_id"), "clients", ["assigned_staff_id"], unique=False)
    op.create_index(
        op.f("ix_clients_processing_staff_id"), "clients", ["processing_staff_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_clients_processing_staff_id"), table_name="clients")
    op.drop_index(op.f("ix_clients_assigned_staff_id"), table_name="clients")
    op.drop_index(op.f("ix_clients_fee_status"), table_name="clients")
    op.drop_index(op.f("ix_clients_lead_id"), table_name="clients")
    op.drop_table("clients")
    op.drop_index(op.f("ix_leads_assigned_staff_id"), table_name="leads")
    op.drop_index(op.f("ix_leads_status"), table_name="leads")
    op.drop_index(op.f("ix_leads_email"), table_name="leads")
    op.drop_index(op.f("ix_leads_phone_number"), table_name="leads")
    op.drop_table("leads")
