"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=64), nullable=False),
        sa.Column("mobile_number", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("village_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "grievances",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("grievance_number", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("village_name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=64), nullable=False),
        sa.Column("priority", sa.String(length=64), nullable=False),
        sa.Column("evidence_files", sa.JSON(), nullable=False),
        sa.Column("voice_recording_url", sa.String(length=1024), nullable=True),
        sa.Column("voice_transcription", sa.Text(), nullable=True),
        sa.Column("resolution_timeline", sa.Integer(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("resolution_notes", sa.Text(), nullable=True),
        sa.Column("resolution_evidence", sa.JSON(), nullable=False),
        sa.Column("verification_deadline", sa.DateTime(), nullable=True),
        sa.Column("is_escalated", sa.Boolean(), nullable=False),
        sa.Column("escalated_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("assigned_to", sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(["assigned_to"], ["users.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_grievances_grievance_number"), "grievances", ["grievance_number"], unique=True)
    op.create_index(op.f("ix_grievances_status"), "grievances", ["status"], unique=False)
    op.create_index(op.f("ix_grievances_user_id"), "grievances", ["user_id"], unique=False)
    op.create_index(op.f("ix_grievances_assigned_to"), "grievances", ["assigned_to"], unique=False)

    op.create_table(
        "verifications",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("verification_type", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=64), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("evidence_files", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("grievance_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["grievance_id"], ["grievances.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_verifications_grievance_id"), "verifications", ["grievance_id"], unique=False)

    op.create_table(
        "blockchain_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("transaction_hash", sa.String(length=66), nullable=False),
        sa.Column("block_number", sa.String(length=32), nullable=True),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("event_data", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("grievance_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["grievance_id"], ["grievances.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transaction_hash"),
    )
    op.create_index(op.f("ix_blockchain_records_grievance_id"), "blockchain_records", ["grievance_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_blockchain_records_grievance_id"), table_name="blockchain_records")
    op.drop_table("blockchain_records")
    op.drop_index(op.f("ix_verifications_grievance_id"), table_name="verifications")
    op.drop_table("verifications")
    op.drop_index(op.f("ix_grievances_assigned_to"), table_name="grievances")
    op.drop_index(op.f("ix_grievances_user_id"), table_name="grievances")
    op.drop_index(op.f("ix_grievances_status"), table_name="grievances")
    op.drop_index(op.f("ix_grievances_grievance_number"), table_name="grievances")
    op.drop_table("grievances")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
