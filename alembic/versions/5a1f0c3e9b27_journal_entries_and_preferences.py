"""Journal entries and preferences

Revision ID: 5a1f0c3e9b27
Revises:
Create Date: 2026-09-02 19:41:07.512836

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5a1f0c3e9b27"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("question_text", sa.String(), nullable=False),
        sa.Column("answer_text", sa.String(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("cycle_number", sa.Integer(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "question_id >= 1 AND question_id <= 30",
            name=op.f("ck_journal_entries_question_id_range"),
        ),
        sa.CheckConstraint(
            "day_number >= 1 AND day_number <= 30",
            name=op.f("ck_journal_entries_day_number_range"),
        ),
        sa.CheckConstraint(
            "cycle_number >= 1", name=op.f("ck_journal_entries_cycle_number_positive")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_journal_entries")),
        sa.UniqueConstraint("id", name=op.f("uq_journal_entries_id")),
    )
    op.create_index(
        op.f("ix_journal_entries_question_id"),
        "journal_entries",
        ["question_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_journal_entries_timestamp"),
        "journal_entries",
        ["timestamp"],
        unique=False,
    )
    op.create_table(
        "preferences",
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_preferences")),
        sa.UniqueConstraint("key", name=op.f("uq_preferences_key")),
    )


def downgrade():
    op.drop_table("preferences")
    op.drop_index(op.f("ix_journal_entries_timestamp"), table_name="journal_entries")
    op.drop_index(op.f("ix_journal_entries_question_id"), table_name="journal_entries")
    op.drop_table("journal_entries")
