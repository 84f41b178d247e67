"""create tutor, subject and education level tables

Revision ID: 4c1e2b7d9a10
Revises:
Create Date: 2026-10-19 10:12:31.204518
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "4c1e2b7d9a10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.UniqueConstraint("name", name="uq_subjects_name"),
        sa.PrimaryKeyConstraint("id", name="pk_subjects"),
    )
    op.create_table(
        "education_levels",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.UniqueConstraint("name", name="uq_education_levels_name"),
        sa.PrimaryKeyConstraint("id", name="pk_education_levels"),
    )
    op.create_table(
        "tutors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("birth_date", sa.String(length=10), nullable=False),
        sa.Column("cpf", sa.String(length=14), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tutors"),
    )
    # unique index backs the request-level duplicate email check
    op.create_index("ix_tutors_email", "tutors", ["email"], unique=True)

    op.create_table(
        "tutor_subjects",
        sa.Column("tutor_id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tutor_id"], ["tutors.id"],
            name="fk_tutor_subjects_tutor_id_tutors", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["subject_id"], ["subjects.id"],
            name="fk_tutor_subjects_subject_id_subjects", ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("tutor_id", "subject_id", name="pk_tutor_subjects"),
    )
    op.create_table(
        "tutor_education_levels",
        sa.Column("tutor_id", sa.Integer(), nullable=False),
        sa.Column("education_level_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tutor_id"], ["tutors.id"],
            name="fk_tutor_education_levels_tutor_id_tutors", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["education_level_id"], ["education_levels.id"],
            name="fk_tutor_education_levels_education_level_id_education_levels",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("tutor_id", "education_level_id", name="pk_tutor_education_levels"),
    )


def downgrade() -> None:
    op.drop_table("tutor_education_levels")
    op.drop_table("tutor_subjects")
    op.drop_index("ix_tutors_email", table_name="tutors")
    op.drop_table("tutors")
    op.drop_table("education_levels")
    op.drop_table("subjects")
