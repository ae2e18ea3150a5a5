"""Create research record and author tables.

Revision ID: 002
Revises: 001
Create Date: 2025-01-06

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (record table, author table, author foreign key column)
RECORD_TABLES = (
    ("book_chapters", "book_chapter_authors", "book_chapter_id"),
    ("copyrights", "copyright_authors", "copyright_id"),
    ("journals", "journal_authors", "journal_id"),
)


def record_columns() -> list[sa.Column]:
    """Columns every research record table carries."""
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("registration_fees", sa.Float(), nullable=True),
        sa.Column("reimbursement", sa.Float(), nullable=True),
        sa.Column(
            "teacher_status",
            sa.String(32),
            nullable=False,
            server_default="UPLOADED",
        ),
        sa.Column(
            "is_public",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Visible to every signed-in user when true",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def create_record_indexes(table: str, status_column: str) -> None:
    for column in ("teacher_status", "is_public", "created_at", status_column):
        op.create_index(op.f(f"ix_{table}_{column}"), table, [column])


def create_author_table(table: str, record_table: str, record_column: str) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(record_column, sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("author_type", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f(f"pk_{table}")),
        sa.ForeignKeyConstraint(
            [record_column],
            [f"{record_table}.id"],
            name=op.f(f"fk_{table}_{record_column}_{record_table}"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f(f"fk_{table}_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            record_column,
            "user_id",
            "author_type",
            name=op.f(f"uq_{table}_{record_column}"),
        ),
    )
    op.create_index(op.f(f"ix_{table}_{record_column}"), table, [record_column])
    op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"])


def upgrade() -> None:
    """Create the book chapter, copyright and journal tables with their authors."""
    op.create_table(
        "book_chapters",
        *record_columns(),
        sa.Column(
            "book_chapter_status",
            sa.String(32),
            nullable=False,
            server_default="SUBMITTED",
        ),
        sa.Column("isbn_issn", sa.String(64), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=False),
        sa.Column("doi", sa.String(255), nullable=True),
        sa.Column("publication_date", sa.DateTime(), nullable=True),
        sa.Column("publisher", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_book_chapters")),
    )
    create_record_indexes("book_chapters", "book_chapter_status")

    op.create_table(
        "copyrights",
        *record_columns(),
        sa.Column("serial_no", sa.String(100), nullable=False),
        sa.Column(
            "status",
            sa.String(32),
            nullable=False,
            server_default="SUBMITTED",
        ),
        sa.Column("date_of_filing", sa.DateTime(), nullable=True),
        sa.Column("date_of_submission", sa.DateTime(), nullable=True),
        sa.Column("date_of_published", sa.DateTime(), nullable=True),
        sa.Column("date_of_grant", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_copyrights")),
    )
    create_record_indexes("copyrights", "status")
    op.create_index(op.f("ix_copyrights_serial_no"), "copyrights", ["serial_no"])

    op.create_table(
        "journals",
        *record_columns(),
        sa.Column("serial_no", sa.String(100), nullable=False),
        sa.Column("journal_name", sa.String(500), nullable=False),
        sa.Column("scope", sa.String(32), nullable=False),
        sa.Column("review_type", sa.String(32), nullable=False),
        sa.Column("access_type", sa.String(32), nullable=False),
        sa.Column("indexing", sa.String(32), nullable=False),
        sa.Column(
            "quartile",
            sa.String(32),
            nullable=False,
            server_default="NOT_APPLICABLE",
        ),
        sa.Column("publication_mode", sa.String(32), nullable=False),
        sa.Column("impact_factor", sa.Float(), nullable=True),
        sa.Column("impact_factor_date", sa.DateTime(), nullable=True),
        sa.Column("publisher", sa.String(255), nullable=True),
        sa.Column("publication_date", sa.DateTime(), nullable=True),
        sa.Column("doi", sa.String(255), nullable=True),
        sa.Column("paper_link", sa.Text(), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=False),
        sa.Column(
            "journal_status",
            sa.String(32),
            nullable=False,
            server_default="SUBMITTED",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_journals")),
    )
    create_record_indexes("journals", "journal_status")
    op.create_index(op.f("ix_journals_serial_no"), "journals", ["serial_no"])

    for record_table, author_table, record_column in RECORD_TABLES:
        create_author_table(author_table, record_table, record_column)


def downgrade() -> None:
    """Drop the research tables (authors first)."""
    for record_table, author_table, _ in reversed(RECORD_TABLES):
        op.drop_table(author_table)
        op.drop_table(record_table)
