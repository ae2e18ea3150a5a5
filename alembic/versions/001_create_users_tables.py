"""Create users and special users tables.

Revision ID: 001
Revises:
Create Date: 2025-01-06

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users and special_users tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=True,
            comment="bcrypt hash, only set for credential logins",
        ),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default="STUDENT",
        ),
        sa.Column(
            "provider",
            sa.String(50),
            nullable=False,
            server_default="credentials",
            comment="Sign-in provider: 'credentials', 'google' or 'microsoft'",
        ),
        sa.Column(
            "provider_id",
            sa.String(255),
            nullable=True,
            comment="User ID from the OAuth provider",
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
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"])

    op.create_table(
        "special_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_special_users")),
    )
    op.create_index(
        op.f("ix_special_users_email"),
        "special_users",
        ["email"],
        unique=True,
    )


def downgrade() -> None:
    """Drop the users and special_users tables."""
    op.drop_index(op.f("ix_special_users_email"), table_name="special_users")
    op.drop_table("special_users")
    op.drop_index(op.f("ix_users_role"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
