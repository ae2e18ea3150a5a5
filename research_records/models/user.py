"""User and special user SQLAlchemy models."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import Enum, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from research_records.core.database import Base
from research_records.models.enums import UserRole


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def role_column() -> Enum:
    return Enum(UserRole, native_enum=False, length=20, name="user_role")


class User(Base):
    """User model for credential and OAuth-authenticated users."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt hash, only set for credential logins",
    )
    role: Mapped[UserRole] = mapped_column(
        role_column(),
        default=UserRole.STUDENT,
        nullable=False,
        index=True,
    )
    provider: Mapped[str] = mapped_column(
        String(50),
        default="credentials",
        nullable=False,
        comment="Sign-in provider: 'credentials', 'google' or 'microsoft'",
    )
    provider_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="User ID from the OAuth provider",
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role.value}>"


class SpecialUser(Base):
    """Role allow-list entry; decides a user's role at sign-in."""

    __tablename__ = "special_users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    role: Mapped[UserRole] = mapped_column(role_column(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SpecialUser {self.email} role={self.role.value}>"
