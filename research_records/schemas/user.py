"""User and authentication Pydantic schemas."""

from uuid import UUID

from pydantic import EmailStr, Field

from research_records.models.enums import UserRole
from research_records.schemas.base import CamelModel, UTCDateTime


class UserSummary(CamelModel):
    """Public part of a user, embedded in author lists."""

    id: UUID
    name: str | None = None
    email: str
    image: str | None = None


class UserResponse(UserSummary):
    """Schema for user response."""

    role: UserRole
    provider: str
    created_at: UTCDateTime


class UserListResponse(CamelModel):
    """Paginated author picker results."""

    success: bool = True
    data: list[UserResponse]
    count: int
    total: int
    page: int
    limit: int
    has_more: bool


class LoginRequest(CamelModel):
    """Credentials sign-in."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=255)


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class AuthStatus(CamelModel):
    authenticated: bool
    user: UserResponse | None = None


class SpecialUserCreate(CamelModel):
    """Schema for adding an email to the role allow-list."""

    email: EmailStr
    role: UserRole


class SpecialUserUpdate(SpecialUserCreate):
    """Schema for changing the role of an allow-listed email."""


class SpecialUserDelete(CamelModel):
    email: EmailStr


class SpecialUserResponse(CamelModel):
    id: int
    email: str
    role: UserRole
    created_at: UTCDateTime
