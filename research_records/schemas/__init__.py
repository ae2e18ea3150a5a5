"""Pydantic schemas."""

from research_records.schemas.base import CamelModel, MessageResponse, Pagination
from research_records.schemas.research import (
    BookChapterCreate,
    BookChapterEnvelope,
    BookChapterListResponse,
    BookChapterResponse,
    BookChapterUpdate,
    BulkDeleteRequest,
    BulkDeleteResponse,
    CopyrightCreate,
    CopyrightEnvelope,
    CopyrightListResponse,
    CopyrightResponse,
    CopyrightUpdate,
    JournalCreate,
    JournalEnvelope,
    JournalListResponse,
    JournalResponse,
    JournalUpdate,
)
from research_records.schemas.stats import BookChapterStats, CopyrightStats, JournalStats
from research_records.schemas.user import (
    AuthStatus,
    LoginRequest,
    SpecialUserCreate,
    SpecialUserDelete,
    SpecialUserResponse,
    SpecialUserUpdate,
    TokenResponse,
    UserListResponse,
    UserResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "Pagination",
    # Research records
    "BookChapterCreate",
    "BookChapterEnvelope",
    "BookChapterListResponse",
    "BookChapterResponse",
    "BookChapterUpdate",
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "CopyrightCreate",
    "CopyrightEnvelope",
    "CopyrightListResponse",
    "CopyrightResponse",
    "CopyrightUpdate",
    "JournalCreate",
    "JournalEnvelope",
    "JournalListResponse",
    "JournalResponse",
    "JournalUpdate",
    # Statistics
    "BookChapterStats",
    "CopyrightStats",
    "JournalStats",
    # Users and auth
    "AuthStatus",
    "LoginRequest",
    "SpecialUserCreate",
    "SpecialUserDelete",
    "SpecialUserResponse",
    "SpecialUserUpdate",
    "TokenResponse",
    "UserListResponse",
    "UserResponse",
]
