"""SQLAlchemy models.

All models should be imported here for Alembic to detect them.
"""

from research_records.core.database import Base
from research_records.models.enums import AuthorType, UserRole
from research_records.models.research import (
    BookChapter,
    BookChapterAuthor,
    Copyright,
    CopyrightAuthor,
    Journal,
    JournalAuthor,
)
from research_records.models.user import SpecialUser, User

__all__ = [
    "Base",
    "AuthorType",
    "UserRole",
    "User",
    "SpecialUser",
    "BookChapter",
    "BookChapterAuthor",
    "Copyright",
    "CopyrightAuthor",
    "Journal",
    "JournalAuthor",
]
