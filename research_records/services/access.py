"""Access scopes: which research records a caller may see.

A scope is resolved once per request from the caller's role and then applied
as an opaque pre-filter, both to SQL queries (``where_clause``) and to single
loaded records (``permits``). Nothing downstream inspects roles.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import ColumnElement, or_, true

from research_records.models.enums import UserRole
from research_records.models.user import User


@dataclass(frozen=True)
class AllRecords:
    """Unrestricted access (administrators)."""

    def where_clause(self, model) -> ColumnElement[bool]:
        return true()

    def permits(self, record) -> bool:
        return True


@dataclass(frozen=True)
class PublicOrAuthoredBy:
    """Public records plus the ones the user is an author of."""

    user_id: UUID

    def where_clause(self, model) -> ColumnElement[bool]:
        author_model = model.authors.property.mapper.class_
        return or_(
            model.is_public == True,  # noqa: E712
            model.authors.any(author_model.user_id == self.user_id),
        )

    def permits(self, record) -> bool:
        return record.is_public or record.is_authored_by(self.user_id)


@dataclass(frozen=True)
class PublicOnly:
    """Anonymous callers only see public records."""

    def where_clause(self, model) -> ColumnElement[bool]:
        return model.is_public == True  # noqa: E712

    def permits(self, record) -> bool:
        return bool(record.is_public)


AccessScope = AllRecords | PublicOrAuthoredBy | PublicOnly


def scope_for(user: User | None) -> AccessScope:
    """Resolve the access scope for a (possibly anonymous) caller."""
    if user is None:
        return PublicOnly()
    if user.role == UserRole.ADMIN:
        return AllRecords()
    return PublicOrAuthoredBy(user_id=user.id)
