"""Research record service: filtering, pagination and CRUD for every kind.

Book chapters, copyrights and journals share one code path. A ``ResearchKind``
describes what differs between them (model, author table, searchable and
sortable columns); everything else is generic.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from pydantic.alias_generators import to_snake
from sqlalchemy import ColumnElement, String, and_, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from research_records.models.enums import AuthorType, UserRole
from research_records.models.research import (
    BookChapter,
    BookChapterAuthor,
    Copyright,
    CopyrightAuthor,
    Journal,
    JournalAuthor,
)
from research_records.models.user import User
from research_records.schemas.research import RecordCreate, RecordUpdate
from research_records.services.access import AccessScope

AUTHOR_ID_FIELDS = {
    "faculty_author_ids": AuthorType.FACULTY,
    "student_author_ids": AuthorType.STUDENT,
}

COMMON_SORT_FIELDS = frozenset(
    {
        "created_at",
        "updated_at",
        "title",
        "registration_fees",
        "reimbursement",
        "teacher_status",
        "is_public",
    }
)


@dataclass(frozen=True)
class ResearchKind:
    """What differs between research record kinds."""

    name: str  # metric label and CSV file prefix
    label: str  # human-readable, used in error messages
    model: type
    author_model: type
    status_field: str
    search_fields: tuple[str, ...]
    sort_fields: frozenset[str]
    unique_serial_no: bool = False


BOOK_CHAPTER = ResearchKind(
    name="book_chapter",
    label="Book chapter",
    model=BookChapter,
    author_model=BookChapterAuthor,
    status_field="book_chapter_status",
    search_fields=("title", "abstract", "publisher", "isbn_issn", "doi"),
    sort_fields=COMMON_SORT_FIELDS | {"book_chapter_status", "publication_date", "publisher"},
)

COPYRIGHT = ResearchKind(
    name="copyright",
    label="Copyright",
    model=Copyright,
    author_model=CopyrightAuthor,
    status_field="status",
    search_fields=("title", "abstract", "serial_no"),
    sort_fields=COMMON_SORT_FIELDS
    | {
        "serial_no",
        "status",
        "date_of_filing",
        "date_of_submission",
        "date_of_published",
        "date_of_grant",
    },
)

JOURNAL = ResearchKind(
    name="journal",
    label="Journal",
    model=Journal,
    author_model=JournalAuthor,
    status_field="journal_status",
    search_fields=("title", "journal_name", "abstract", "publisher", "serial_no", "doi"),
    sort_fields=COMMON_SORT_FIELDS
    | {
        "serial_no",
        "journal_name",
        "journal_status",
        "scope",
        "indexing",
        "quartile",
        "impact_factor",
        "publication_date",
    },
    unique_serial_no=True,
)


@dataclass
class RecordFilters:
    """Query filters for listing and exporting records.

    ``equals`` maps a column to the value it must hold, ``contains`` to a
    case-insensitive substring and ``ranges`` to inclusive (low, high) bounds,
    either of which may be None.
    """

    is_public: bool | None = None
    search: str | None = None
    keyword: str | None = None
    faculty_author_ids: list[UUID] = field(default_factory=list)
    student_author_ids: list[UUID] = field(default_factory=list)
    equals: dict[str, Any] = field(default_factory=dict)
    contains: dict[str, str] = field(default_factory=dict)
    ranges: dict[str, tuple[Any, Any]] = field(default_factory=dict)


def build_conditions(
    kind: ResearchKind,
    scope: AccessScope,
    filters: RecordFilters,
) -> list[ColumnElement[bool]]:
    """Translate filters into WHERE conditions, scope first.

    Every condition is ANDed, so nothing here can widen the scope.
    """
    model = kind.model
    author = kind.author_model
    conditions: list[ColumnElement[bool]] = [scope.where_clause(model)]

    if filters.is_public is not None:
        conditions.append(model.is_public == filters.is_public)

    for name, value in filters.equals.items():
        if value is not None:
            conditions.append(getattr(model, name) == value)

    for name, text in filters.contains.items():
        if text:
            conditions.append(getattr(model, name).icontains(text, autoescape=True))

    for name, (low, high) in filters.ranges.items():
        column = getattr(model, name)
        if low is not None:
            conditions.append(column >= low)
        if high is not None:
            conditions.append(column <= high)

    if filters.keyword:
        # Exact element match against the stored JSON array text
        conditions.append(
            cast(model.keywords, String).contains(
                json.dumps(filters.keyword), autoescape=True
            )
        )

    for ids, author_type in (
        (filters.faculty_author_ids, AuthorType.FACULTY),
        (filters.student_author_ids, AuthorType.STUDENT),
    ):
        if ids:
            conditions.append(
                model.authors.any(
                    and_(author.author_type == author_type, author.user_id.in_(ids))
                )
            )

    if filters.search:
        conditions.append(
            or_(
                *(
                    getattr(model, name).icontains(filters.search, autoescape=True)
                    for name in kind.search_fields
                )
            )
        )

    return conditions


def resolve_sort_field(kind: ResearchKind, sort_by: str) -> str:
    """Map a ``sortBy`` value (camelCase or snake_case) to a column name.

    Raises ValueError for columns outside the kind's allow-list.
    """
    name = to_snake(sort_by)
    if name not in kind.sort_fields:
        raise ValueError(f"Cannot sort by '{sort_by}'")
    return name


def _with_authors(kind: ResearchKind):
    return selectinload(kind.model.authors).selectinload(kind.author_model.user)


async def list_records(
    session: AsyncSession,
    kind: ResearchKind,
    scope: AccessScope,
    filters: RecordFilters,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[Any], int]:
    """Get a page of records visible in ``scope``.

    Returns tuple of (records, total_count).
    """
    model = kind.model
    column = getattr(model, resolve_sort_field(kind, sort_by))
    if sort_order not in ("asc", "desc"):
        raise ValueError("sortOrder must be 'asc' or 'desc'")

    conditions = build_conditions(kind, scope, filters)

    count_query = select(func.count()).select_from(model).where(*conditions)
    total = (await session.execute(count_query)).scalar() or 0

    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = (
        select(model)
        .where(*conditions)
        .options(_with_authors(kind))
        # id breaks ties so pages never overlap
        .order_by(ordering, model.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(query)
    return list(result.scalars().all()), total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total > 0 else 0


async def list_for_export(
    session: AsyncSession,
    kind: ResearchKind,
    scope: AccessScope,
    filters: RecordFilters,
) -> list[Any]:
    """All matching records in scope, newest first."""
    model = kind.model
    query = (
        select(model)
        .where(*build_conditions(kind, scope, filters))
        .options(_with_authors(kind))
        .order_by(model.created_at.desc(), model.id)
    )
    result = await session.execute(query)
    return list(result.scalars().all())


async def get_record(
    session: AsyncSession,
    kind: ResearchKind,
    record_id: UUID,
    refresh: bool = False,
) -> Any | None:
    """Get a record by ID with its authors (and their users) loaded.

    ``refresh`` overwrites already-loaded instances in the identity map.
    """
    model = kind.model
    query = select(model).where(model.id == record_id).options(_with_authors(kind))
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await session.execute(query)
    return result.scalar_one_or_none()


def _dedupe(ids: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))


async def validate_authors(
    session: AsyncSession,
    user_ids: list[UUID],
    author_type: AuthorType,
) -> None:
    """Check that every id belongs to a user with the matching role.

    Raises ValueError if the list is empty or any id does not qualify.
    """
    label = author_type.value.lower()
    if not user_ids:
        raise ValueError(f"At least one {label} author is required")

    role = UserRole.FACULTY if author_type == AuthorType.FACULTY else UserRole.STUDENT
    unique_ids = set(user_ids)
    result = await session.execute(
        select(func.count(User.id)).where(User.id.in_(unique_ids), User.role == role)
    )
    if result.scalar_one() != len(unique_ids):
        raise ValueError(f"One or more {label} authors are invalid")


async def _check_serial_no(
    session: AsyncSession,
    kind: ResearchKind,
    serial_no: str,
    exclude_id: UUID | None = None,
) -> None:
    model = kind.model
    query = select(model.id).where(model.serial_no == serial_no)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    if (await session.execute(query)).first() is not None:
        raise ValueError(
            f"A {kind.label.lower()} with this serial number already exists"
        )


async def create_record(
    session: AsyncSession,
    kind: ResearchKind,
    data: RecordCreate,
) -> Any:
    """Create a record with its faculty and student authors.

    Raises ValueError on invalid authors or a duplicate serial number.
    """
    fields = data.model_dump(exclude=set(AUTHOR_ID_FIELDS))
    authors = []
    for id_field, author_type in AUTHOR_ID_FIELDS.items():
        user_ids = _dedupe(getattr(data, id_field))
        await validate_authors(session, user_ids, author_type)
        authors.extend(
            kind.author_model(user_id=user_id, author_type=author_type)
            for user_id in user_ids
        )

    if kind.unique_serial_no:
        await _check_serial_no(session, kind, data.serial_no)

    record = kind.model(**fields, authors=authors)
    session.add(record)
    await session.flush()
    return await get_record(session, kind, record.id, refresh=True)


def _replace_authors(
    kind: ResearchKind,
    record: Any,
    author_type: AuthorType,
    user_ids: list[UUID],
) -> None:
    """Make ``user_ids`` the record's authors of one type.

    Links that survive are kept as-is so the unique constraint never sees
    a delete and re-insert of the same row.
    """
    wanted = set(user_ids)
    kept = [
        a for a in record.authors
        if a.author_type != author_type or a.user_id in wanted
    ]
    present = {a.user_id for a in kept if a.author_type == author_type}
    kept.extend(
        kind.author_model(user_id=user_id, author_type=author_type)
        for user_id in user_ids
        if user_id not in present
    )
    record.authors = kept


async def update_record(
    session: AsyncSession,
    kind: ResearchKind,
    record: Any,
    data: RecordUpdate,
) -> Any:
    """Apply the fields present in ``data``; author lists are replaced.

    Raises ValueError on invalid authors or a duplicate serial number.
    """
    changes = data.model_dump(exclude_unset=True)

    for id_field, author_type in AUTHOR_ID_FIELDS.items():
        if id_field not in changes:
            continue
        user_ids = _dedupe(changes.pop(id_field))
        await validate_authors(session, user_ids, author_type)
        _replace_authors(kind, record, author_type, user_ids)

    if kind.unique_serial_no and changes.get("serial_no"):
        await _check_serial_no(session, kind, changes["serial_no"], exclude_id=record.id)

    for name, value in changes.items():
        setattr(record, name, value)

    await session.flush()
    return await get_record(session, kind, record.id, refresh=True)


async def delete_record(session: AsyncSession, record: Any) -> None:
    """Delete a record; its author links cascade."""
    await session.delete(record)
    await session.flush()


async def bulk_delete_records(
    session: AsyncSession,
    kind: ResearchKind,
    ids: list[UUID],
) -> int:
    """Delete every record whose id is listed; unknown ids are skipped.

    Returns the number of records deleted. Raises ValueError if ``ids`` is
    empty.
    """
    if not ids:
        raise ValueError("No record ids provided")

    model = kind.model
    result = await session.execute(
        select(model).where(model.id.in_(set(ids))).options(selectinload(model.authors))
    )
    records = list(result.scalars().all())
    for record in records:
        await session.delete(record)
    await session.flush()
    return len(records)
