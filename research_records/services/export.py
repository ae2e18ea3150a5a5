"""CSV export of research records."""

import csv
import io
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from research_records.services.research import BOOK_CHAPTER, COPYRIGHT, JOURNAL, ResearchKind

Column = tuple[str, Callable[[Any], Any]]


def _attr(name: str) -> Callable[[Any], Any]:
    return lambda record: getattr(record, name)


def _authors(author_list: str) -> Callable[[Any], str]:
    """Render one author list as ``Name (email); Name (email)``."""

    def render(record: Any) -> str:
        return "; ".join(
            f"{a.user.name or ''} ({a.user.email})" for a in getattr(record, author_list)
        )

    return render


def _keywords(record: Any) -> str:
    return "; ".join(record.keywords or [])


HEAD_COLUMNS: list[Column] = [("ID", _attr("id"))]

TAIL_COLUMNS: list[Column] = [
    ("Registration Fees", _attr("registration_fees")),
    ("Reimbursement", _attr("reimbursement")),
    ("Is Public", _attr("is_public")),
    ("Teacher Status", _attr("teacher_status")),
    ("Student Authors", _authors("student_authors")),
    ("Faculty Authors", _authors("faculty_authors")),
    ("Created At", _attr("created_at")),
    ("Updated At", _attr("updated_at")),
    ("Document URL", _attr("document_url")),
    ("Image URL", _attr("image_url")),
]

KIND_COLUMNS: dict[str, list[Column]] = {
    BOOK_CHAPTER.name: [
        ("Title", _attr("title")),
        ("Abstract", _attr("abstract")),
        ("Status", _attr("book_chapter_status")),
        ("ISBN/ISSN", _attr("isbn_issn")),
        ("Publisher", _attr("publisher")),
        ("DOI", _attr("doi")),
        ("Publication Date", _attr("publication_date")),
        ("Keywords", _keywords),
    ],
    COPYRIGHT.name: [
        ("Serial No", _attr("serial_no")),
        ("Title", _attr("title")),
        ("Abstract", _attr("abstract")),
        ("Status", _attr("status")),
        ("Date of Filing", _attr("date_of_filing")),
        ("Date of Submission", _attr("date_of_submission")),
        ("Date of Published", _attr("date_of_published")),
        ("Date of Grant", _attr("date_of_grant")),
    ],
    JOURNAL.name: [
        ("Serial No", _attr("serial_no")),
        ("Title", _attr("title")),
        ("Journal Name", _attr("journal_name")),
        ("Abstract", _attr("abstract")),
        ("Scope", _attr("scope")),
        ("Review Type", _attr("review_type")),
        ("Access Type", _attr("access_type")),
        ("Indexing", _attr("indexing")),
        ("Quartile", _attr("quartile")),
        ("Publication Mode", _attr("publication_mode")),
        ("Journal Status", _attr("journal_status")),
        ("Impact Factor", _attr("impact_factor")),
        ("Impact Factor Date", _attr("impact_factor_date")),
        ("Publisher", _attr("publisher")),
        ("Paper Link", _attr("paper_link")),
        ("DOI", _attr("doi")),
        ("Publication Date", _attr("publication_date")),
        ("Keywords", _keywords),
    ],
}


def columns_for(kind: ResearchKind) -> list[Column]:
    return HEAD_COLUMNS + KIND_COLUMNS[kind.name] + TAIL_COLUMNS


def format_cell(value: Any) -> Any:
    """Blank for missing values, ISO-8601 UTC for timestamps, enum values as-is."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def render_csv(kind: ResearchKind, records: Iterable[Any]) -> str:
    """Render records as CSV text with a header row."""
    columns = columns_for(kind)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([header for header, _ in columns])
    for record in records:
        writer.writerow([format_cell(getter(record)) for _, getter in columns])
    return buffer.getvalue()


def export_filename(kind: ResearchKind, now: datetime | None = None) -> str:
    """``<kind>s-<UTC timestamp>.csv``, e.g. ``journals-20250101T120000Z.csv``."""
    now = now or datetime.now(timezone.utc)
    prefix = kind.name.replace("_", "-") + "s"
    return f"{prefix}-{now.strftime('%Y%m%dT%H%M%SZ')}.csv"
