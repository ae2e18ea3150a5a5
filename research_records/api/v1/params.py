"""Query parameter dependencies shared by the research record routers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from fastapi import Depends, HTTPException, Query, status

from research_records.models.enums import (
    JournalAccessType,
    JournalIndexing,
    JournalPublicationMode,
    JournalQuartile,
    JournalReviewType,
    JournalScope,
    ResearchStatus,
    TeacherStatus,
)
from research_records.schemas.base import to_naive_utc
from research_records.services.research import RecordFilters


@dataclass
class ListParams:
    page: int
    limit: int
    sort_by: str
    sort_order: str


async def list_params(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    sort_by: Annotated[str, Query(alias="sortBy")] = "createdAt",
    sort_order: Annotated[Literal["asc", "desc"], Query(alias="sortOrder")] = "desc",
) -> ListParams:
    return ListParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def parse_id_list(raw: str | None, name: str) -> list[UUID]:
    """Parse a comma separated list of UUIDs; blanks are ignored."""
    if not raw:
        return []
    try:
        return [UUID(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be a comma separated list of UUIDs",
        )


def date_range(low: datetime | None, high: datetime | None) -> tuple[datetime | None, datetime | None]:
    return to_naive_utc(low), to_naive_utc(high)


async def common_filters(
    is_public: Annotated[bool | None, Query(alias="isPublic")] = None,
    search: str | None = None,
    teacher_status: Annotated[TeacherStatus | None, Query(alias="teacherStatus")] = None,
    created_from: Annotated[datetime | None, Query(alias="createdFrom")] = None,
    created_to: Annotated[datetime | None, Query(alias="createdTo")] = None,
    min_registration_fees: Annotated[float | None, Query(alias="minRegistrationFees")] = None,
    max_registration_fees: Annotated[float | None, Query(alias="maxRegistrationFees")] = None,
    min_reimbursement: Annotated[float | None, Query(alias="minReimbursement")] = None,
    max_reimbursement: Annotated[float | None, Query(alias="maxReimbursement")] = None,
    faculty_author_ids: Annotated[str | None, Query(alias="facultyAuthorIds")] = None,
    student_author_ids: Annotated[str | None, Query(alias="studentAuthorIds")] = None,
) -> RecordFilters:
    """Filters every research kind supports."""
    return RecordFilters(
        is_public=is_public,
        search=search.strip() if search else None,
        faculty_author_ids=parse_id_list(faculty_author_ids, "facultyAuthorIds"),
        student_author_ids=parse_id_list(student_author_ids, "studentAuthorIds"),
        equals={"teacher_status": teacher_status},
        ranges={
            "created_at": date_range(created_from, created_to),
            "registration_fees": (min_registration_fees, max_registration_fees),
            "reimbursement": (min_reimbursement, max_reimbursement),
        },
    )


CommonFilters = Annotated[RecordFilters, Depends(common_filters)]


async def book_chapter_filters(
    filters: CommonFilters,
    book_chapter_status: Annotated[ResearchStatus | None, Query(alias="bookChapterStatus")] = None,
    keyword: str | None = None,
    publisher: str | None = None,
    published_from: Annotated[datetime | None, Query(alias="publishedFrom")] = None,
    published_to: Annotated[datetime | None, Query(alias="publishedTo")] = None,
) -> RecordFilters:
    filters.equals["book_chapter_status"] = book_chapter_status
    filters.keyword = keyword
    filters.contains["publisher"] = publisher
    filters.ranges["publication_date"] = date_range(published_from, published_to)
    return filters


async def copyright_filters(
    filters: CommonFilters,
    copyright_status: Annotated[ResearchStatus | None, Query(alias="status")] = None,
    serial_no: Annotated[str | None, Query(alias="serialNo")] = None,
    filing_from: Annotated[datetime | None, Query(alias="filingFrom")] = None,
    filing_to: Annotated[datetime | None, Query(alias="filingTo")] = None,
    submission_from: Annotated[datetime | None, Query(alias="submissionFrom")] = None,
    submission_to: Annotated[datetime | None, Query(alias="submissionTo")] = None,
    published_from: Annotated[datetime | None, Query(alias="publishedFrom")] = None,
    published_to: Annotated[datetime | None, Query(alias="publishedTo")] = None,
    grant_from: Annotated[datetime | None, Query(alias="grantFrom")] = None,
    grant_to: Annotated[datetime | None, Query(alias="grantTo")] = None,
) -> RecordFilters:
    filters.equals["status"] = copyright_status
    filters.contains["serial_no"] = serial_no
    filters.ranges.update(
        {
            "date_of_filing": date_range(filing_from, filing_to),
            "date_of_submission": date_range(submission_from, submission_to),
            "date_of_published": date_range(published_from, published_to),
            "date_of_grant": date_range(grant_from, grant_to),
        }
    )
    return filters


async def journal_filters(
    filters: CommonFilters,
    journal_status: Annotated[ResearchStatus | None, Query(alias="journalStatus")] = None,
    scope: JournalScope | None = None,
    review_type: Annotated[JournalReviewType | None, Query(alias="reviewType")] = None,
    access_type: Annotated[JournalAccessType | None, Query(alias="accessType")] = None,
    indexing: JournalIndexing | None = None,
    quartile: JournalQuartile | None = None,
    publication_mode: Annotated[
        JournalPublicationMode | None, Query(alias="publicationMode")
    ] = None,
    keyword: str | None = None,
    publisher: str | None = None,
    published_from: Annotated[datetime | None, Query(alias="publishedFrom")] = None,
    published_to: Annotated[datetime | None, Query(alias="publishedTo")] = None,
    min_impact_factor: Annotated[float | None, Query(alias="minImpactFactor")] = None,
    max_impact_factor: Annotated[float | None, Query(alias="maxImpactFactor")] = None,
) -> RecordFilters:
    filters.equals.update(
        {
            "journal_status": journal_status,
            "scope": scope,
            "review_type": review_type,
            "access_type": access_type,
            "indexing": indexing,
            "quartile": quartile,
            "publication_mode": publication_mode,
        }
    )
    filters.keyword = keyword
    filters.contains["publisher"] = publisher
    filters.ranges.update(
        {
            "publication_date": date_range(published_from, published_to),
            "impact_factor": (min_impact_factor, max_impact_factor),
        }
    )
    return filters


Paging = Annotated[ListParams, Depends(list_params)]
BookChapterFilters = Annotated[RecordFilters, Depends(book_chapter_filters)]
CopyrightFilters = Annotated[RecordFilters, Depends(copyright_filters)]
JournalFilters = Annotated[RecordFilters, Depends(journal_filters)]
