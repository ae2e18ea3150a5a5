"""Book chapter record endpoints."""

import time
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request, Response, status

from research_records.api.v1.params import BookChapterFilters, Paging
from research_records.core.database import AsyncSessionDep, SessionFactoryDep
from research_records.core.deps import Aggregator, CallerScope, CurrentUser, StaffUser
from research_records.core.observability import (
    record_research_operation,
    record_stats_computation,
)
from research_records.core.rate_limit import (
    RATE_LIMIT_API,
    RATE_LIMIT_CREATE_RECORD,
    RATE_LIMIT_EXPORT,
    limiter,
)
from research_records.models.enums import UserRole
from research_records.schemas.base import Pagination
from research_records.schemas.research import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BookChapterCreate,
    BookChapterEnvelope,
    BookChapterListResponse,
    BookChapterResponse,
    BookChapterUpdate,
)
from research_records.schemas.stats import BookChapterStats
from research_records.services import export_service, research_service, stats_service
from research_records.services.access import scope_for

logger = structlog.get_logger()

router = APIRouter(prefix="/research/book-chapter", tags=["book-chapters"])

KIND = research_service.BOOK_CHAPTER


@router.get("", response_model=BookChapterListResponse)
@limiter.limit(RATE_LIMIT_API)
async def list_book_chapters(
    request: Request,
    scope: CallerScope,
    filters: BookChapterFilters,
    paging: Paging,
    session: AsyncSessionDep,
) -> BookChapterListResponse:
    """List book chapters visible to the caller (paginated, filterable).

    Anonymous callers only see public records.
    """
    try:
        records, total = await research_service.list_records(
            session=session,
            kind=KIND,
            scope=scope,
            filters=filters,
            page=paging.page,
            limit=paging.limit,
            sort_by=paging.sort_by,
            sort_order=paging.sort_order,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BookChapterListResponse(
        book_chapters=[BookChapterResponse.model_validate(record) for record in records],
        pagination=Pagination(
            total=total,
            page=paging.page,
            limit=paging.limit,
            total_pages=research_service.total_pages(total, paging.limit),
        ),
    )


@router.post("", response_model=BookChapterEnvelope, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_CREATE_RECORD)
async def create_book_chapter(
    request: Request,
    data: BookChapterCreate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> BookChapterEnvelope:
    """Create a book chapter with at least one faculty and one student author."""
    try:
        record = await research_service.create_record(session, KIND, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info(
        "Book chapter created",
        chapter_id=str(record.id),
        user_id=str(user.id),
    )
    record_research_operation(KIND.name, "create")
    return BookChapterEnvelope(book_chapter=BookChapterResponse.model_validate(record))


@router.delete("", response_model=BulkDeleteResponse)
@limiter.limit(RATE_LIMIT_API)
async def bulk_delete_book_chapters(
    request: Request,
    data: BulkDeleteRequest,
    user: StaffUser,
    session: AsyncSessionDep,
) -> BulkDeleteResponse:
    """Delete several book chapters at once. Students may not delete."""
    try:
        count = await research_service.bulk_delete_records(session, KIND, data.ids)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info("Book chapters deleted", count=count, user_id=str(user.id))
    record_research_operation(KIND.name, "bulk_delete", count)
    return BulkDeleteResponse(message=f"Deleted {count} book chapter(s)", count=count)


@router.get("/export")
@limiter.limit(RATE_LIMIT_EXPORT)
async def export_book_chapters(
    request: Request,
    user: CurrentUser,
    filters: BookChapterFilters,
    session: AsyncSessionDep,
) -> Response:
    """Download every matching book chapter in scope as CSV."""
    records = await research_service.list_for_export(
        session, KIND, scope_for(user), filters
    )
    record_research_operation(KIND.name, "export")
    return Response(
        content=export_service.render_csv(KIND, records),
        media_type="text/csv",
        headers={
            "Content-Disposition": (
                f'attachment; filename="{export_service.export_filename(KIND)}"'
            )
        },
    )


@router.get("/stats", response_model=BookChapterStats)
@limiter.limit(RATE_LIMIT_API)
async def book_chapter_stats(
    request: Request,
    user: CurrentUser,
    session_factory: SessionFactoryDep,
    aggregator: Aggregator,
) -> BookChapterStats:
    """Dashboard statistics over the book chapters the caller can see."""
    start_time = time.perf_counter()
    stats = await stats_service.compute_stats(
        session_factory=session_factory,
        kind=KIND,
        scope=scope_for(user),
        aggregator=aggregator,
        user_role=user.role,
    )
    record_stats_computation(KIND.name, time.perf_counter() - start_time)
    return stats


@router.get("/{chapter_id}", response_model=BookChapterEnvelope)
@limiter.limit(RATE_LIMIT_API)
async def get_book_chapter(
    request: Request,
    chapter_id: UUID,
    scope: CallerScope,
    session: AsyncSessionDep,
) -> BookChapterEnvelope:
    """Get a specific book chapter by ID."""
    record = await research_service.get_record(session, KIND, chapter_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book chapter not found",
        )
    if not scope.permits(record):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this book chapter",
        )
    return BookChapterEnvelope(book_chapter=BookChapterResponse.model_validate(record))


@router.patch("/{chapter_id}", response_model=BookChapterEnvelope)
@limiter.limit(RATE_LIMIT_API)
async def update_book_chapter(
    request: Request,
    chapter_id: UUID,
    data: BookChapterUpdate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> BookChapterEnvelope:
    """Update a book chapter. Allowed for admins and the record's authors."""
    record = await research_service.get_record(session, KIND, chapter_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book chapter not found",
        )
    if user.role != UserRole.ADMIN and not record.is_authored_by(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and authors can update this book chapter",
        )

    try:
        updated = await research_service.update_record(session, KIND, record, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info(
        "Book chapter updated",
        chapter_id=str(chapter_id),
        user_id=str(user.id),
        fields=sorted(data.model_fields_set),
    )
    record_research_operation(KIND.name, "update")
    return BookChapterEnvelope(book_chapter=BookChapterResponse.model_validate(updated))


@router.delete("/{chapter_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(RATE_LIMIT_API)
async def delete_book_chapter(
    request: Request,
    chapter_id: UUID,
    user: StaffUser,
    session: AsyncSessionDep,
) -> None:
    """Delete a book chapter. Students may not delete."""
    record = await research_service.get_record(session, KIND, chapter_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book chapter not found",
        )

    await research_service.delete_record(session, record)
    await session.commit()

    logger.info("Book chapter deleted", chapter_id=str(chapter_id), user_id=str(user.id))
    record_research_operation(KIND.name, "delete")
