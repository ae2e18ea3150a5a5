"""Copyright record endpoints."""

import time
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request, Response, status

from research_records.api.v1.params import CopyrightFilters, Paging
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
    CopyrightCreate,
    CopyrightEnvelope,
    CopyrightListResponse,
    CopyrightResponse,
    CopyrightUpdate,
)
from research_records.schemas.stats import CopyrightStats
from research_records.services import export_service, research_service, stats_service
from research_records.services.access import scope_for

logger = structlog.get_logger()

router = APIRouter(prefix="/research/copyright", tags=["copyrights"])

KIND = research_service.COPYRIGHT


@router.get("", response_model=CopyrightListResponse)
@limiter.limit(RATE_LIMIT_API)
async def list_copyrights(
    request: Request,
    scope: CallerScope,
    filters: CopyrightFilters,
    paging: Paging,
    session: AsyncSessionDep,
) -> CopyrightListResponse:
    """List copyrights visible to the caller (paginated, filterable).

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

    return CopyrightListResponse(
        copyrights=[CopyrightResponse.model_validate(record) for record in records],
        pagination=Pagination(
            total=total,
            page=paging.page,
            limit=paging.limit,
            total_pages=research_service.total_pages(total, paging.limit),
        ),
    )


@router.post("", response_model=CopyrightEnvelope, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_CREATE_RECORD)
async def create_copyright(
    request: Request,
    data: CopyrightCreate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> CopyrightEnvelope:
    """Create a copyright with at least one faculty and one student author."""
    try:
        record = await research_service.create_record(session, KIND, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info(
        "Copyright created",
        copyright_id=str(record.id),
        serial_no=record.serial_no,
        user_id=str(user.id),
    )
    record_research_operation(KIND.name, "create")
    return CopyrightEnvelope(copyright=CopyrightResponse.model_validate(record))


@router.delete("", response_model=BulkDeleteResponse)
@limiter.limit(RATE_LIMIT_API)
async def bulk_delete_copyrights(
    request: Request,
    data: BulkDeleteRequest,
    user: StaffUser,
    session: AsyncSessionDep,
) -> BulkDeleteResponse:
    """Delete several copyrights at once. Students may not delete."""
    try:
        count = await research_service.bulk_delete_records(session, KIND, data.ids)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info("Copyrights deleted", count=count, user_id=str(user.id))
    record_research_operation(KIND.name, "bulk_delete", count)
    return BulkDeleteResponse(message=f"Deleted {count} copyright(s)", count=count)


@router.get("/export")
@limiter.limit(RATE_LIMIT_EXPORT)
async def export_copyrights(
    request: Request,
    user: CurrentUser,
    filters: CopyrightFilters,
    session: AsyncSessionDep,
) -> Response:
    """Download every matching copyright in scope as CSV."""
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


@router.get("/stats", response_model=CopyrightStats)
@limiter.limit(RATE_LIMIT_API)
async def copyright_stats(
    request: Request,
    user: CurrentUser,
    session_factory: SessionFactoryDep,
    aggregator: Aggregator,
) -> CopyrightStats:
    """Dashboard statistics over the copyrights the caller can see."""
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


@router.get("/{copyright_id}", response_model=CopyrightEnvelope)
@limiter.limit(RATE_LIMIT_API)
async def get_copyright(
    request: Request,
    copyright_id: UUID,
    scope: CallerScope,
    session: AsyncSessionDep,
) -> CopyrightEnvelope:
    """Get a specific copyright by ID."""
    record = await research_service.get_record(session, KIND, copyright_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Copyright not found",
        )
    if not scope.permits(record):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this copyright",
        )
    return CopyrightEnvelope(copyright=CopyrightResponse.model_validate(record))


@router.patch("/{copyright_id}", response_model=CopyrightEnvelope)
@limiter.limit(RATE_LIMIT_API)
async def update_copyright(
    request: Request,
    copyright_id: UUID,
    data: CopyrightUpdate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> CopyrightEnvelope:
    """Update a copyright. Allowed for admins and the record's authors."""
    record = await research_service.get_record(session, KIND, copyright_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Copyright not found",
        )
    if user.role != UserRole.ADMIN and not record.is_authored_by(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and authors can update this copyright",
        )

    try:
        updated = await research_service.update_record(session, KIND, record, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()

    logger.info(
        "Copyright updated",
        copyright_id=str(copyright_id),
        user_id=str(user.id),
        fields=sorted(data.model_fields_set),
    )
    record_research_operation(KIND.name, "update")
    return CopyrightEnvelope(copyright=CopyrightResponse.model_validate(updated))


@router.delete("/{copyright_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(RATE_LIMIT_API)
async def delete_copyright(
    request: Request,
    copyright_id: UUID,
    user: StaffUser,
    session: AsyncSessionDep,
) -> None:
    """Delete a copyright. Students may not delete."""
    record = await research_service.get_record(session, KIND, copyright_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Copyright not found",
        )

    await research_service.delete_record(session, record)
    await session.commit()

    logger.info("Copyright deleted", copyright_id=str(copyright_id), user_id=str(user.id))
    record_research_operation(KIND.name, "delete")
