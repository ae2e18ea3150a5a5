"""User lookup endpoints (author picker)."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from research_records.core.database import AsyncSessionDep
from research_records.core.deps import CurrentUser
from research_records.core.rate_limit import RATE_LIMIT_API, limiter
from research_records.models.enums import UserRole
from research_records.schemas.user import UserListResponse, UserResponse
from research_records.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
@limiter.limit(RATE_LIMIT_API)
async def list_users(
    request: Request,
    user: CurrentUser,
    session: AsyncSessionDep,
    role: UserRole | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> UserListResponse:
    """List students and faculty, optionally narrowed by role or a search term."""
    users, total = await user_service.list_users(
        session=session,
        role=role,
        search=search.strip() if search else None,
        page=page,
        limit=limit,
    )
    return UserListResponse(
        data=[UserResponse.model_validate(u) for u in users],
        count=len(users),
        total=total,
        page=page,
        limit=limit,
        has_more=page * limit < total,
    )
