"""Admin endpoints for the special user (email to role) allow-list."""

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from research_records.core.database import AsyncSessionDep
from research_records.core.deps import AdminUser
from research_records.core.rate_limit import RATE_LIMIT_API, limiter
from research_records.schemas.base import MessageResponse
from research_records.schemas.user import (
    SpecialUserCreate,
    SpecialUserDelete,
    SpecialUserResponse,
    SpecialUserUpdate,
)
from research_records.services import special_user_service

logger = structlog.get_logger()

router = APIRouter(prefix="/admin/special-users", tags=["special-users"])


@router.get("", response_model=list[SpecialUserResponse])
@limiter.limit(RATE_LIMIT_API)
async def list_special_users(
    request: Request,
    admin: AdminUser,
    session: AsyncSessionDep,
) -> list[SpecialUserResponse]:
    """List every allow-listed email with its role."""
    special_users = await special_user_service.list_special_users(session)
    return [SpecialUserResponse.model_validate(s) for s in special_users]


@router.post("", response_model=SpecialUserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_API)
async def create_special_user(
    request: Request,
    data: SpecialUserCreate,
    admin: AdminUser,
    session: AsyncSessionDep,
) -> SpecialUserResponse:
    """Grant a role to an email; it applies at that user's next sign-in."""
    try:
        special_user = await special_user_service.create_special_user(
            session, data.email, data.role
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    await session.commit()

    logger.info(
        "Special user created",
        email=special_user.email,
        role=special_user.role.value,
        admin_id=str(admin.id),
    )
    return SpecialUserResponse.model_validate(special_user)


@router.patch("", response_model=SpecialUserResponse)
@limiter.limit(RATE_LIMIT_API)
async def update_special_user(
    request: Request,
    data: SpecialUserUpdate,
    admin: AdminUser,
    session: AsyncSessionDep,
) -> SpecialUserResponse:
    """Change the role granted to an allow-listed email."""
    try:
        special_user = await special_user_service.update_special_user(
            session, data.email, data.role
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    await session.commit()

    logger.info(
        "Special user role changed",
        email=special_user.email,
        role=special_user.role.value,
        admin_id=str(admin.id),
    )
    return SpecialUserResponse.model_validate(special_user)


@router.delete("", response_model=MessageResponse)
@limiter.limit(RATE_LIMIT_API)
async def delete_special_user(
    request: Request,
    data: SpecialUserDelete,
    admin: AdminUser,
    session: AsyncSessionDep,
) -> MessageResponse:
    """Remove an email from the allow-list."""
    try:
        await special_user_service.delete_special_user(session, data.email)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    await session.commit()

    logger.info("Special user deleted", email=data.email, admin_id=str(admin.id))
    return MessageResponse(message="Special user deleted")
