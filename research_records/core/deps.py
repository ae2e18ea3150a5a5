"""Dependency injection utilities for FastAPI routes."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_records.aggregators import StatsAggregator, build_aggregator
from research_records.core.config import get_settings
from research_records.core.database import get_async_session
from research_records.core.security import AUTH_COOKIE_NAME, decode_access_token
from research_records.models.enums import UserRole
from research_records.models.user import User
from research_records.services.access import AccessScope, scope_for


async def get_token(
    rr_token: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    """Extract auth token from the httpOnly cookie or a Bearer header."""
    if rr_token:
        return rr_token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


async def get_current_user_optional(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    token: Annotated[str | None, Depends(get_token)],
) -> User | None:
    """Get current user from token if present, otherwise return None.

    Use this for routes that work with or without authentication.
    """
    if token is None:
        return None

    token_data = decode_access_token(token)
    if token_data is None:
        return None

    result = await session.execute(select(User).where(User.id == token_data.user_id))
    user = result.scalar_one_or_none()
    return user


async def get_current_user(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    token: Annotated[str | None, Depends(get_token)],
) -> User:
    """Get current authenticated user.

    The user row is reloaded on every request so role changes apply
    immediately. Raises HTTPException 401 if not authenticated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        raise credentials_exception

    token_data = decode_access_token(token)
    if token_data is None:
        raise credentials_exception

    result = await session.execute(select(User).where(User.id == token_data.user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency that only lets the given roles through."""

    async def checker(user: Annotated[User, Depends(get_current_user)]) -> User:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return checker


def get_stats_aggregator() -> StatsAggregator:
    settings = get_settings()
    return build_aggregator(settings.stats_timezone, settings.stats_recent_limit)


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
StaffUser = Annotated[
    User,
    Depends(require_roles(UserRole.TEACHER, UserRole.FACULTY, UserRole.ADMIN)),
]
Aggregator = Annotated[StatsAggregator, Depends(get_stats_aggregator)]


async def get_access_scope(user: CurrentUserOptional) -> AccessScope:
    """Resolve which research records the caller may see."""
    return scope_for(user)


CallerScope = Annotated[AccessScope, Depends(get_access_scope)]
