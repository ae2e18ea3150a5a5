"""Special user service: the email to role allow-list."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_records.models.enums import UserRole
from research_records.models.user import SpecialUser
from research_records.services.user import normalize_email


async def list_special_users(session: AsyncSession) -> list[SpecialUser]:
    """All allow-list entries ordered by id."""
    result = await session.execute(select(SpecialUser).order_by(SpecialUser.id))
    return list(result.scalars().all())


async def get_special_user(session: AsyncSession, email: str) -> SpecialUser | None:
    result = await session.execute(
        select(SpecialUser).where(SpecialUser.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def create_special_user(
    session: AsyncSession,
    email: str,
    role: UserRole,
) -> SpecialUser:
    """Add an email to the allow-list.

    Raises ValueError if the email is already listed.
    """
    if await get_special_user(session, email) is not None:
        raise ValueError(f"{normalize_email(email)} is already a special user")

    special_user = SpecialUser(email=normalize_email(email), role=role)
    session.add(special_user)
    await session.flush()
    await session.refresh(special_user)
    return special_user


async def update_special_user(
    session: AsyncSession,
    email: str,
    role: UserRole,
) -> SpecialUser:
    """Change the role of a listed email.

    Raises LookupError if the email is not listed.
    """
    special_user = await get_special_user(session, email)
    if special_user is None:
        raise LookupError(f"{normalize_email(email)} is not a special user")

    special_user.role = role
    await session.flush()
    return special_user


async def delete_special_user(session: AsyncSession, email: str) -> None:
    """Remove an email from the allow-list.

    Raises LookupError if the email is not listed.
    """
    special_user = await get_special_user(session, email)
    if special_user is None:
        raise LookupError(f"{normalize_email(email)} is not a special user")

    await session.delete(special_user)
    await session.flush()
