"""User service: sign-in, role resolution and author lookup."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_records.core.security import verify_password
from research_records.models.enums import UserRole
from research_records.models.user import SpecialUser, User

# Roles offered in the author picker
AUTHOR_ROLES = (UserRole.STUDENT, UserRole.FACULTY)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> User | None:
    """Get a user by their ID."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Get a user by their email address (case-insensitive)."""
    result = await session.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def resolve_role(session: AsyncSession, email: str) -> UserRole:
    """Role granted at sign-in: the allow-list entry, else STUDENT."""
    result = await session.execute(
        select(SpecialUser.role).where(SpecialUser.email == normalize_email(email))
    )
    return result.scalar_one_or_none() or UserRole.STUDENT


async def apply_resolved_role(session: AsyncSession, user: User) -> bool:
    """Bring ``user.role`` in line with the allow-list.

    Returns True if the stored role changed.
    """
    role = await resolve_role(session, user.email)
    if user.role == role:
        return False
    user.role = role
    await session.flush()
    return True


async def authenticate(
    session: AsyncSession,
    email: str,
    password: str,
) -> User | None:
    """Check credentials; None if the user is unknown or the password is wrong.

    OAuth-only accounts have no password hash and can never match.
    """
    user = await get_user_by_email(session, email)
    if user is None or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    await apply_resolved_role(session, user)
    return user


async def get_or_create_user_from_oauth(
    session: AsyncSession,
    provider: str,
    provider_id: str,
    email: str,
    name: str | None = None,
    image: str | None = None,
) -> tuple[User, bool]:
    """Get existing user or create new one from OAuth data.

    Accounts are matched by email, so signing in with a second provider
    links to the same user. The role is re-resolved on every sign-in.

    Returns:
        Tuple of (user, created) where created is True if new user was created
    """
    user = await get_user_by_email(session, email)
    if user:
        user.provider = provider
        user.provider_id = provider_id
        # Keep a profile the user already has if the provider sends nothing
        user.name = name or user.name
        user.image = image or user.image
        await session.flush()
        await apply_resolved_role(session, user)
        return user, False

    user = User(
        email=normalize_email(email),
        name=name,
        image=image,
        provider=provider,
        provider_id=provider_id,
        role=await resolve_role(session, email),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user, True


async def list_users(
    session: AsyncSession,
    role: UserRole | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[User], int]:
    """Users for the author picker, sorted by name.

    Without ``role`` both students and faculty are returned.

    Returns tuple of (users, total_count).
    """
    conditions = [User.role == role] if role else [User.role.in_(AUTHOR_ROLES)]
    if search:
        conditions.append(
            or_(
                User.name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            )
        )

    count_query = select(func.count(User.id)).where(*conditions)
    total = (await session.execute(count_query)).scalar() or 0

    query = (
        select(User)
        .where(*conditions)
        .order_by(User.name.asc(), User.email.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(query)
    return list(result.scalars().all()), total
