"""Seed the allow-list and an initial faculty login.

Run with ``python -m research_records.seed`` after migrations. Safe to run
repeatedly: existing rows are updated in place.
"""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from research_records.core.database import async_session_factory, close_db
from research_records.core.observability import configure_structlog
from research_records.core.security import hash_password
from research_records.models.enums import UserRole
from research_records.models.user import SpecialUser, User
from research_records.services import special_user_service, user_service

logger = structlog.get_logger()

SPECIAL_USERS = {
    "faculty@example.com": UserRole.FACULTY,
    "teacher@example.com": UserRole.TEACHER,
}

FACULTY_EMAIL = "faculty@example.com"
FACULTY_NAME = "Faculty Admin"
FACULTY_PASSWORD = "password123"


async def upsert_special_user(session: AsyncSession, email: str, role: UserRole) -> SpecialUser:
    special_user = await special_user_service.get_special_user(session, email)
    if special_user is None:
        return await special_user_service.create_special_user(session, email, role)
    special_user.role = role
    await session.flush()
    return special_user


async def upsert_faculty_user(session: AsyncSession) -> User:
    user = await user_service.get_user_by_email(session, FACULTY_EMAIL)
    if user is None:
        user = User(email=FACULTY_EMAIL, name=FACULTY_NAME, provider="credentials")
        session.add(user)
    user.role = UserRole.FACULTY
    user.password_hash = hash_password(FACULTY_PASSWORD)
    await session.flush()
    return user


async def seed(session: AsyncSession) -> None:
    for email, role in SPECIAL_USERS.items():
        special_user = await upsert_special_user(session, email, role)
        logger.info("Seeded special user", email=special_user.email, role=role.value)

    user = await upsert_faculty_user(session)
    logger.info("Seeded faculty user", email=user.email, role=user.role.value)


async def main() -> None:
    configure_structlog()
    async with async_session_factory() as session:
        await seed(session)
        await session.commit()
    await close_db()
    logger.info("Seeding completed", email=FACULTY_EMAIL)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
