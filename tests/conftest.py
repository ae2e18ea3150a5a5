"""
Pytest configuration and shared fixtures
"""
import os

# Settings are read once at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["MICROSOFT_CLIENT_ID"] = ""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import research_records.models  # noqa: F401
from research_records.core.database import Base, get_async_session, get_session_factory
from research_records.core.rate_limit import limiter
from research_records.core.security import create_access_token, hash_password
from research_records.main import app
from research_records.models.enums import UserRole
from research_records.models.user import User

fake = Faker()

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"
TEST_PASSWORD = "testpassword123"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh tables for every test; the session is used for setup data."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionLocal


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, wired to the test database."""

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_session_factory] = lambda: TestSessionLocal
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(
    session: AsyncSession,
    role: UserRole,
    password: str | None = None,
    name: str | None = None,
) -> User:
    user = User(
        email=fake.unique.email(),
        name=name or fake.name(),
        role=role,
        provider="credentials",
        password_hash=hash_password(password) if password else None,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers_for(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def student(db_session: AsyncSession) -> User:
    return await make_user(db_session, UserRole.STUDENT)


@pytest_asyncio.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await make_user(db_session, UserRole.STUDENT)


@pytest_asyncio.fixture
async def faculty(db_session: AsyncSession) -> User:
    return await make_user(db_session, UserRole.FACULTY, password=TEST_PASSWORD)


@pytest_asyncio.fixture
async def teacher(db_session: AsyncSession) -> User:
    return await make_user(db_session, UserRole.TEACHER)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, UserRole.ADMIN)


@pytest.fixture
def student_headers(student: User) -> dict[str, str]:
    return auth_headers_for(student)


@pytest.fixture
def faculty_headers(faculty: User) -> dict[str, str]:
    return auth_headers_for(faculty)


@pytest.fixture
def teacher_headers(teacher: User) -> dict[str, str]:
    return auth_headers_for(teacher)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers_for(admin)
