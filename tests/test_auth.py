"""
Tests for the authentication endpoints
"""
import pytest
from httpx import AsyncClient

from research_records.core.deps import AUTH_COOKIE_NAME
from research_records.models.enums import UserRole
from research_records.models.user import SpecialUser
from tests.conftest import TEST_PASSWORD


class TestLogin:
    """Credentials login"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, db_session, faculty):
        db_session.add(SpecialUser(email=faculty.email, role=UserRole.FACULTY))
        await db_session.commit()

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["accessToken"]
        assert data["user"]["email"] == faculty.email
        assert data["user"]["role"] == "FACULTY"
        assert "passwordHash" not in data["user"]
        assert AUTH_COOKIE_NAME in response.cookies

    @pytest.mark.asyncio
    async def test_login_resolves_role_from_allow_list(self, client: AsyncClient, faculty):
        """Without an allow-list entry the user signs in as a student"""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "STUDENT"

    @pytest.mark.asyncio
    async def test_login_email_is_case_insensitive(self, client: AsyncClient, faculty):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email.upper(), "password": TEST_PASSWORD},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, faculty):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient, db_session):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_oauth_only_account(self, client: AsyncClient, student):
        """Accounts without a password hash cannot use credentials login"""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": student.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_invalid_email(self, client: AsyncClient, db_session):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "not-an-email", "password": TEST_PASSWORD},
        )

        assert response.status_code == 422


class TestSession:
    """Current user and status"""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, student, student_headers):
        response = await client.get("/api/v1/auth/me", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(student.id)
        assert data["role"] == "STUDENT"

    @pytest.mark.asyncio
    async def test_me_unauthenticated(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_invalid_token(self, client: AsyncClient, db_session):
        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_cookie(self, client: AsyncClient, db_session, faculty):
        await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email, "password": TEST_PASSWORD},
        )

        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["email"] == faculty.email

    @pytest.mark.asyncio
    async def test_status_anonymous(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/auth/status")

        assert response.status_code == 200
        assert response.json() == {"authenticated": False, "user": None}

    @pytest.mark.asyncio
    async def test_status_authenticated(self, client: AsyncClient, teacher, teacher_headers):
        response = await client.get("/api/v1/auth/status", headers=teacher_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is True
        assert data["user"]["role"] == "TEACHER"

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, client: AsyncClient, db_session, faculty):
        await client.post(
            "/api/v1/auth/login",
            json={"email": faculty.email, "password": TEST_PASSWORD},
        )

        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
        status_response = await client.get("/api/v1/auth/status")
        assert status_response.json()["authenticated"] is False


class TestOAuth:
    """OAuth entry points"""

    @pytest.mark.asyncio
    async def test_unknown_provider(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/auth/github")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unconfigured_provider(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/auth/google")

        assert response.status_code == 503
        assert "not configured" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_callback_unconfigured_provider(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/auth/microsoft/callback")

        assert response.status_code == 503
