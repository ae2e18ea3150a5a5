"""
Tests for the dashboard statistics endpoints and service
"""
from datetime import datetime

import pytest
from httpx import AsyncClient

from research_records.aggregators import StatsAggregator
from research_records.models.enums import AuthorType, ResearchStatus, UserRole
from research_records.models.research import Copyright, CopyrightAuthor, Journal, JournalAuthor
from research_records.services import stats_service
from research_records.services.access import AllRecords, PublicOrAuthoredBy
from research_records.services.research import COPYRIGHT, JOURNAL
from tests.conftest import auth_headers_for
from tests.test_book_chapters import create_chapter
from tests.test_copyrights import create_copyright
from tests.test_journals import create_journal

NOW = datetime(2024, 4, 20, 12, 0)


def authors_for(author_model, faculty, student):
    return [
        author_model(user_id=faculty.id, author_type=AuthorType.FACULTY),
        author_model(user_id=student.id, author_type=AuthorType.STUDENT),
    ]


class TestStatsEndpoints:
    """GET /research/<kind>/stats"""

    @pytest.mark.asyncio
    async def test_copyright_stats(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        await create_copyright(
            client, faculty_headers, faculty, student, registrationFees=100, reimbursement=None
        )
        await create_copyright(
            client,
            faculty_headers,
            faculty,
            student,
            serialNo="CR-2024-002",
            registrationFees=300,
            reimbursement=50,
            status="APPROVED",
            isPublic=True,
        )

        response = await client.get(
            "/api/v1/research/copyright/stats", headers=faculty_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userRole"] == "FACULTY"
        assert data["total"] == 2
        assert data["publicCount"] == 1
        assert data["privateCount"] == 1
        assert data["financials"] == {
            "totalRegistrationFees": 300 + 100,
            "totalReimbursement": 50,
            "avgRegistrationFees": 200,
            "avgReimbursement": 50,
        }
        assert data["statusCounts"] == [
            {"status": "SUBMITTED", "count": 1},
            {"status": "APPROVED", "count": 1},
        ]
        assert len(data["recentCopyrights"]) == 2
        assert sum(point["count"] for point in data["monthlyTrend"]) == 2
        assert sum(point["count"] for point in data["dailyTrend"]) == 2

    @pytest.mark.asyncio
    async def test_stats_respect_scope(
        self, client: AsyncClient, faculty, student, other_student, faculty_headers
    ):
        await create_copyright(client, faculty_headers, faculty, student)

        own = await client.get(
            "/api/v1/research/copyright/stats", headers=auth_headers_for(student)
        )
        other = await client.get(
            "/api/v1/research/copyright/stats", headers=auth_headers_for(other_student)
        )

        assert own.json()["total"] == 1
        assert own.json()["userRole"] == "STUDENT"
        assert other.json()["total"] == 0
        assert other.json()["statusCounts"] == []
        assert other.json()["monthlyTrend"] == []

    @pytest.mark.asyncio
    async def test_stats_require_auth(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/research/journal/stats")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_book_chapter_stats(
        self, client: AsyncClient, faculty, student, faculty_headers, admin_headers
    ):
        await create_chapter(client, faculty_headers, faculty, student)
        await create_chapter(
            client, faculty_headers, faculty, student, teacherStatus="ACCEPTED"
        )

        response = await client.get(
            "/api/v1/research/book-chapter/stats", headers=admin_headers
        )

        data = response.json()
        assert data["userRole"] == "ADMIN"
        assert data["bookChapterStatusCounts"] == [{"status": "SUBMITTED", "count": 2}]
        assert data["teacherStatusCounts"] == [
            {"status": "UPLOADED", "count": 1},
            {"status": "ACCEPTED", "count": 1},
        ]
        assert len(data["recentChapters"]) == 2

    @pytest.mark.asyncio
    async def test_journal_stats(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        await create_journal(client, faculty_headers, faculty, student, impactFactor=2.0)
        await create_journal(
            client,
            faculty_headers,
            faculty,
            student,
            serialNo="J-2024-002",
            scope="NATIONAL",
            indexing="UGC_CARE",
            impactFactor=None,
        )

        response = await client.get("/api/v1/research/journal/stats", headers=faculty_headers)

        data = response.json()
        assert data["financials"]["avgImpactFactor"] == 2.0
        assert data["scopeCounts"] == [
            {"scope": "NATIONAL", "count": 1},
            {"scope": "INTERNATIONAL", "count": 1},
        ]
        assert data["indexingCounts"] == [
            {"indexing": "SCOPUS", "count": 1},
            {"indexing": "UGC_CARE", "count": 1},
        ]
        assert data["journalStatusCounts"] == [{"status": "SUBMITTED", "count": 2}]
        assert data["recentJournals"][0]["journalName"] == "Journal of Applied Sensing"


class TestComputeStats:
    """Service-level aggregation over stored rows"""

    @pytest.mark.asyncio
    async def test_trends_with_fixed_clock(
        self, db_session, session_factory, faculty, student
    ):
        for serial_no, created_at in (
            ("CR-1", datetime(2024, 3, 5, 10, 0)),
            ("CR-2", datetime(2024, 3, 28, 9, 0)),
            ("CR-3", datetime(2024, 4, 2, 8, 0)),
            ("CR-4", datetime(2022, 1, 1, 8, 0)),
        ):
            db_session.add(
                Copyright(
                    title=f"Copyright {serial_no}",
                    serial_no=serial_no,
                    created_at=created_at,
                    authors=authors_for(CopyrightAuthor, faculty, student),
                )
            )
        await db_session.commit()

        stats = await stats_service.compute_stats(
            session_factory=session_factory,
            kind=COPYRIGHT,
            scope=AllRecords(),
            aggregator=StatsAggregator(),
            user_role=UserRole.ADMIN,
            now=NOW,
        )

        assert stats.total == 4
        assert [(p.month, p.count) for p in stats.monthly_trend] == [
            ("2024-03", 2),
            ("2024-04", 1),
        ]
        assert [(p.date, p.count) for p in stats.daily_trend] == [("2024-03-28", 1), ("2024-04-02", 1)]
        assert [r.title for r in stats.recent_copyrights][:1] == ["Copyright CR-3"]

    @pytest.mark.asyncio
    async def test_scope_limits_rows(
        self, db_session, session_factory, faculty, student, other_student
    ):
        db_session.add(
            Journal(
                title="Authored",
                serial_no="J-1",
                journal_name="Venue",
                scope="NATIONAL",
                review_type="PEER_REVIEWED",
                access_type="OPEN_ACCESS",
                indexing="SCOPUS",
                publication_mode="ONLINE",
                journal_status=ResearchStatus.PUBLISHED,
                authors=authors_for(JournalAuthor, faculty, student),
            )
        )
        await db_session.commit()

        stats = await stats_service.compute_stats(
            session_factory=session_factory,
            kind=JOURNAL,
            scope=PublicOrAuthoredBy(user_id=other_student.id),
            aggregator=StatsAggregator(),
            user_role=UserRole.STUDENT,
            now=NOW,
        )

        assert stats.total == 0
        assert stats.financials.avg_impact_factor == 0
        assert stats.recent_journals == []
