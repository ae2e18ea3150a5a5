"""
Tests for CSV export
"""
import csv
import io
from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import AsyncClient

from research_records.models.enums import AuthorType, ResearchStatus
from research_records.services import export_service
from research_records.services.research import BOOK_CHAPTER, COPYRIGHT, JOURNAL
from tests.conftest import auth_headers_for
from tests.test_copyrights import create_copyright


def parse_csv(text: str) -> list[dict[str, str]]:
    return list(csv.DictReader(io.StringIO(text)))


class TestExportService:
    """CSV rendering helpers"""

    def test_headers_start_with_id(self):
        for kind in (BOOK_CHAPTER, COPYRIGHT, JOURNAL):
            headers = [header for header, _ in export_service.columns_for(kind)]

            assert headers[0] == "ID"
            assert "Title" in headers
            assert "Faculty Authors" in headers

    def test_format_cell(self):
        assert export_service.format_cell(None) == ""
        assert export_service.format_cell(ResearchStatus.APPROVED) == "APPROVED"
        assert (
            export_service.format_cell(datetime(2024, 1, 2, 3, 4, 5))
            == "2024-01-02T03:04:05+00:00"
        )
        assert export_service.format_cell(12.5) == 12.5

    def test_render_csv_quotes_and_authors(self):
        user = SimpleNamespace(name="Ada Lovelace", email="ada@example.com")
        author = SimpleNamespace(user=user, author_type=AuthorType.FACULTY)
        record = SimpleNamespace(
            id=uuid4(),
            serial_no="CR-1",
            title='Engines, "analytical" and otherwise',
            abstract=None,
            status=ResearchStatus.SUBMITTED,
            date_of_filing=None,
            date_of_submission=None,
            date_of_published=None,
            date_of_grant=None,
            registration_fees=100.0,
            reimbursement=None,
            is_public=False,
            teacher_status="UPLOADED",
            faculty_authors=[author],
            student_authors=[],
            created_at=datetime(2024, 1, 1),
            updated_at=datetime(2024, 1, 1),
            document_url=None,
            image_url=None,
        )

        rows = parse_csv(export_service.render_csv(COPYRIGHT, [record]))

        assert len(rows) == 1
        assert rows[0]["Title"] == 'Engines, "analytical" and otherwise'
        assert rows[0]["Faculty Authors"] == "Ada Lovelace (ada@example.com)"
        assert rows[0]["Student Authors"] == ""
        assert rows[0]["Reimbursement"] == ""

    def test_export_filename(self):
        moment = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

        assert export_service.export_filename(COPYRIGHT, moment) == "copyrights-20250101T120000Z.csv"
        assert (
            export_service.export_filename(BOOK_CHAPTER, moment)
            == "book-chapters-20250101T120000Z.csv"
        )


class TestExportEndpoint:
    """GET /research/<kind>/export"""

    @pytest.mark.asyncio
    async def test_export_in_scope_records(
        self, client: AsyncClient, faculty, student, other_student, faculty_headers
    ):
        await create_copyright(client, faculty_headers, faculty, student, title="Private")
        await create_copyright(
            client,
            faculty_headers,
            faculty,
            student,
            title="Public",
            serialNo="CR-2024-002",
            isPublic=True,
        )

        response = await client.get(
            "/api/v1/research/copyright/export", headers=auth_headers_for(other_student)
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'attachment; filename="copyrights-' in response.headers["content-disposition"]
        rows = parse_csv(response.text)
        assert [row["Title"] for row in rows] == ["Public"]

    @pytest.mark.asyncio
    async def test_export_applies_filters(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        await create_copyright(client, faculty_headers, faculty, student, title="Draft")
        await create_copyright(
            client,
            faculty_headers,
            faculty,
            student,
            title="Approved",
            serialNo="CR-2024-002",
            status="APPROVED",
        )

        response = await client.get(
            "/api/v1/research/copyright/export",
            params={"status": "APPROVED"},
            headers=faculty_headers,
        )

        rows = parse_csv(response.text)
        assert [row["Title"] for row in rows] == ["Approved"]
        assert rows[0]["Serial No"] == "CR-2024-002"

    @pytest.mark.asyncio
    async def test_export_requires_auth(self, client: AsyncClient, db_session):
        response = await client.get("/api/v1/research/book-chapter/export")

        assert response.status_code == 401
