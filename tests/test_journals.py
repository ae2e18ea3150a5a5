"""
Tests for the journal endpoints
"""
import pytest
from httpx import AsyncClient

BASE_URL = "/api/v1/research/journal"


def journal_payload(faculty, student, **overrides) -> dict:
    payload = {
        "title": "Low-Power Sensor Networks for Field Monitoring",
        "serialNo": "J-2024-001",
        "journalName": "Journal of Applied Sensing",
        "scope": "INTERNATIONAL",
        "reviewType": "PEER_REVIEWED",
        "accessType": "OPEN_ACCESS",
        "indexing": "SCOPUS",
        "quartile": "Q2",
        "publicationMode": "ONLINE",
        "impactFactor": 3.2,
        "keywords": ["sensors"],
        "facultyAuthorIds": [str(faculty.id)],
        "studentAuthorIds": [str(student.id)],
    }
    payload.update(overrides)
    return payload


async def create_journal(client, headers, faculty, student, **overrides) -> dict:
    response = await client.post(
        BASE_URL,
        json=journal_payload(faculty, student, **overrides),
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["journal"]


class TestJournals:
    """CRUD and filters for journals"""

    @pytest.mark.asyncio
    async def test_create_success(self, client: AsyncClient, faculty, student, faculty_headers):
        data = await create_journal(client, faculty_headers, faculty, student)

        assert data["journalName"] == "Journal of Applied Sensing"
        assert data["journalStatus"] == "SUBMITTED"
        assert data["quartile"] == "Q2"
        assert data["impactFactor"] == 3.2
        assert data["facultyAuthors"][0]["journalId"] == data["id"]

    @pytest.mark.asyncio
    async def test_create_requires_venue_fields(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        payload = journal_payload(faculty, student)
        del payload["indexing"]

        response = await client.post(BASE_URL, json=payload, headers=faculty_headers)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_serial_no_rejected(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        await create_journal(client, faculty_headers, faculty, student)

        response = await client.post(
            BASE_URL,
            json=journal_payload(faculty, student),
            headers=faculty_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "A journal with this serial number already exists"

    @pytest.mark.asyncio
    async def test_update_to_taken_serial_no_rejected(
        self, client: AsyncClient, faculty, student, faculty_headers
    ):
        await create_journal(client, faculty_headers, faculty, student)
        second = await create_journal(
            client, faculty_headers, faculty, student, serialNo="J-2024-002"
        )

        taken = await client.patch(
            f"{BASE_URL}/{second['id']}",
            json={"serialNo": "J-2024-001"},
            headers=faculty_headers,
        )
        unchanged = await client.patch(
            f"{BASE_URL}/{second['id']}",
            json={"serialNo": "J-2024-002", "journalStatus": "PUBLISHED"},
            headers=faculty_headers,
        )

        assert taken.status_code == 400
        assert unchanged.status_code == 200
        assert unchanged.json()["journal"]["journalStatus"] == "PUBLISHED"

    @pytest.mark.asyncio
    async def test_venue_filters(
        self, client: AsyncClient, faculty, student, faculty_headers, admin_headers
    ):
        await create_journal(client, faculty_headers, faculty, student, title="Scopus Paper")
        await create_journal(
            client,
            faculty_headers,
            faculty,
            student,
            title="National Paper",
            serialNo="J-2024-002",
            scope="NATIONAL",
            indexing="UGC_CARE",
            impactFactor=0.8,
        )

        by_scope = await client.get(BASE_URL, params={"scope": "NATIONAL"}, headers=admin_headers)
        by_indexing = await client.get(
            BASE_URL, params={"indexing": "SCOPUS"}, headers=admin_headers
        )
        by_impact = await client.get(
            BASE_URL, params={"minImpactFactor": 1}, headers=admin_headers
        )
        by_search = await client.get(
            BASE_URL, params={"search": "applied sensing"}, headers=admin_headers
        )

        assert [j["title"] for j in by_scope.json()["journals"]] == ["National Paper"]
        assert [j["title"] for j in by_indexing.json()["journals"]] == ["Scopus Paper"]
        assert [j["title"] for j in by_impact.json()["journals"]] == ["Scopus Paper"]
        assert by_search.json()["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_sort_by_impact_factor(
        self, client: AsyncClient, faculty, student, faculty_headers, admin_headers
    ):
        await create_journal(client, faculty_headers, faculty, student, title="High")
        await create_journal(
            client,
            faculty_headers,
            faculty,
            student,
            title="Low",
            serialNo="J-2024-002",
            impactFactor=0.5,
        )

        response = await client.get(
            BASE_URL,
            params={"sortBy": "impactFactor", "sortOrder": "asc"},
            headers=admin_headers,
        )

        assert [j["title"] for j in response.json()["journals"]] == ["Low", "High"]

    @pytest.mark.asyncio
    async def test_delete_by_admin(
        self, client: AsyncClient, faculty, student, faculty_headers, admin_headers
    ):
        created = await create_journal(client, faculty_headers, faculty, student)

        response = await client.delete(f"{BASE_URL}/{created['id']}", headers=admin_headers)

        assert response.status_code == 204
