"""Dashboard statistics response schemas."""

from uuid import UUID

from research_records.models.enums import (
    JournalIndexing,
    JournalScope,
    ResearchStatus,
    TeacherStatus,
    UserRole,
)
from research_records.schemas.base import CamelModel, UTCDateTime


class StatusCount(CamelModel):
    status: ResearchStatus | TeacherStatus
    count: int


class ScopeCount(CamelModel):
    scope: JournalScope
    count: int


class IndexingCount(CamelModel):
    indexing: JournalIndexing
    count: int


class MonthlyTrendPoint(CamelModel):
    month: str  # "YYYY-MM"
    count: int


class DailyTrendPoint(CamelModel):
    date: str  # "YYYY-MM-DD"
    count: int


class WeeklyTrendPoint(CamelModel):
    week: str  # "YYYY-W##"
    count: int


class Financials(CamelModel):
    total_registration_fees: float
    total_reimbursement: float
    avg_registration_fees: float
    avg_reimbursement: float


class JournalFinancials(Financials):
    avg_impact_factor: float


class StatsBase(CamelModel):
    """Fields shared by every kind's dashboard."""

    user_role: UserRole
    total: int
    public_count: int
    private_count: int
    monthly_trend: list[MonthlyTrendPoint]
    daily_trend: list[DailyTrendPoint]
    weekly_trend: list[WeeklyTrendPoint]


# --- Recent items ---


class RecentCopyright(CamelModel):
    id: UUID
    title: str
    status: ResearchStatus
    created_at: UTCDateTime


class RecentBookChapter(CamelModel):
    id: UUID
    title: str
    book_chapter_status: ResearchStatus
    teacher_status: TeacherStatus
    created_at: UTCDateTime


class RecentJournal(CamelModel):
    id: UUID
    title: str
    journal_name: str
    scope: JournalScope
    indexing: JournalIndexing
    teacher_status: TeacherStatus
    impact_factor: float | None
    created_at: UTCDateTime


# --- Per-kind responses ---


class CopyrightStats(StatsBase):
    financials: Financials
    status_counts: list[StatusCount]
    recent_copyrights: list[RecentCopyright]


class BookChapterStats(StatsBase):
    financials: Financials
    book_chapter_status_counts: list[StatusCount]
    teacher_status_counts: list[StatusCount]
    recent_chapters: list[RecentBookChapter]


class JournalStats(StatsBase):
    financials: JournalFinancials
    status_counts: list[StatusCount]
    journal_status_counts: list[StatusCount]
    scope_counts: list[ScopeCount]
    indexing_counts: list[IndexingCount]
    recent_journals: list[RecentJournal]
