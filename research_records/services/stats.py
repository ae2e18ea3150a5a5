"""Dashboard statistics: scoped loading plus in-memory aggregation.

Two independent reads run concurrently, each on its own session: the summary
rows for every record in scope, and the creation timestamps inside the widest
trend window. The StatsAggregator then turns them into the response.
"""

import asyncio
from collections.abc import Hashable, Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import Row, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from research_records.aggregators import StatsAggregator
from research_records.models.enums import UserRole
from research_records.schemas.stats import (
    BookChapterStats,
    CopyrightStats,
    DailyTrendPoint,
    Financials,
    IndexingCount,
    JournalFinancials,
    JournalStats,
    MonthlyTrendPoint,
    RecentBookChapter,
    RecentCopyright,
    RecentJournal,
    ScopeCount,
    StatsBase,
    StatusCount,
    WeeklyTrendPoint,
)
from research_records.services.access import AccessScope
from research_records.services.research import BOOK_CHAPTER, COPYRIGHT, JOURNAL, ResearchKind

# Columns each kind's dashboard reads, beyond the common ones
SUMMARY_COLUMNS: dict[str, tuple[str, ...]] = {
    BOOK_CHAPTER.name: ("book_chapter_status",),
    COPYRIGHT.name: ("status",),
    JOURNAL.name: ("journal_status", "journal_name", "scope", "indexing", "impact_factor"),
}

COMMON_COLUMNS = (
    "id",
    "title",
    "created_at",
    "is_public",
    "registration_fees",
    "reimbursement",
    "teacher_status",
)


async def load_summary_rows(
    session_factory: async_sessionmaker[AsyncSession],
    kind: ResearchKind,
    scope: AccessScope,
) -> list[Row]:
    """Every record in scope, reduced to the columns the dashboard needs.

    Totals, status counts and financial averages cover the whole scope, so
    this is not capped: memory grows with the number of in-scope records,
    bounded per row by the narrow column list. Trend rows are loaded
    separately and only from the trend window.
    """
    model = kind.model
    names = COMMON_COLUMNS + SUMMARY_COLUMNS[kind.name]
    query = select(*(getattr(model, name) for name in names)).where(
        scope.where_clause(model)
    )
    async with session_factory() as session:
        result = await session.execute(query)
        return list(result.all())


async def load_trend_rows(
    session_factory: async_sessionmaker[AsyncSession],
    kind: ResearchKind,
    scope: AccessScope,
    since: datetime,
) -> list[Row]:
    """Creation timestamps of in-scope records created at or after ``since``."""
    model = kind.model
    query = select(model.created_at).where(
        scope.where_clause(model),
        model.created_at >= since,
    )
    async with session_factory() as session:
        result = await session.execute(query)
        return list(result.all())


def _declaration_order(value: Hashable) -> int:
    if isinstance(value, Enum):
        return list(type(value)).index(value)
    return 0


def _ordered_counts(counts: dict[Hashable, int]) -> list[tuple[Any, int]]:
    """Count pairs in enum declaration order, so dashboards stay stable."""
    return sorted(counts.items(), key=lambda item: _declaration_order(item[0]))


def _status_counts(
    aggregator: StatsAggregator,
    rows: Sequence[Row],
    field: str,
) -> list[StatusCount]:
    return [
        StatusCount(status=status, count=count)
        for status, count in _ordered_counts(aggregator.count_by_status(rows, field))
    ]


def _common_fields(
    aggregator: StatsAggregator,
    rows: Sequence[Row],
    trend_rows: Sequence[Row],
    user_role: UserRole,
    now: datetime | None,
) -> dict[str, Any]:
    visibility = aggregator.total_and_visibility_counts(rows)
    return {
        "user_role": user_role,
        "total": visibility.total,
        "public_count": visibility.public_count,
        "private_count": visibility.private_count,
        "monthly_trend": [
            MonthlyTrendPoint(month=bucket.key, count=bucket.count)
            for bucket in aggregator.monthly_trend(trend_rows, now=now)
        ],
        "daily_trend": [
            DailyTrendPoint(date=bucket.key, count=bucket.count)
            for bucket in aggregator.daily_trend(trend_rows, now=now)
        ],
        "weekly_trend": [
            WeeklyTrendPoint(week=bucket.key, count=bucket.count)
            for bucket in aggregator.weekly_trend(trend_rows, now=now)
        ],
    }


def _financials(aggregator: StatsAggregator, rows: Sequence[Row]) -> dict[str, float]:
    summary = aggregator.financial_summary(rows)
    return {
        "total_registration_fees": summary.sum_fees,
        "total_reimbursement": summary.sum_reimbursement,
        "avg_registration_fees": summary.avg_fees,
        "avg_reimbursement": summary.avg_reimbursement,
    }


def build_copyright_stats(
    aggregator: StatsAggregator,
    rows: Sequence[Row],
    trend_rows: Sequence[Row],
    user_role: UserRole,
    now: datetime | None = None,
) -> CopyrightStats:
    return CopyrightStats(
        **_common_fields(aggregator, rows, trend_rows, user_role, now),
        financials=Financials(**_financials(aggregator, rows)),
        status_counts=_status_counts(aggregator, rows, "status"),
        recent_copyrights=[
            RecentCopyright.model_validate(row)
            for row in aggregator.recent_records(rows)
        ],
    )


def build_book_chapter_stats(
    aggregator: StatsAggregator,
    rows: Sequence[Row],
    trend_rows: Sequence[Row],
    user_role: UserRole,
    now: datetime | None = None,
) -> BookChapterStats:
    return BookChapterStats(
        **_common_fields(aggregator, rows, trend_rows, user_role, now),
        financials=Financials(**_financials(aggregator, rows)),
        book_chapter_status_counts=_status_counts(aggregator, rows, "book_chapter_status"),
        teacher_status_counts=_status_counts(aggregator, rows, "teacher_status"),
        recent_chapters=[
            RecentBookChapter.model_validate(row)
            for row in aggregator.recent_records(rows)
        ],
    )


def build_journal_stats(
    aggregator: StatsAggregator,
    rows: Sequence[Row],
    trend_rows: Sequence[Row],
    user_role: UserRole,
    now: datetime | None = None,
) -> JournalStats:
    return JournalStats(
        **_common_fields(aggregator, rows, trend_rows, user_role, now),
        financials=JournalFinancials(
            **_financials(aggregator, rows),
            avg_impact_factor=aggregator.average(rows, "impact_factor"),
        ),
        status_counts=_status_counts(aggregator, rows, "teacher_status"),
        journal_status_counts=_status_counts(aggregator, rows, "journal_status"),
        scope_counts=[
            ScopeCount(scope=scope, count=count)
            for scope, count in _ordered_counts(aggregator.count_by_status(rows, "scope"))
        ],
        indexing_counts=[
            IndexingCount(indexing=indexing, count=count)
            for indexing, count in _ordered_counts(
                aggregator.count_by_status(rows, "indexing")
            )
        ],
        recent_journals=[
            RecentJournal.model_validate(row)
            for row in aggregator.recent_records(rows)
        ],
    )


BUILDERS = {
    BOOK_CHAPTER.name: build_book_chapter_stats,
    COPYRIGHT.name: build_copyright_stats,
    JOURNAL.name: build_journal_stats,
}


async def compute_stats(
    session_factory: async_sessionmaker[AsyncSession],
    kind: ResearchKind,
    scope: AccessScope,
    aggregator: StatsAggregator,
    user_role: UserRole,
    now: datetime | None = None,
) -> StatsBase:
    """Load the caller's records and aggregate them into the kind's dashboard."""
    rows, trend_rows = await asyncio.gather(
        load_summary_rows(session_factory, kind, scope),
        load_trend_rows(session_factory, kind, scope, aggregator.window_floor(now)),
    )
    return BUILDERS[kind.name](aggregator, rows, trend_rows, user_role, now)
