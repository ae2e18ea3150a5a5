"""Statistics aggregation over research records.

The aggregator is a pure, synchronous component: it receives records that were
already filtered to the caller's access scope and computes counts, financial
summaries, recent items and time-bucketed trends. It never touches storage,
never mutates its input and keeps no state between calls, so one instance can
be shared by concurrent requests.

Records are duck-typed: anything exposing ``created_at``, ``is_public``,
``registration_fees``, ``reimbursement`` and the status attribute being
grouped works (ORM instances and SQLAlchemy ``Row`` objects alike).
"""

import math
from collections import Counter
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

DEFAULT_RECENT_LIMIT = 5
DEFAULT_WINDOW_MONTHS = 12
DEFAULT_WINDOW_DAYS = 30
DEFAULT_WINDOW_WEEKS = 12


@dataclass(frozen=True)
class TrendBucket:
    """Number of records created in one calendar period."""

    key: str  # "YYYY-MM", "YYYY-MM-DD" or "YYYY-W##"
    count: int


@dataclass(frozen=True)
class VisibilityCounts:
    total: int
    public_count: int
    private_count: int


@dataclass(frozen=True)
class FinancialSummary:
    sum_fees: float
    sum_reimbursement: float
    avg_fees: float
    avg_reimbursement: float


def subtract_months(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` months earlier.

    A day past the end of the target month spills into the next month, so
    Feb 29 2024 minus twelve months is Mar 1 2023 and Mar 31 minus one month
    is Mar 2 in a leap year.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month0 = divmod(month_index, 12)
    first = moment.replace(year=year, month=month0 + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def month_key(moment: datetime) -> str:
    return f"{moment.year}-{moment.month:02d}"


def day_key(moment: datetime) -> str:
    return f"{moment.year}-{moment.month:02d}-{moment.day:02d}"


def week_key(moment: datetime) -> str:
    """Week label using the legacy (non ISO-8601) numbering.

    week = ceil((days since Jan 1 00:00 + weekday of Jan 1 + 1) / 7), where the
    elapsed days are fractional and weekdays count from Sunday = 0. Existing
    dashboards depend on these labels; they disagree with ISO weeks around
    year boundaries.
    """
    jan1 = moment.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    elapsed_days = (moment - jan1).total_seconds() / 86400
    jan1_weekday = (jan1.weekday() + 1) % 7
    week = math.ceil((elapsed_days + jan1_weekday + 1) / 7)
    return f"{moment.year}-W{week:02d}"


class StatsAggregator:
    """Computes dashboard statistics over an in-memory record sequence.

    Timestamps are bucketed in the configured timezone. Naive datetimes are
    taken to be UTC (that is how they are stored) and converted first.

    Usage:
        aggregator = StatsAggregator(tz=ZoneInfo("Asia/Kolkata"))
        counts = aggregator.total_and_visibility_counts(records)
        monthly = aggregator.monthly_trend(records)
    """

    def __init__(
        self,
        tz: tzinfo | None = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self._tz = tz or timezone.utc
        self._recent_limit = recent_limit

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def _localize(self, moment: datetime) -> datetime:
        """Naive wall-clock time in the aggregator's timezone."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self._tz).replace(tzinfo=None)

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            now = datetime.now(timezone.utc)
        return self._localize(now)

    def count_by_status(
        self,
        records: Iterable[Any],
        field: str = "status",
    ) -> dict[Hashable, int]:
        """Count records per value of ``field``; absent values are omitted."""
        return dict(Counter(getattr(record, field) for record in records))

    def total_and_visibility_counts(self, records: Sequence[Any]) -> VisibilityCounts:
        public_count = sum(1 for record in records if record.is_public)
        return VisibilityCounts(
            total=len(records),
            public_count=public_count,
            private_count=len(records) - public_count,
        )

    def total(self, records: Iterable[Any], field: str) -> float:
        """Sum of ``field`` ignoring missing values (0 if none are present)."""
        return sum(
            value for value in (getattr(record, field) for record in records)
            if value is not None
        )

    def average(self, records: Iterable[Any], field: str) -> float:
        """Mean of ``field`` over records that carry it (0 if none do)."""
        values = [
            value for value in (getattr(record, field) for record in records)
            if value is not None
        ]
        if not values:
            return 0
        return sum(values) / len(values)

    def financial_summary(self, records: Sequence[Any]) -> FinancialSummary:
        return FinancialSummary(
            sum_fees=self.total(records, "registration_fees"),
            sum_reimbursement=self.total(records, "reimbursement"),
            avg_fees=self.average(records, "registration_fees"),
            avg_reimbursement=self.average(records, "reimbursement"),
        )

    def recent_records(self, records: Iterable[Any], n: int | None = None) -> list[Any]:
        """Newest ``n`` records; ties keep their input order."""
        limit = self._recent_limit if n is None else n
        ordered = sorted(
            records,
            key=lambda record: self._localize(record.created_at),
            reverse=True,
        )
        return ordered[:limit]

    def _trend(
        self,
        records: Iterable[Any],
        since: datetime,
        key_fn: Callable[[datetime], str],
    ) -> list[TrendBucket]:
        counts: Counter[str] = Counter()
        for record in records:
            moment = self._localize(record.created_at)
            if moment >= since:
                counts[key_fn(moment)] += 1
        # Zero-padded keys sort chronologically
        return [TrendBucket(key=key, count=counts[key]) for key in sorted(counts)]

    def monthly_trend(
        self,
        records: Iterable[Any],
        window_months: int = DEFAULT_WINDOW_MONTHS,
        now: datetime | None = None,
    ) -> list[TrendBucket]:
        since = subtract_months(self._now(now), window_months)
        return self._trend(records, since, month_key)

    def daily_trend(
        self,
        records: Iterable[Any],
        window_days: int = DEFAULT_WINDOW_DAYS,
        now: datetime | None = None,
    ) -> list[TrendBucket]:
        since = self._now(now) - timedelta(days=window_days)
        return self._trend(records, since, day_key)

    def weekly_trend(
        self,
        records: Iterable[Any],
        window_weeks: int = DEFAULT_WINDOW_WEEKS,
        now: datetime | None = None,
    ) -> list[TrendBucket]:
        since = self._now(now) - timedelta(days=window_weeks * 7)
        return self._trend(records, since, week_key)

    def window_floor(
        self,
        now: datetime | None = None,
        window_months: int = DEFAULT_WINDOW_MONTHS,
        window_days: int = DEFAULT_WINDOW_DAYS,
        window_weeks: int = DEFAULT_WINDOW_WEEKS,
    ) -> datetime:
        """Earliest trend window start, as naive UTC for pre-filtering queries."""
        local_now = self._now(now)
        earliest = min(
            subtract_months(local_now, window_months),
            local_now - timedelta(days=window_days),
            local_now - timedelta(days=window_weeks * 7),
        )
        # One extra hour absorbs DST folds when mapping back to UTC
        aware = earliest.replace(tzinfo=self._tz) - timedelta(hours=1)
        return aware.astimezone(timezone.utc).replace(tzinfo=None)


def build_aggregator(timezone_name: str, recent_limit: int = DEFAULT_RECENT_LIMIT) -> StatsAggregator:
    """Create an aggregator for an IANA timezone name (e.g. "UTC", "Asia/Kolkata")."""
    return StatsAggregator(tz=ZoneInfo(timezone_name), recent_limit=recent_limit)
