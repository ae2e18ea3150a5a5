"""
Unit tests for the StatsAggregator
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from research_records.aggregators import StatsAggregator, build_aggregator
from research_records.aggregators.stats_aggregator import subtract_months, week_key

NOW = datetime(2024, 4, 20, 12, 0)


def record(
    created_at: datetime,
    is_public: bool = False,
    status: str = "SUBMITTED",
    registration_fees: float | None = None,
    reimbursement: float | None = None,
    title: str = "Record",
):
    return SimpleNamespace(
        created_at=created_at,
        is_public=is_public,
        status=status,
        registration_fees=registration_fees,
        reimbursement=reimbursement,
        title=title,
    )


@pytest.fixture
def aggregator() -> StatsAggregator:
    return StatsAggregator()


class TestCounts:
    """Status and visibility counts"""

    def test_status_counts_sum_to_record_count(self, aggregator):
        records = [
            record(NOW, status="SUBMITTED"),
            record(NOW, status="APPROVED"),
            record(NOW, status="SUBMITTED"),
        ]

        counts = aggregator.count_by_status(records, "status")

        assert counts == {"SUBMITTED": 2, "APPROVED": 1}
        assert sum(counts.values()) == len(records)

    def test_absent_statuses_are_omitted(self, aggregator):
        counts = aggregator.count_by_status([record(NOW, status="DRAFT")], "status")

        assert "PUBLISHED" not in counts

    def test_public_plus_private_equals_total(self, aggregator):
        records = [record(NOW, is_public=True), record(NOW), record(NOW)]

        counts = aggregator.total_and_visibility_counts(records)

        assert counts.total == 3
        assert counts.public_count == 1
        assert counts.private_count == 2
        assert counts.public_count + counts.private_count == counts.total

    def test_empty_input_is_all_zeros(self, aggregator):
        counts = aggregator.total_and_visibility_counts([])
        summary = aggregator.financial_summary([])

        assert (counts.total, counts.public_count, counts.private_count) == (0, 0, 0)
        assert summary.sum_fees == 0
        assert summary.sum_reimbursement == 0
        assert summary.avg_fees == 0
        assert summary.avg_reimbursement == 0
        assert aggregator.count_by_status([], "status") == {}
        assert aggregator.recent_records([]) == []


class TestFinancials:
    """Sums and averages skip missing values"""

    def test_average_ignores_missing_values(self, aggregator):
        records = [
            record(NOW, registration_fees=10),
            record(NOW, registration_fees=None),
            record(NOW, registration_fees=20),
        ]

        assert aggregator.average(records, "registration_fees") == 15
        assert aggregator.total(records, "registration_fees") == 30

    def test_financial_summary(self, aggregator):
        records = [
            record(NOW, registration_fees=100, reimbursement=40),
            record(NOW, registration_fees=300),
        ]

        summary = aggregator.financial_summary(records)

        assert summary.sum_fees == 400
        assert summary.avg_fees == 200
        assert summary.sum_reimbursement == 40
        assert summary.avg_reimbursement == 40

    def test_average_with_no_values_is_zero(self, aggregator):
        assert aggregator.average([record(NOW)], "reimbursement") == 0


class TestRecentRecords:
    """Most recent records, newest first"""

    def test_returns_all_when_fewer_than_limit(self, aggregator):
        records = [record(NOW - timedelta(days=i), title=f"r{i}") for i in range(3)]

        recent = aggregator.recent_records(list(reversed(records)))

        assert [r.title for r in recent] == ["r0", "r1", "r2"]

    def test_limits_to_five_newest(self, aggregator):
        records = [record(NOW - timedelta(days=i), title=f"r{i}") for i in range(8)]

        recent = aggregator.recent_records(records)

        assert len(recent) == 5
        assert [r.title for r in recent] == ["r0", "r1", "r2", "r3", "r4"]

    def test_configured_limit(self):
        aggregator = StatsAggregator(recent_limit=2)
        records = [record(NOW - timedelta(days=i)) for i in range(4)]

        assert len(aggregator.recent_records(records)) == 2

    def test_ties_keep_input_order(self, aggregator):
        records = [record(NOW, title=title) for title in ("a", "b", "c")]

        recent = aggregator.recent_records(records, 2)

        assert [r.title for r in recent] == ["a", "b"]

    def test_ties_after_newer_record(self, aggregator):
        records = [
            record(NOW - timedelta(hours=1), title="a"),
            record(NOW - timedelta(hours=1), title="b"),
            record(NOW, title="c"),
        ]

        recent = aggregator.recent_records(records)

        assert [r.title for r in recent] == ["c", "a", "b"]

    def test_does_not_mutate_input(self, aggregator):
        records = [record(NOW - timedelta(days=i)) for i in range(3)]
        snapshot = list(records)

        aggregator.recent_records(records)

        assert records == snapshot


class TestTrends:
    """Monthly, daily and weekly buckets"""

    def test_monthly_trend_buckets(self, aggregator):
        records = [
            record(datetime(2024, 3, 5, 10, 0)),
            record(datetime(2024, 3, 28, 9, 0)),
            record(datetime(2024, 4, 2, 8, 0)),
        ]

        trend = aggregator.monthly_trend(records, now=NOW)

        assert [(b.key, b.count) for b in trend] == [("2024-03", 2), ("2024-04", 1)]

    def test_monthly_trend_drops_records_outside_window(self, aggregator):
        records = [
            record(datetime(2023, 1, 1)),
            record(datetime(2024, 4, 1)),
        ]

        trend = aggregator.monthly_trend(records, now=NOW)

        assert [b.key for b in trend] == ["2024-04"]

    def test_trends_are_sparse_and_sorted(self, aggregator):
        records = [
            record(datetime(2024, 4, 10)),
            record(datetime(2023, 6, 1)),
            record(datetime(2024, 1, 15)),
        ]

        trend = aggregator.monthly_trend(records, now=NOW)
        keys = [b.key for b in trend]

        assert keys == sorted(keys)
        assert keys == ["2023-06", "2024-01", "2024-04"]
        assert all(b.count > 0 for b in trend)

    def test_daily_trend(self, aggregator):
        records = [
            record(datetime(2024, 4, 19, 8, 0)),
            record(datetime(2024, 4, 19, 22, 0)),
            record(datetime(2024, 3, 1)),
        ]

        trend = aggregator.daily_trend(records, now=NOW)

        assert [(b.key, b.count) for b in trend] == [("2024-04-19", 2)]

    def test_weekly_trend(self, aggregator):
        records = [
            record(datetime(2024, 4, 15, 9, 0)),
            record(datetime(2024, 4, 16, 9, 0)),
            record(datetime(2024, 3, 1, 10, 0)),
            # 84 days before NOW is Jan 27 12:00
            record(datetime(2024, 1, 27, 13, 0)),
            record(datetime(2024, 1, 27, 11, 0)),
        ]

        trend = aggregator.weekly_trend(records, now=NOW)

        assert [(b.key, b.count) for b in trend] == [
            ("2024-W05", 1),
            ("2024-W09", 1),
            ("2024-W16", 2),
        ]

    def test_trends_are_idempotent(self, aggregator):
        records = [record(datetime(2024, 3, 5)), record(datetime(2024, 4, 2))]

        first = aggregator.monthly_trend(records, now=NOW)
        second = aggregator.monthly_trend(records, now=NOW)

        assert first == second

    def test_timezone_moves_bucket(self):
        aggregator = StatsAggregator(tz=ZoneInfo("Asia/Kolkata"))
        # 20:00 UTC on Mar 31 is already Apr 1 in India
        records = [record(datetime(2024, 3, 31, 20, 0))]

        trend = aggregator.monthly_trend(records, now=NOW)

        assert [b.key for b in trend] == ["2024-04"]

    def test_aware_timestamps_are_converted(self, aggregator):
        aware = datetime(2024, 4, 1, 1, 0, tzinfo=ZoneInfo("Asia/Kolkata"))

        trend = aggregator.daily_trend(
            [record(aware)], now=datetime(2024, 4, 2, tzinfo=timezone.utc)
        )

        # 01:00 in India is still the previous day in UTC
        assert [b.key for b in trend] == ["2024-03-31"]


class TestWeekKey:
    """Legacy week numbering"""

    def test_first_day_of_year_is_week_one(self):
        # Jan 1 2025 is a Wednesday
        assert week_key(datetime(2025, 1, 1)) == "2025-W01"

    def test_week_rolls_over_on_sunday(self):
        # Jan 1 2025 is a Wednesday, so Saturday Jan 4 is still week one
        assert week_key(datetime(2025, 1, 4)) == "2025-W01"
        assert week_key(datetime(2025, 1, 5, 12, 0)) == "2025-W02"

    def test_week_is_zero_padded(self):
        assert week_key(datetime(2024, 2, 1)) == "2024-W05"

    def test_elapsed_days_are_fractional(self):
        # Jan 1 2022 is a Saturday
        assert week_key(datetime(2022, 1, 1)) == "2022-W01"
        assert week_key(datetime(2022, 1, 1, 23, 0)) == "2022-W02"


class TestWindows:
    """Window arithmetic"""

    def test_subtract_months_spills_past_month_end(self):
        assert subtract_months(datetime(2024, 3, 31, 10, 0), 1) == datetime(2024, 3, 2, 10, 0)
        assert subtract_months(datetime(2024, 2, 29, 12, 0), 12) == datetime(2023, 3, 1, 12, 0)

    def test_monthly_window_after_leap_day(self, aggregator):
        now = datetime(2024, 2, 29, 12, 0)
        records = [
            record(datetime(2023, 2, 28, 13, 0)),
            record(datetime(2023, 3, 1, 13, 0)),
        ]

        trend = aggregator.monthly_trend(records, now=now)

        assert [(b.key, b.count) for b in trend] == [("2023-03", 1)]

    def test_subtract_months_across_years(self):
        assert subtract_months(datetime(2024, 4, 20), 12) == datetime(2023, 4, 20)

    def test_window_floor_covers_every_trend(self, aggregator):
        floor = aggregator.window_floor(NOW)

        assert floor <= subtract_months(NOW, 12)
        assert floor <= NOW - timedelta(days=84)
        assert floor.tzinfo is None

    def test_build_aggregator_uses_timezone(self):
        aggregator = build_aggregator("Asia/Kolkata", recent_limit=3)

        assert aggregator.tz == ZoneInfo("Asia/Kolkata")
        assert len(aggregator.recent_records([record(NOW)] * 4)) == 3
