"""Statistics aggregation over scoped research records."""

from research_records.aggregators.stats_aggregator import (
    FinancialSummary,
    StatsAggregator,
    TrendBucket,
    VisibilityCounts,
    build_aggregator,
    week_key,
)

__all__ = [
    "FinancialSummary",
    "StatsAggregator",
    "TrendBucket",
    "VisibilityCounts",
    "build_aggregator",
    "week_key",
]
