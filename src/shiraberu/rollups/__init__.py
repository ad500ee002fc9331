"""Calendar rollups: daily buckets, ISO-week and month aggregates, comparisons."""

from .aggregator import (
    DailyStat,
    MonthlyStat,
    RepoStat,
    Summary,
    WeeklyStat,
    compute_daily_stats,
    compute_monthly_stats,
    compute_repo_stats,
    compute_summary,
    compute_weekly_stats,
)
from .bucketer import group_by_date, sort_buckets
from .comparison import SummaryDiff, diff_summaries
from .time_windows import (
    compute_period_boundaries,
    get_week_start,
    iso_week_key,
    month_bounds,
)

__all__ = [
    # Time windows
    "compute_period_boundaries",
    "get_week_start",
    "iso_week_key",
    "month_bounds",
    # Bucketing
    "group_by_date",
    "sort_buckets",
    # Aggregation
    "DailyStat",
    "MonthlyStat",
    "RepoStat",
    "Summary",
    "WeeklyStat",
    "compute_daily_stats",
    "compute_monthly_stats",
    "compute_repo_stats",
    "compute_summary",
    "compute_weekly_stats",
    # Comparison
    "SummaryDiff",
    "diff_summaries",
]
