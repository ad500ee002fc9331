"""Tests for dense daily, weekly and monthly rollups."""

from datetime import date, timedelta

import pytest

from shiraberu.core.models import DailyBucket
from shiraberu.core.period import Period
from shiraberu.core.time import parse_utc_offset
from shiraberu.rollups.aggregator import (
    compute_daily_stats,
    compute_monthly_stats,
    compute_repo_stats,
    compute_summary,
    compute_weekly_stats,
)
from shiraberu.rollups.bucketer import group_by_date

JST = parse_utc_offset("+09:00")


@pytest.fixture
def sample_days(make_record):
    """Activity between 2024-12-30 and 2025-01-15 in the +09:00 timezone."""
    opened = [
        make_record(created="2024-12-30T01:00:00Z", additions=10, deletions=1),
        make_record(created="2025-01-02T01:00:00Z", additions=20, deletions=2, is_draft=True),
        make_record(created="2025-01-10T20:00:00Z", additions=5, repository="web-frontend"),
    ]
    merged = [
        make_record(merged="2025-01-02T03:00:00Z", additions=100, deletions=50, state="merged"),
        make_record(merged="2025-01-14T03:00:00Z", additions=7, deletions=3, state="merged"),
    ]
    reviewed = [
        make_record(updated="2025-01-06T03:00:00Z", additions=999, repository="web-frontend"),
    ]
    return group_by_date(opened, merged, reviewed, JST)


class TestDailyStats:
    def test_dense_length_and_order(self, sample_days):
        period = Period(date(2025, 1, 1), date(2025, 1, 15))

        stats = compute_daily_stats(period, sample_days)

        assert len(stats) == period.num_days
        assert [stat.date for stat in stats] == period.days()

    def test_zero_filled_days(self, sample_days):
        stats = compute_daily_stats(Period(date(2025, 1, 1), date(2025, 1, 15)), sample_days)
        by_date = {stat.date: stat for stat in stats}

        assert by_date[date(2025, 1, 3)].total_count == 0
        assert by_date[date(2025, 1, 3)].additions == 0

    def test_counts_and_line_changes(self, sample_days):
        stats = compute_daily_stats(Period(date(2025, 1, 1), date(2025, 1, 15)), sample_days)
        jan2 = next(stat for stat in stats if stat.date == date(2025, 1, 2))

        assert jan2.draft_count == 1
        assert jan2.merged_count == 1
        # opened + draft + merged, reviews excluded
        assert jan2.additions == 120
        assert jan2.deletions == 52

    def test_reviews_do_not_count_lines(self, sample_days):
        stats = compute_daily_stats(Period(date(2025, 1, 6), date(2025, 1, 6)), sample_days)

        assert stats[0].reviewed_count == 1
        assert stats[0].additions == 0

    def test_buckets_outside_period_are_ignored(self, sample_days):
        stats = compute_daily_stats(Period(date(2025, 1, 1), date(2025, 1, 7)), sample_days)

        assert sum(stat.total_count for stat in stats) == 3

    def test_empty_input_gives_all_zero(self):
        stats = compute_daily_stats(Period(date(2025, 2, 1), date(2025, 2, 28)), [])

        assert len(stats) == 28
        assert all(stat.total_count == 0 for stat in stats)

    def test_order_of_input_does_not_matter(self, sample_days):
        period = Period(date(2024, 12, 30), date(2025, 1, 15))

        assert compute_daily_stats(period, sample_days) == compute_daily_stats(period, list(reversed(sample_days)))


class TestWeeklyStats:
    def test_weeks_cover_period_disjointly(self, sample_days):
        period = Period(date(2025, 1, 1), date(2025, 1, 15))

        weeks = compute_weekly_stats(period, sample_days)

        assert [week.key for week in weeks] == ["2025-W01", "2025-W02", "2025-W03"]
        covered = []
        for week in weeks:
            day = week.covered_start
            while day <= week.covered_end:
                covered.append(day)
                day += timedelta(days=1)
        assert covered == period.days()

    def test_week_bounds_and_label(self, sample_days):
        weeks = compute_weekly_stats(Period(date(2025, 1, 1), date(2025, 1, 15)), sample_days)
        first = weeks[0]

        assert first.start_date == date(2024, 12, 30)
        assert first.end_date == date(2025, 1, 5)
        assert first.start_date.weekday() == 0
        assert first.covered_start == date(2025, 1, 1)
        assert first.label == "12/30 ~ 1/5"

    def test_only_in_period_days_are_counted(self, sample_days):
        """Dec 30 is in ISO week 2025-W01 but outside the period."""
        weeks = compute_weekly_stats(Period(date(2025, 1, 1), date(2025, 1, 15)), sample_days)

        assert weeks[0].opened_count == 0
        assert weeks[0].draft_count == 1
        assert weeks[0].merged_count == 1

    def test_weekly_sums_match_daily(self, sample_days):
        period = Period(date(2024, 12, 30), date(2025, 1, 15))

        daily = compute_daily_stats(period, sample_days)
        weekly = compute_weekly_stats(period, sample_days)

        assert sum(w.total_count for w in weekly) == sum(d.total_count for d in daily)
        assert sum(w.additions for w in weekly) == sum(d.additions for d in daily)

    def test_empty_weeks_are_zero_filled(self):
        weeks = compute_weekly_stats(Period(date(2025, 1, 6), date(2025, 1, 26)), [])

        assert len(weeks) == 3
        assert all(week.total_count == 0 for week in weeks)


class TestMonthlyStats:
    def test_months_across_year_boundary(self, sample_days):
        months = compute_monthly_stats(Period(date(2024, 12, 15), date(2025, 1, 15)), sample_days)

        assert [month.key for month in months] == ["2024-12", "2025-01"]
        assert months[0].start_date == date(2024, 12, 1)
        assert months[0].end_date == date(2024, 12, 31)
        assert months[0].covered_start == date(2024, 12, 15)
        assert months[0].opened_count == 1
        assert months[1].label == "Jan 2025"

    def test_leap_february_zero_filled(self):
        months = compute_monthly_stats(Period(date(2024, 1, 20), date(2024, 3, 5)), [])

        assert [month.key for month in months] == ["2024-01", "2024-02", "2024-03"]
        february = months[1]
        assert february.start_date == date(2024, 2, 1)
        assert february.end_date == date(2024, 2, 29)
        assert february.total_count == 0

    def test_december_last_day(self):
        months = compute_monthly_stats(Period(date(2025, 12, 1), date(2025, 12, 1)), [])

        assert months[0].end_date == date(2025, 12, 31)

    def test_monthly_sums_match_daily(self, sample_days):
        period = Period(date(2024, 12, 1), date(2025, 1, 31))

        daily = compute_daily_stats(period, sample_days)
        monthly = compute_monthly_stats(period, sample_days)

        assert sum(m.total_count for m in monthly) == sum(d.total_count for d in daily)


class TestSummary:
    def test_counts_and_merged_only_line_totals(self, sample_days):
        summary = compute_summary(sample_days)

        assert summary.opened_count == 2
        assert summary.draft_count == 1
        assert summary.merged_count == 2
        assert summary.reviewed_count == 1
        assert summary.additions == 107
        assert summary.deletions == 53

    def test_empty(self):
        summary = compute_summary([])

        assert summary.to_dict() == {
            "opened_count": 0,
            "draft_count": 0,
            "merged_count": 0,
            "reviewed_count": 0,
            "additions": 0,
            "deletions": 0,
        }

    def test_summary_matches_bucket_counts(self, sample_days):
        summary = compute_summary(sample_days)

        total = summary.opened_count + summary.draft_count + summary.merged_count + summary.reviewed_count
        assert total == sum(bucket.total_count for bucket in sample_days)


class TestRepoStats:
    def test_busiest_first_then_name(self, sample_days):
        repos = compute_repo_stats(sample_days)

        assert [(repo.repository, repo.count) for repo in repos] == [
            ("api-server", 4),
            ("web-frontend", 2),
        ]

    def test_ties_broken_by_name(self, make_record):
        days = [DailyBucket(date=date(2025, 1, 1))]
        days[0].opened.append(make_record(repository="zeta"))
        days[0].merged.append(make_record(repository="alpha"))

        assert [repo.repository for repo in compute_repo_stats(days)] == ["alpha", "zeta"]


def test_to_dict_serializes_dates(sample_days):
    stat = compute_weekly_stats(Period(date(2025, 1, 1), date(2025, 1, 5)), sample_days)[0]

    data = stat.to_dict()

    assert data["start_date"] == "2024-12-30"
    assert data["covered_start"] == "2025-01-01"
    assert data["total_count"] == stat.total_count


@pytest.mark.parametrize("compute", [compute_daily_stats, compute_weekly_stats, compute_monthly_stats])
def test_rollups_are_idempotent_and_order_independent(compute, sample_days):
    period = Period(date(2024, 12, 1), date(2025, 1, 31))

    first = compute(period, sample_days)

    assert compute(period, sample_days) == first
    assert compute(period, list(reversed(sample_days))) == first
