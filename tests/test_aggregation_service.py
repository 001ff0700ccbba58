"""Unit tests for AggregationService — daily/weekly/monthly stats and time series."""
import pytest

from usage_mirror.schemas import DailyStats, MonthlyStats, WeeklyStats
from usage_mirror.services.aggregation_service import AggregationService, TimeSeriesPeriod


@pytest.fixture
def aggregation_service():
    return AggregationService()


class TestDailyStats:
    """Tests for single-day summaries."""

    def test_empty_returns_zeroed_defaults(self, aggregation_service):
        stats = aggregation_service.daily_stats([])
        assert stats == DailyStats()
        assert stats.total_minutes == 0
        assert stats.apps == []

    def test_average_is_per_record(self, aggregation_service, make_record):
        """Average divides by record count, not by day count."""
        records = [
            make_record(0, 30, app="Instagram"),
            make_record(0, 60, app="TikTok"),
            make_record(0, 90, app="YouTube"),
        ]
        stats = aggregation_service.daily_stats(records)
        assert stats.total_minutes == 180
        assert stats.average_minutes == 60
        assert stats.app_count == 3

    def test_apps_sorted_descending_ties_first_seen(self, aggregation_service, make_record):
        """Equal-minute apps keep the order they were first logged in."""
        records = [
            make_record(0, 40, app="Snapchat"),
            make_record(0, 90, app="YouTube"),
            make_record(0, 40, app="Reddit"),
            make_record(0, 40, app="Twitter"),
        ]
        stats = aggregation_service.daily_stats(records)
        assert [a.name for a in stats.apps] == ["YouTube", "Snapchat", "Reddit", "Twitter"]

    def test_minutes_rounded_to_two_decimals(self, aggregation_service, make_record):
        records = [make_record(0, 10.126, app="Instagram")]
        stats = aggregation_service.daily_stats(records)
        assert stats.total_minutes == 10.13
        assert stats.apps[0].minutes == 10.13


class TestWeeklyStats:
    """Tests for weekly summaries and trend detection."""

    def test_empty_returns_stable_defaults(self, aggregation_service):
        stats = aggregation_service.weekly_stats([])
        assert stats == WeeklyStats()
        assert stats.trend == "stable"

    def test_steady_week(self, aggregation_service, steady_week):
        """7 days x 60 min, single app."""
        stats = aggregation_service.weekly_stats(steady_week)
        assert stats.average_daily_minutes == 60
        assert stats.days_active == 7
        assert stats.trend == "stable"
        assert stats.total_minutes == 420
        assert [(a.name, a.minutes) for a in stats.apps] == [("Instagram", 420)]

    def test_trend_increasing(self, aggregation_service, daily_series):
        stats = aggregation_service.weekly_stats(daily_series([10, 10, 50, 50]))
        assert stats.trend == "increasing"

    def test_trend_decreasing(self, aggregation_service, daily_series):
        stats = aggregation_service.weekly_stats(daily_series([50, 50, 10, 10]))
        assert stats.trend == "decreasing"

    def test_trend_stable(self, aggregation_service, daily_series):
        stats = aggregation_service.weekly_stats(daily_series([30, 30, 30, 30]))
        assert stats.trend == "stable"

    def test_trend_requires_four_days(self, aggregation_service, daily_series):
        """Three days is never enough for a trend, however steep."""
        stats = aggregation_service.weekly_stats(daily_series([10, 100, 500]))
        assert stats.trend == "stable"

    def test_trend_uses_chronological_order(self, aggregation_service, daily_series):
        """Records supplied newest-first still split halves by date."""
        records = list(reversed(daily_series([10, 10, 50, 50])))
        stats = aggregation_service.weekly_stats(records)
        assert stats.trend == "increasing"

    def test_odd_day_count_second_half_larger(self, aggregation_service, daily_series):
        """midpoint = floor(5/2) = 2: first half [20, 20], second [20, 20, 20]."""
        stats = aggregation_service.weekly_stats(daily_series([20] * 5))
        assert stats.trend == "stable"

    def test_days_grouped_across_apps(self, aggregation_service, make_record):
        records = [
            make_record(0, 30, app="Instagram"),
            make_record(0, 30, app="TikTok"),
            make_record(1, 60, app="Instagram"),
        ]
        stats = aggregation_service.weekly_stats(records)
        assert stats.days_active == 2
        assert stats.average_daily_minutes == 60


class TestMonthlyStats:
    """Tests for monthly summaries."""

    def test_empty(self, aggregation_service):
        assert aggregation_service.monthly_stats([]) == MonthlyStats()

    def test_average_per_active_day(self, aggregation_service, daily_series):
        stats = aggregation_service.monthly_stats(daily_series([30, 60, 90], start=10))
        assert stats.total_minutes == 180
        assert stats.average_daily_minutes == 60
        assert stats.days_active == 3


class TestTimeSeries:
    """Tests for chart bucketing."""

    def test_empty(self, aggregation_service):
        assert aggregation_service.time_series([], "daily") == []

    def test_daily_sorted_ascending(self, aggregation_service, make_record):
        records = [
            make_record(2, 15),
            make_record(0, 30, app="TikTok"),
            make_record(0, 30),
        ]
        points = aggregation_service.time_series(records, TimeSeriesPeriod.DAILY)
        assert [(p.date, p.minutes) for p in points] == [
            ("2024-03-04", 60),
            ("2024-03-06", 15),
        ]

    def test_weekly_buckets_start_on_monday(self, aggregation_service, make_record):
        """BASE_DATE is Monday 2024-03-04; Sunday the 10th stays in that week."""
        records = [
            make_record(2, 10),   # Wed 2024-03-06
            make_record(6, 20),   # Sun 2024-03-10
            make_record(7, 40),   # Mon 2024-03-11
        ]
        points = aggregation_service.time_series(records, "weekly")
        assert [(p.date, p.minutes) for p in points] == [
            ("2024-03-04", 30),
            ("2024-03-11", 40),
        ]

    def test_monthly_buckets(self, aggregation_service, make_record):
        records = [
            make_record(0, 10),    # 2024-03-04
            make_record(30, 20),   # 2024-04-03
            make_record(-10, 5),   # 2024-02-23
        ]
        points = aggregation_service.time_series(records, "monthly")
        assert [p.date for p in points] == ["2024-02", "2024-03", "2024-04"]

    def test_unknown_period_rejected(self, aggregation_service, make_record):
        with pytest.raises(ValueError):
            aggregation_service.time_series([make_record()], "yearly")


class TestIdempotence:
    """Repeated calls on the same input give identical results."""

    def test_weekly_twice(self, aggregation_service, daily_series):
        records = daily_series([10, 25, 40, 55, 70])
        assert aggregation_service.weekly_stats(records) == aggregation_service.weekly_stats(records)
