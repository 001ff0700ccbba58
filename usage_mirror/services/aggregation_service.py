"""
Usage Mirror — Time-bucketed usage aggregation.

Turns raw usage records into the summary statistics every other component
builds on:

  daily_stats    per-record average and app breakdown for one logical day
  weekly_stats   day-grouped totals, active days, coarse trend, app breakdown
  monthly_stats  day-grouped totals and active days
  time_series    minutes summed per day / ISO week (Monday) / month bucket

Grouping always preserves first-seen order so that equal-minute apps keep
the order in which they were first logged.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from enum import Enum

import structlog

from usage_mirror.schemas import (
    AppUsage,
    DailyStats,
    MonthlyStats,
    TimeSeriesPoint,
    UsageRecord,
    WeeklyStats,
)
from usage_mirror.utils.rounding import round2
from usage_mirror.utils.time_utils import week_start

logger = structlog.get_logger("usage_mirror.aggregation_service")


class TimeSeriesPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class AggregationService:
    """Stateless aggregation of usage records into daily/weekly/monthly
    statistics and chart-ready time series."""

    # Trend compares the mean of the second half of the days to the first
    TREND_MIN_DAYS: int = 4
    TREND_INCREASE_FACTOR: float = 1.1
    TREND_DECREASE_FACTOR: float = 0.9

    # ── Public API ──────────────────────────────────────────────────

    def daily_stats(self, records: Sequence[UsageRecord]) -> DailyStats:
        """Summarise the records of a single logical day.

        ``average_minutes`` is the mean per *record*, not per day.
        """
        if not records:
            return DailyStats()

        total = sum(r.minutes_spent for r in records)
        apps = self._app_breakdown(records)

        stats = DailyStats(
            total_minutes=round2(total),
            average_minutes=round2(total / len(records)),
            app_count=len(apps),
            apps=apps,
        )
        logger.debug(
            "aggregation.daily_done",
            records=len(records),
            total_minutes=stats.total_minutes,
            app_count=stats.app_count,
        )
        return stats

    def weekly_stats(self, records: Sequence[UsageRecord]) -> WeeklyStats:
        """Summarise a week of records with trend detection."""
        if not records:
            return WeeklyStats()

        day_totals = self.group_by_day(records)
        total = sum(day_totals.values())
        days_active = len(day_totals)

        # Halves are split over chronologically ordered daily totals
        ordered_totals = [day_totals[d] for d in sorted(day_totals)]
        trend = self.detect_trend(ordered_totals)

        stats = WeeklyStats(
            total_minutes=round2(total),
            average_daily_minutes=round2(total / max(1, days_active)),
            days_active=days_active,
            trend=trend,
            apps=self._app_breakdown(records),
        )
        logger.debug(
            "aggregation.weekly_done",
            records=len(records),
            days_active=days_active,
            average_daily_minutes=stats.average_daily_minutes,
            trend=trend,
        )
        return stats

    def monthly_stats(self, records: Sequence[UsageRecord]) -> MonthlyStats:
        if not records:
            return MonthlyStats()

        day_totals = self.group_by_day(records)
        total = sum(day_totals.values())

        return MonthlyStats(
            total_minutes=round2(total),
            average_daily_minutes=round2(total / max(1, len(day_totals))),
            days_active=len(day_totals),
        )

    def time_series(
        self,
        records: Sequence[UsageRecord],
        period: TimeSeriesPeriod | str = TimeSeriesPeriod.DAILY,
    ) -> list[TimeSeriesPoint]:
        """Sum minutes per bucket and return points sorted by bucket key.

        Bucket keys are ``YYYY-MM-DD`` for daily, the ISO date of the
        Monday on or before the record's date for weekly, and ``YYYY-MM``
        for monthly.

        Raises
        ------
        ValueError
            If ``period`` is not one of daily, weekly, monthly.
        """
        period = TimeSeriesPeriod(period)
        if not records:
            return []

        buckets: dict[str, float] = {}
        for record in records:
            key = self._bucket_key(record.date, period)
            buckets[key] = buckets.get(key, 0.0) + record.minutes_spent

        points = [
            TimeSeriesPoint(date=key, minutes=round2(minutes))
            for key, minutes in buckets.items()
        ]
        points.sort(key=lambda p: p.date)

        logger.debug(
            "aggregation.time_series_done",
            period=period.value,
            buckets=len(points),
        )
        return points

    # ── Shared helpers ──────────────────────────────────────────────

    @staticmethod
    def group_by_day(records: Iterable[UsageRecord]) -> dict[date, float]:
        """Sum minutes per calendar day, in first-seen order."""
        totals: dict[date, float] = {}
        for record in records:
            totals[record.date] = totals.get(record.date, 0.0) + record.minutes_spent
        return totals

    def detect_trend(self, daily_totals: Sequence[float]) -> str:
        """Classify a chronological run of daily totals.

        Fewer than ``TREND_MIN_DAYS`` values is always ``"stable"``.
        """
        if len(daily_totals) < self.TREND_MIN_DAYS:
            return "stable"

        midpoint = len(daily_totals) // 2
        first_half = sum(daily_totals[:midpoint]) / midpoint
        second_half = sum(daily_totals[midpoint:]) / (len(daily_totals) - midpoint)

        if second_half > first_half * self.TREND_INCREASE_FACTOR:
            return "increasing"
        if second_half < first_half * self.TREND_DECREASE_FACTOR:
            return "decreasing"
        return "stable"

    # ── Internal helpers ────────────────────────────────────────────

    @staticmethod
    def _app_breakdown(records: Iterable[UsageRecord]) -> list[AppUsage]:
        per_app: dict[str, float] = {}
        for record in records:
            per_app[record.app_name] = per_app.get(record.app_name, 0.0) + record.minutes_spent

        # sorted() is stable: equal minutes keep first-seen order
        ranked = sorted(per_app.items(), key=lambda item: item[1], reverse=True)
        return [AppUsage(name=name, minutes=round2(minutes)) for name, minutes in ranked]

    @staticmethod
    def _bucket_key(day: date, period: TimeSeriesPeriod) -> str:
        if period is TimeSeriesPeriod.DAILY:
            return day.isoformat()
        if period is TimeSeriesPeriod.WEEKLY:
            return week_start(day).isoformat()
        return f"{day.year:04d}-{day.month:02d}"
