"""
Usage Mirror — Behavioral risk scoring.

Combines a week of usage into a 0-100 heuristic indicator of usage-pattern
intensity.  This is a behavioral indicator, not a clinical measure.

Four additive factors, summed, rounded half-up and clamped to [0, 100]:

  Average daily usage   max 40 pts   tiered on weekly average minutes/day
  Peak single day       max 20 pts   tiered on the heaviest day of the week
  Consistency           max 20 pts   (days_active / 7) * 20
  Trend                 max 20 pts   increasing 20, stable 10, decreasing 5

Category thresholds: >= 70 High, >= 40 Moderate, otherwise Low.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from usage_mirror.schemas import RiskScore, UsageRecord
from usage_mirror.services.aggregation_service import AggregationService
from usage_mirror.utils.rounding import clamp, round_half_up

logger = structlog.get_logger("usage_mirror.risk_service")


class RiskService:
    """Score a week of usage records for behavioral risk.

    Only the weekly record set feeds the score: the peak and trend factors
    need day-level granularity within the week.  The monthly set is
    accepted for call-site symmetry and ignored.
    """

    HIGH_THRESHOLD: int = 70
    MODERATE_THRESHOLD: int = 40

    TREND_POINTS: dict[str, float] = {
        "increasing": 20,
        "stable": 10,
        "decreasing": 5,
    }

    CONSISTENCY_MAX_POINTS: float = 20
    DAYS_PER_WEEK: int = 7

    def __init__(self, aggregation_service: AggregationService | None = None) -> None:
        self.aggregation_service = aggregation_service or AggregationService()

    # ── Public API ──────────────────────────────────────────────────

    def calculate_risk_score(
        self,
        weekly_records: Sequence[UsageRecord],
        monthly_records: Sequence[UsageRecord] | None = None,
    ) -> RiskScore:
        """Main entry point.  Empty weekly input scores 0 / Low."""
        if not weekly_records:
            logger.debug("risk.empty_input")
            return RiskScore(score=0, category="Low", level="low")

        weekly = self.aggregation_service.weekly_stats(weekly_records)
        day_totals = self.aggregation_service.group_by_day(weekly_records)
        peak_minutes = max(day_totals.values(), default=0.0)

        usage_points = self._average_usage_points(weekly.average_daily_minutes)
        peak_points = self._peak_day_points(peak_minutes)
        consistency_points = (
            weekly.days_active / self.DAYS_PER_WEEK
        ) * self.CONSISTENCY_MAX_POINTS
        trend_points = self.TREND_POINTS.get(weekly.trend, self.TREND_POINTS["decreasing"])

        raw = usage_points + peak_points + consistency_points + trend_points
        score = int(clamp(round_half_up(raw)))
        category, level = self.categorize(score)

        logger.info(
            "risk.calculate_done",
            average_daily_minutes=weekly.average_daily_minutes,
            peak_minutes=round(peak_minutes, 2),
            days_active=weekly.days_active,
            trend=weekly.trend,
            usage_points=round(usage_points, 2),
            peak_points=round(peak_points, 2),
            consistency_points=round(consistency_points, 2),
            trend_points=trend_points,
            score=score,
            category=category,
        )
        return RiskScore(score=score, category=category, level=level)

    @classmethod
    def categorize(cls, score: int) -> tuple[str, str]:
        """Return ``(category, level)`` for a 0-100 score."""
        if score >= cls.HIGH_THRESHOLD:
            return ("High", "high")
        if score >= cls.MODERATE_THRESHOLD:
            return ("Moderate", "moderate")
        return ("Low", "low")

    # ── Factor tables ───────────────────────────────────────────────

    @staticmethod
    def _average_usage_points(avg_daily: float) -> float:
        """Average daily usage factor (max 40).

        >= 360 min : 40
        240-360    : 30-35
        120-240    : 20-30
        60-120     : 10-20
        < 60       : 0-10
        """
        if avg_daily >= 360:
            return 40
        if avg_daily >= 240:
            return 30 + ((avg_daily - 240) / 120) * 5
        if avg_daily >= 120:
            return 20 + ((avg_daily - 120) / 120) * 10
        if avg_daily >= 60:
            return 10 + ((avg_daily - 60) / 60) * 10
        return (avg_daily / 60) * 10

    @staticmethod
    def _peak_day_points(peak_minutes: float) -> float:
        """Peak single day factor (max 20).

        >= 360 min : 20
        240-360    : 15-20
        120-240    : 10-15
        < 120      : 0-5
        """
        if peak_minutes >= 360:
            return 20
        if peak_minutes >= 240:
            return 15 + ((peak_minutes - 240) / 120) * 5
        if peak_minutes >= 120:
            return 10 + ((peak_minutes - 120) / 120) * 5
        return (peak_minutes / 120) * 5
