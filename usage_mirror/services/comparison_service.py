"""
Usage Mirror — Before vs. after comparison.

Compares the first N days of a record set with the most recent N days:

  before = records with (date - first_date).days < N
  after  = records with (last_date - date).days < N

Both windows are measured independently.  When the record set spans fewer
than 2N days the windows overlap and share records; that is accepted.

Each window gets the standard metric bundle: average daily minutes,
late-night frequency, a simplified risk score (usage tier + consistency)
and a simplified honesty score (gap and unrealistic-entry penalties, no
spike check).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo

import structlog

from usage_mirror.schemas import (
    ComparisonChanges,
    ComparisonResult,
    UsageRecord,
    WindowMetrics,
)
from usage_mirror.services.aggregation_service import AggregationService
from usage_mirror.services.honesty_service import HonestyService
from usage_mirror.utils.rounding import clamp, round2, round_half_up
from usage_mirror.utils.time_utils import day_gap, format_minutes, is_late_night

logger = structlog.get_logger("usage_mirror.comparison_service")


class ComparisonService:

    DEFAULT_DAYS: int = 7

    # Simplified risk base: (minimum average daily minutes, base points)
    RISK_BASE_TIERS: list[tuple[float, int]] = [
        (360, 80),
        (240, 60),
        (120, 40),
        (60, 20),
    ]
    RISK_BASE_FLOOR: int = 10
    CONSISTENCY_MAX_POINTS: float = 20
    DAYS_PER_WEEK: int = 7

    def __init__(
        self,
        aggregation_service: AggregationService | None = None,
        honesty_service: HonestyService | None = None,
    ) -> None:
        self.aggregation_service = aggregation_service or AggregationService()
        self.honesty_service = honesty_service or HonestyService()

    # ── Public API ──────────────────────────────────────────────────

    def compare(
        self,
        records: Sequence[UsageRecord],
        days_to_compare: int = DEFAULT_DAYS,
        tz: tzinfo | None = None,
    ) -> ComparisonResult | None:
        """Compare the first and last ``days_to_compare`` days.

        Returns ``None`` when there is not enough data (no records, or an
        empty window).
        """
        if not records:
            logger.debug("comparison.insufficient_data", reason="no_records")
            return None

        ordered = sorted(records, key=lambda r: r.date)
        first_date = ordered[0].date
        last_date = ordered[-1].date

        before_window = [r for r in ordered if day_gap(first_date, r.date) < days_to_compare]
        after_window = [r for r in ordered if day_gap(r.date, last_date) < days_to_compare]

        if not before_window or not after_window:
            logger.debug(
                "comparison.insufficient_data",
                reason="empty_window",
                days_to_compare=days_to_compare,
            )
            return None

        before = self.window_metrics(before_window, tz)
        after = self.window_metrics(after_window, tz)

        changes = ComparisonChanges(
            daily_usage=after.avg_daily_minutes - before.avg_daily_minutes,
            late_night_usage=after.late_night_frequency - before.late_night_frequency,
            risk_score=after.risk_score - before.risk_score,
            honesty_score=after.honesty_score - before.honesty_score,
        )

        logger.info(
            "comparison.compare_done",
            days_to_compare=days_to_compare,
            span_days=day_gap(first_date, last_date) + 1,
            before_records=len(before_window),
            after_records=len(after_window),
            daily_usage_change=changes.daily_usage,
            risk_score_change=changes.risk_score,
        )
        return ComparisonResult(
            before=before,
            after=after,
            changes=changes,
            days_compared=days_to_compare,
        )

    def window_metrics(
        self,
        records: Sequence[UsageRecord],
        tz: tzinfo | None = None,
    ) -> WindowMetrics:
        """Standard metric bundle for one bounded slice of records."""
        if not records:
            return WindowMetrics()

        day_totals = self.aggregation_service.group_by_day(records)
        total = sum(day_totals.values())
        days_active = len(day_totals)
        avg_daily = total / days_active

        late_night = sum(1 for r in records if is_late_night(r.created_at, tz))
        late_night_frequency = late_night / len(records)

        risk = self._simplified_risk(avg_daily, days_active)

        honesty = (
            HonestyService.PERFECT_SCORE
            - self.honesty_service.gap_penalty(sorted(day_totals))
            - self.honesty_service.unrealistic_penalty(records)
        )

        return WindowMetrics(
            avg_daily_minutes=round2(avg_daily),
            late_night_frequency=round2(late_night_frequency),
            risk_score=round_half_up(risk),
            honesty_score=round_half_up(clamp(honesty)),
            total_minutes=round2(total),
            days_active=days_active,
        )

    @staticmethod
    def summarize_changes(result: ComparisonResult) -> list[str]:
        """Human-readable highlights of what changed between the windows."""
        changes = result.changes
        lines: list[str] = []

        if changes.daily_usage < 0:
            lines.append(f"Your daily usage decreased by {format_minutes(abs(changes.daily_usage))}")
        elif changes.daily_usage > 0:
            lines.append(f"Your daily usage increased by {format_minutes(changes.daily_usage)}")

        late_pct = changes.late_night_usage * 100
        if late_pct < 0:
            lines.append(f"Late-night usage decreased by {abs(late_pct):.1f}%")
        elif late_pct > 0:
            lines.append(f"Late-night usage increased by {late_pct:.1f}%")

        if changes.risk_score < 0:
            lines.append(f"Your behavioral risk score improved by {abs(changes.risk_score)} points")
        elif changes.risk_score > 0:
            lines.append(f"Your behavioral risk score increased by {changes.risk_score} points")

        if changes.honesty_score > 0:
            lines.append(f"Your digital honesty score improved by {changes.honesty_score} points")
        elif changes.honesty_score < 0:
            lines.append(f"Your digital honesty score decreased by {abs(changes.honesty_score)} points")

        return lines

    # ── Internal helpers ────────────────────────────────────────────

    def _simplified_risk(self, avg_daily: float, days_active: int) -> float:
        base = self.RISK_BASE_FLOOR
        for threshold, points in self.RISK_BASE_TIERS:
            if avg_daily >= threshold:
                base = points
                break
        consistency = (days_active / self.DAYS_PER_WEEK) * self.CONSISTENCY_MAX_POINTS
        return min(100, base + consistency)
