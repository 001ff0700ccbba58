"""
Usage Mirror — Insight orchestration.

Composes the individual engines into the bundles the surrounding system
asks for:

  build_dashboard  today / week / month stats, risk score, top apps,
                   chart series and the honesty score
  build_stats      stats + time series for one caller-chosen period
  simulate_regret  derive regret signals from the records and render the
                   full regret report (analysis, letter, list)

Record selection by date range is the caller's job; every method works
only on the collections it is handed.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo
from typing import Any

import structlog

from usage_mirror.config import get_settings
from usage_mirror.schemas import RegretReport, UsageRecord
from usage_mirror.services.aggregation_service import AggregationService, TimeSeriesPeriod
from usage_mirror.services.honesty_service import HonestyService
from usage_mirror.services.regret_service import RegretService
from usage_mirror.services.risk_service import RiskService

logger = structlog.get_logger("usage_mirror.insights_service")


class InsightsService:
    """Dependencies are injected at construction so that the service can be
    tested with substitutes; defaults are the real engines."""

    def __init__(
        self,
        aggregation_service: AggregationService | None = None,
        risk_service: RiskService | None = None,
        honesty_service: HonestyService | None = None,
        regret_service: RegretService | None = None,
    ) -> None:
        self.aggregation_service = aggregation_service or AggregationService()
        self.risk_service = risk_service or RiskService(self.aggregation_service)
        self.honesty_service = honesty_service or HonestyService()
        self.regret_service = regret_service or RegretService()
        self.top_apps_limit = get_settings().TOP_APPS_LIMIT

    # ── Public API ──────────────────────────────────────────────────

    def build_dashboard(
        self,
        today_records: Sequence[UsageRecord],
        weekly_records: Sequence[UsageRecord],
        monthly_records: Sequence[UsageRecord],
    ) -> dict[str, Any]:
        """Assemble the dashboard payload (wire-named keys)."""
        agg = self.aggregation_service

        daily = agg.daily_stats(today_records)
        weekly = agg.weekly_stats(weekly_records)
        monthly = agg.monthly_stats(monthly_records)
        risk = self.risk_service.calculate_risk_score(weekly_records, monthly_records)
        honesty = self.honesty_service.calculate_honesty_score(monthly_records)

        dashboard = {
            "daily": daily.model_dump(by_alias=True),
            "weekly": weekly.model_dump(by_alias=True),
            "monthly": monthly.model_dump(by_alias=True),
            "riskScore": risk.model_dump(by_alias=True),
            "honestyScore": honesty,
            "topApps": [
                app.model_dump(by_alias=True) for app in weekly.apps[: self.top_apps_limit]
            ],
            "charts": {
                "daily": [
                    p.model_dump(by_alias=True)
                    for p in agg.time_series(weekly_records, TimeSeriesPeriod.DAILY)
                ],
                "weekly": [
                    p.model_dump(by_alias=True)
                    for p in agg.time_series(monthly_records, TimeSeriesPeriod.WEEKLY)
                ],
            },
        }

        logger.info(
            "insights.dashboard_built",
            today_records=len(today_records),
            weekly_records=len(weekly_records),
            monthly_records=len(monthly_records),
            risk_score=risk.score,
            honesty_score=honesty,
        )
        return dashboard

    def build_stats(
        self,
        records: Sequence[UsageRecord],
        period: TimeSeriesPeriod | str = TimeSeriesPeriod.DAILY,
    ) -> dict[str, Any]:
        """Stats and time series for one period.

        Raises
        ------
        ValueError
            If ``period`` is not one of daily, weekly, monthly.
        """
        period = TimeSeriesPeriod(period)
        agg = self.aggregation_service

        if period is TimeSeriesPeriod.DAILY:
            stats = agg.daily_stats(records)
        elif period is TimeSeriesPeriod.WEEKLY:
            stats = agg.weekly_stats(records)
        else:
            stats = agg.monthly_stats(records)

        return {
            "stats": stats.model_dump(by_alias=True),
            "timeSeries": [p.model_dump(by_alias=True) for p in agg.time_series(records, period)],
            "period": period.value,
        }

    def simulate_regret(
        self,
        records: Sequence[UsageRecord],
        weekly_records: Sequence[UsageRecord],
        tz: tzinfo | None = None,
    ) -> RegretReport | None:
        """Full regret report, or ``None`` when there are no records."""
        if not records:
            logger.debug("insights.regret_skipped", reason="no_records")
            return None

        weekly = self.aggregation_service.weekly_stats(weekly_records)
        risk = self.risk_service.calculate_risk_score(weekly_records)
        honesty = self.honesty_service.calculate_honesty_score(records)

        regret = self.regret_service
        inputs = regret.derive_inputs(records, weekly, risk, honesty, tz)
        analysis = regret.analyze(
            daily_avg=inputs.daily_avg,
            late_night_frequency=inputs.late_night_frequency,
            intent_drift_frequency=inputs.intent_drift_frequency,
            risk_score_trend=inputs.risk_score_trend,
            honesty_score=inputs.honesty_score,
        )

        report = RegretReport(
            analysis=analysis,
            letter=regret.generate_letter(analysis, inputs.daily_avg, inputs.total_days),
            regret_list=regret.generate_regret_list(
                analysis,
                late_night_frequency=inputs.late_night_frequency,
                intent_drift_frequency=inputs.intent_drift_frequency,
                daily_avg=inputs.daily_avg,
                repeated_opens=inputs.repeated_opens,
            ),
            stats=inputs,
            risk_score=risk,
        )
        logger.info(
            "insights.regret_simulated",
            records=len(records),
            regret_score=analysis.regret_score,
            dominant_type=analysis.dominant_type,
        )
        return report
