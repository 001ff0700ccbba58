from __future__ import annotations

from usage_mirror.schemas.base import CamelModel


class WindowMetrics(CamelModel):
    avg_daily_minutes: float = 0
    late_night_frequency: float = 0
    risk_score: int = 0
    honesty_score: int = 100
    total_minutes: float = 0
    days_active: int = 0


class ComparisonChanges(CamelModel):
    """``after - before`` for each metric; signed."""

    daily_usage: float
    late_night_usage: float
    risk_score: int
    honesty_score: int


class ComparisonResult(CamelModel):
    before: WindowMetrics
    after: WindowMetrics
    changes: ComparisonChanges
    days_compared: int
