from __future__ import annotations

from typing import Literal, Optional

from usage_mirror.schemas.base import CamelModel

RegretType = Literal["attentionDrain", "burnout", "habitualScrolling"]
RiskScoreTrend = Literal["increasing", "stable_high", "stable"]


class RiskScore(CamelModel):
    score: int = 0
    category: Literal["Low", "Moderate", "High"] = "Low"
    level: Literal["low", "moderate", "high"] = "low"


class RegretTypes(CamelModel):
    """Unbounded per-type accumulators; declaration order breaks ties."""

    attention_drain: int = 0
    burnout: int = 0
    habitual_scrolling: int = 0


class RegretAnalysis(CamelModel):
    regret_score: int
    regret_level: Literal["low", "medium", "high"]
    regret_types: RegretTypes
    dominant_type: RegretType


class RegretInputs(CamelModel):
    """Signals fed into the regret analysis, derived from the raw records."""

    daily_avg: float = 0
    late_night_frequency: float = 0
    intent_drift_frequency: float = 0
    risk_score_trend: RiskScoreTrend = "stable"
    honesty_score: int = 100
    repeated_opens: int = 0
    total_days: int = 0


class RegretReport(CamelModel):
    analysis: RegretAnalysis
    letter: str
    regret_list: list[str]
    stats: RegretInputs
    risk_score: Optional[RiskScore] = None
