"""
Usage Mirror — schema registry.

Re-exports every input and output model so call-sites can import from
``usage_mirror.schemas`` directly.
"""

from usage_mirror.schemas.comparison import ComparisonChanges, ComparisonResult, WindowMetrics
from usage_mirror.schemas.mirror import MirrorInsight
from usage_mirror.schemas.scores import (
    RegretAnalysis,
    RegretInputs,
    RegretReport,
    RegretTypes,
    RiskScore,
)
from usage_mirror.schemas.stats import (
    AppUsage,
    DailyStats,
    MonthlyStats,
    TimeSeriesPoint,
    WeeklyStats,
)
from usage_mirror.schemas.usage import FoundIt, UsageRecord, parse_records

__all__ = [
    "AppUsage",
    "ComparisonChanges",
    "ComparisonResult",
    "DailyStats",
    "FoundIt",
    "MirrorInsight",
    "MonthlyStats",
    "RegretAnalysis",
    "RegretInputs",
    "RegretReport",
    "RegretTypes",
    "RiskScore",
    "TimeSeriesPoint",
    "UsageRecord",
    "WeeklyStats",
    "WindowMetrics",
    "parse_records",
]
