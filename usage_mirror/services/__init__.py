from usage_mirror.services.aggregation_service import AggregationService, TimeSeriesPeriod
from usage_mirror.services.comparison_service import ComparisonService
from usage_mirror.services.honesty_service import HonestyService
from usage_mirror.services.insights_service import InsightsService
from usage_mirror.services.mirror_service import MirrorService
from usage_mirror.services.regret_service import RegretService
from usage_mirror.services.risk_service import RiskService

__all__ = [
    "AggregationService",
    "ComparisonService",
    "HonestyService",
    "InsightsService",
    "MirrorService",
    "RegretService",
    "RiskService",
    "TimeSeriesPeriod",
]
