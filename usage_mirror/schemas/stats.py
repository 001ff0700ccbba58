from __future__ import annotations

from typing import Literal

from usage_mirror.schemas.base import CamelModel

Trend = Literal["increasing", "decreasing", "stable"]


class AppUsage(CamelModel):
    name: str
    minutes: float


class DailyStats(CamelModel):
    total_minutes: float = 0
    average_minutes: float = 0
    app_count: int = 0
    apps: list[AppUsage] = []


class WeeklyStats(CamelModel):
    total_minutes: float = 0
    average_daily_minutes: float = 0
    days_active: int = 0
    trend: Trend = "stable"
    apps: list[AppUsage] = []


class MonthlyStats(CamelModel):
    total_minutes: float = 0
    average_daily_minutes: float = 0
    days_active: int = 0


class TimeSeriesPoint(CamelModel):
    date: str  # bucket key: YYYY-MM-DD or YYYY-MM
    minutes: float
