"""Shared pytest fixtures for Usage Mirror tests."""
from datetime import date, datetime, timedelta, timezone

import pytest
import structlog

from usage_mirror.config import get_settings
from usage_mirror.schemas import UsageRecord

# A Monday, so day offsets line up with weekdays
BASE_DATE = date(2024, 3, 4)


def _build_record(
    day_offset=0,
    minutes=60,
    app="Instagram",
    created_hour=None,
    intention=None,
    found_it=None,
):
    day = BASE_DATE + timedelta(days=day_offset)
    created_at = None
    if created_hour is not None:
        created_at = datetime(day.year, day.month, day.day, created_hour, 0, tzinfo=timezone.utc)
    return UsageRecord(
        app_name=app,
        minutes_spent=minutes,
        date=day,
        created_at=created_at,
        intention=intention,
        found_it=found_it,
    )


@pytest.fixture
def make_record():
    """Builder for a single record ``day_offset`` days after BASE_DATE."""
    return _build_record


@pytest.fixture
def daily_series():
    """Builder: one single-app record per day with the given minute totals."""

    def _series(minutes_per_day, app="Instagram", start=0):
        return [
            _build_record(day_offset=start + i, minutes=m, app=app)
            for i, m in enumerate(minutes_per_day)
        ]

    return _series


@pytest.fixture
def steady_week(daily_series):
    """7 days, 60 minutes/day, single app."""
    return daily_series([60] * 7)


@pytest.fixture
def intention_records(make_record):
    """Mixed intention-tagged records across three intentions."""
    return [
        make_record(0, 20, app="Instagram", intention="relax", found_it=False),
        make_record(1, 25, app="Instagram", intention="Relax", found_it=False),
        make_record(2, 30, app="TikTok", intention="RELAX", found_it=False),
        make_record(0, 90, app="YouTube", intention="learn", found_it=True),
        make_record(1, 95, app="YouTube", intention="learn", found_it=False),
        make_record(3, 15, app="WhatsApp", intention="chat", found_it=True, created_hour=23),
        make_record(4, 10, app="WhatsApp", intention="chat", found_it=True, created_hour=1),
        make_record(5, 12, app="Reddit"),
    ]


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """configure_logging binds the current stderr; drop it after each test."""
    yield
    structlog.reset_defaults()
