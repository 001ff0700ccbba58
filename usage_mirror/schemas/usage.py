"""
Usage Mirror — Input record schema.

A ``UsageRecord`` is one manually logged (app, day) entry.  Uniqueness per
user/app/day and range validation are the storage layer's job; this model
only normalises shapes so the scorers can do arithmetic safely.
"""

from __future__ import annotations

import math
import datetime as dt
from enum import Enum
from typing import Any, Iterable, Optional

import structlog
from pydantic import ConfigDict, field_validator

from usage_mirror.schemas.base import CamelModel

logger = structlog.get_logger("usage_mirror.schemas.usage")


class FoundIt(str, Enum):
    """Did the user find what they opened the app for?"""

    FOUND = "found"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class UsageRecord(CamelModel):
    model_config = ConfigDict(frozen=True)

    app_name: str
    minutes_spent: float
    date: dt.date
    created_at: Optional[dt.datetime] = None
    intention: Optional[str] = None
    found_it: FoundIt = FoundIt.UNKNOWN

    @field_validator("minutes_spent", mode="before")
    @classmethod
    def _coerce_minutes(cls, v: Any) -> float:
        try:
            minutes = float(v)
        except (TypeError, ValueError):
            minutes = math.nan
        if not math.isfinite(minutes):
            logger.warning("usage_record.minutes_coerced", raw_value=repr(v))
            return 0.0
        return minutes

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_to_day(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10 and v[10] in ("T", " "):
            return v[:10]
        return v

    @field_validator("found_it", mode="before")
    @classmethod
    def _tri_state(cls, v: Any) -> Any:
        if v is None:
            return FoundIt.UNKNOWN
        if isinstance(v, bool):
            return FoundIt.FOUND if v else FoundIt.NOT_FOUND
        return v

    @property
    def has_intention_outcome(self) -> bool:
        """True when both an intention and a known outcome were logged."""
        return bool(self.intention) and self.found_it is not FoundIt.UNKNOWN


def parse_records(raw: Iterable[dict]) -> list[UsageRecord]:
    """Validate an iterable of dicts (wire or snake_case keys) into records."""
    return [UsageRecord.model_validate(entry) for entry in raw]
