from __future__ import annotations

from typing import Literal

from usage_mirror.schemas.base import CamelModel

MirrorPattern = Literal["not_found", "long_session_not_found", "late_night"]


class MirrorInsight(CamelModel):
    intention: str
    pattern: MirrorPattern
    count: int
    found_it_rate: float
    avg_minutes: int
    late_night_count: int
    repeated_opens: int
    message: str
