"""
Usage Mirror — Intention vs. outcome ("mirror") analysis.

Groups the records that carry both a stated intention and a known outcome
by case-normalised intention, then classifies each group by the first
matching pattern:

  1. not_found               found-it rate < 0.5 over at least 3 sessions
  2. long_session_not_found  average session > 60 min, found-it rate < 0.7
  3. late_night              more than 40% of sessions in [22:00, 06:00)

Groups matching none of these yield no insight.  Insights report the
intention with its first letter capitalised ("Relax"); messages quote it
lowercased.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import tzinfo

import structlog

from usage_mirror.schemas import FoundIt, MirrorInsight, UsageRecord
from usage_mirror.utils.rounding import round_half_up
from usage_mirror.utils.time_utils import is_late_night

logger = structlog.get_logger("usage_mirror.mirror_service")


class MirrorService:

    NOT_FOUND_RATE: float = 0.5
    NOT_FOUND_MIN_COUNT: int = 3
    LONG_SESSION_MINUTES: float = 60
    LONG_SESSION_RATE: float = 0.7
    LATE_NIGHT_SHARE: float = 0.4

    def analyze(
        self,
        records: Sequence[UsageRecord],
        tz: tzinfo | None = None,
    ) -> list[MirrorInsight]:
        """Return one insight per flagged intention, most frequent first."""
        groups = self.group_by_intention(records)
        if not groups:
            return []

        insights: list[MirrorInsight] = []
        for intention, entries in groups.items():
            insight = self._classify_group(intention, entries, tz)
            if insight is not None:
                insights.append(insight)

        insights.sort(key=lambda i: i.count, reverse=True)

        logger.info(
            "mirror.analyze_done",
            intentions=len(groups),
            insights=len(insights),
            patterns=[i.pattern for i in insights],
        )
        return insights

    @staticmethod
    def group_by_intention(
        records: Iterable[UsageRecord],
    ) -> dict[str, list[UsageRecord]]:
        """Intention-tagged records with a known outcome, keyed by
        lowercased intention in first-seen order."""
        groups: dict[str, list[UsageRecord]] = {}
        for record in records:
            if not record.has_intention_outcome:
                continue
            groups.setdefault(record.intention.lower(), []).append(record)
        return groups

    @staticmethod
    def repeated_opens(entries: Iterable[UsageRecord]) -> int:
        """Distinct days on which the group has more than one record."""
        per_day: dict = {}
        for entry in entries:
            per_day[entry.date] = per_day.get(entry.date, 0) + 1
        return sum(1 for count in per_day.values() if count > 1)

    # ── Internal helpers ────────────────────────────────────────────

    def _classify_group(
        self,
        intention: str,
        entries: list[UsageRecord],
        tz: tzinfo | None,
    ) -> MirrorInsight | None:
        total = len(entries)
        found = sum(1 for e in entries if e.found_it is FoundIt.FOUND)
        not_found = sum(1 for e in entries if e.found_it is FoundIt.NOT_FOUND)
        found_rate = found / total
        avg_minutes = sum(e.minutes_spent for e in entries) / total
        late_night = sum(1 for e in entries if is_late_night(e.created_at, tz))
        repeated = self.repeated_opens(entries)

        if found_rate < self.NOT_FOUND_RATE and total >= self.NOT_FOUND_MIN_COUNT:
            pattern = "not_found"
            message = (
                f"You opened apps to {intention}. You didn't find it "
                f"{not_found} out of {total} times. This pattern occurred "
                f"{total} times."
            )
        elif avg_minutes > self.LONG_SESSION_MINUTES and found_rate < self.LONG_SESSION_RATE:
            pattern = "long_session_not_found"
            message = (
                f"You opened apps to {intention}. You spent an average of "
                f"{round_half_up(avg_minutes)} minutes but only found what you "
                f"were looking for {round_half_up(found_rate * 100)}% of the time."
            )
        elif late_night > 0 and late_night / total > self.LATE_NIGHT_SHARE:
            pattern = "late_night"
            feeling = "more tired" if found_rate < 0.5 else "unsatisfied"
            message = (
                f"You opened apps to {intention} {late_night} times late at "
                f"night. You closed them feeling {feeling}. This pattern "
                f"occurred {total} times this week."
            )
        else:
            return None

        logger.debug(
            "mirror.group_flagged",
            intention=intention,
            pattern=pattern,
            count=total,
            found_it_rate=round(found_rate, 4),
        )
        return MirrorInsight(
            intention=intention[:1].upper() + intention[1:],
            pattern=pattern,
            count=total,
            found_it_rate=found_rate,
            avg_minutes=round_half_up(avg_minutes),
            late_night_count=late_night,
            repeated_opens=repeated,
            message=message,
        )
