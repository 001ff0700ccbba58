"""
Usage Mirror — Digital honesty (self-report plausibility) scoring.

Scores the logged data itself, not the user's behavior.  Starts at 100 and
applies three independent, cumulative penalty families to the records in
date order:

  1. Gaps        -min(30, (gap - 7) * 5) for every consecutive gap > 7 days
  2. Unrealistic -10 for every record above 960 minutes (16 hours)
  3. Spikes      4+ records: -5 when a record exceeds 3x the mean of the
                 three records before it.
                 2-3 records: -5 when a record exceeds 5x its predecessor.

Each penalty applies per occurrence.  There is no running cap per family:
only the final score is clamped to [0, 100].
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from usage_mirror.schemas import UsageRecord
from usage_mirror.utils.rounding import clamp, round_half_up
from usage_mirror.utils.time_utils import day_gap

logger = structlog.get_logger("usage_mirror.honesty_service")


class HonestyService:
    """Self-report consistency score over a user's raw record sequence."""

    PERFECT_SCORE: int = 100

    MAX_GAP_DAYS: int = 7
    GAP_PENALTY_PER_DAY: int = 5
    GAP_PENALTY_CAP: int = 30  # per gap, not per family

    MAX_REALISTIC_MINUTES: float = 960
    UNREALISTIC_PENALTY: int = 10

    SPIKE_WINDOW: int = 3
    SPIKE_WINDOW_FACTOR: float = 3
    SPIKE_PAIR_FACTOR: float = 5
    SPIKE_PENALTY: int = 5

    CONSISTENT_THRESHOLD: int = 80
    FAIR_THRESHOLD: int = 60

    # ── Public API ──────────────────────────────────────────────────

    def calculate_honesty_score(self, records: Sequence[UsageRecord]) -> int:
        """Return the 0-100 honesty score; 100 means nothing implausible."""
        if len(records) <= 1:
            return self.PERFECT_SCORE

        ordered = sorted(records, key=lambda r: r.date)

        gap_penalty = self.gap_penalty([r.date for r in ordered])
        unrealistic_penalty = self.unrealistic_penalty(ordered)
        spike_penalty = self._spike_penalty([r.minutes_spent for r in ordered])

        score = self.PERFECT_SCORE - gap_penalty - unrealistic_penalty - spike_penalty
        score = int(clamp(round_half_up(score)))

        logger.info(
            "honesty.calculate_done",
            records=len(records),
            gap_penalty=gap_penalty,
            unrealistic_penalty=unrealistic_penalty,
            spike_penalty=spike_penalty,
            score=score,
        )
        return score

    @classmethod
    def label(cls, score: int) -> str:
        """Display tier for an honesty score."""
        if score >= cls.CONSISTENT_THRESHOLD:
            return "consistent"
        if score >= cls.FAIR_THRESHOLD:
            return "fair"
        return "inconsistent"

    # ── Penalty families (shared with the comparison windows) ───────

    def gap_penalty(self, ordered_dates: Sequence) -> int:
        """Sum of per-gap penalties over chronologically ordered dates."""
        penalty = 0
        for prev, curr in zip(ordered_dates, ordered_dates[1:]):
            gap = day_gap(prev, curr)
            if gap > self.MAX_GAP_DAYS:
                step = min(
                    self.GAP_PENALTY_CAP,
                    (gap - self.MAX_GAP_DAYS) * self.GAP_PENALTY_PER_DAY,
                )
                logger.debug("honesty.gap_penalty", start=str(prev), end=str(curr), gap_days=gap, penalty=step)
                penalty += step
        return penalty

    def unrealistic_penalty(self, records: Sequence[UsageRecord]) -> int:
        flagged = sum(1 for r in records if r.minutes_spent > self.MAX_REALISTIC_MINUTES)
        if flagged:
            logger.debug("honesty.unrealistic_entries", count=flagged)
        return flagged * self.UNREALISTIC_PENALTY

    # ── Internal helpers ────────────────────────────────────────────

    def _spike_penalty(self, minutes: Sequence[float]) -> int:
        spikes = 0
        if len(minutes) > self.SPIKE_WINDOW:
            for i in range(self.SPIKE_WINDOW, len(minutes)):
                window = minutes[i - self.SPIKE_WINDOW:i]
                recent_avg = sum(window) / len(window)
                if recent_avg > 0 and minutes[i] > recent_avg * self.SPIKE_WINDOW_FACTOR:
                    spikes += 1
        else:
            for prev, curr in zip(minutes, minutes[1:]):
                if prev > 0 and curr > prev * self.SPIKE_PAIR_FACTOR:
                    spikes += 1

        if spikes:
            logger.debug("honesty.spikes", count=spikes)
        return spikes * self.SPIKE_PENALTY
