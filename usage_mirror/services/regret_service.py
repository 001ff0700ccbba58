"""
Usage Mirror — Future regret analysis.

Rule-based estimate of anticipated regret from five behavioral signals.
Each signal contributes points to the total and to three named regret
accumulators (attention drain, burnout, habitual scrolling):

  Signal                  Tiers -> (total, attentionDrain, burnout, habitualScrolling)
  daily_avg               >=240 (30,20,10,0)  >=180 (20,15,5,0)  >=120 (10,10,0,0)
  late_night_frequency    >=0.5 (25,0,20,5)   >=0.3 (15,0,15,0)  >=0.15 (8,0,8,0)
  intent_drift_frequency  >=0.6 (25,5,0,20)   >=0.4 (15,0,0,15)  >=0.2 (8,0,0,8)
  risk_score_trend        increasing (10,5,5,0)   stable_high (5,0,0,5)
  honesty_score           <60 (10,0,0,5)      <80 (5,0,0,0)

The total is clamped to [0, 100]; >= 70 is high, >= 40 medium, else low.
The narrative letter and the "wish I'd stopped" list are fixed templates.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo

import structlog

from usage_mirror.schemas import (
    FoundIt,
    RegretAnalysis,
    RegretInputs,
    RegretTypes,
    RiskScore,
    UsageRecord,
    WeeklyStats,
)
from usage_mirror.utils.rounding import clamp, round_half_up
from usage_mirror.utils.time_utils import is_late_night

logger = structlog.get_logger("usage_mirror.regret_service")

# ──────────────────────────────────────────────────────────────────────────────
# Scoring tables: (threshold, total, attentionDrain, burnout, habitualScrolling)
# Highest threshold met wins within each signal.
# ──────────────────────────────────────────────────────────────────────────────

_DAILY_AVG_TIERS: list[tuple[float, int, int, int, int]] = [
    (240, 30, 20, 10, 0),
    (180, 20, 15, 5, 0),
    (120, 10, 10, 0, 0),
]

_LATE_NIGHT_TIERS: list[tuple[float, int, int, int, int]] = [
    (0.5, 25, 0, 20, 5),
    (0.3, 15, 0, 15, 0),
    (0.15, 8, 0, 8, 0),
]

_INTENT_DRIFT_TIERS: list[tuple[float, int, int, int, int]] = [
    (0.6, 25, 5, 0, 20),
    (0.4, 15, 0, 0, 15),
    (0.2, 8, 0, 0, 8),
]

_TREND_POINTS: dict[str, tuple[int, int, int, int]] = {
    "increasing": (10, 5, 5, 0),
    "stable_high": (5, 0, 0, 5),
}

# honesty_score below threshold -> points; lowest threshold checked first
_HONESTY_TIERS: list[tuple[float, int, int, int, int]] = [
    (60, 10, 0, 0, 5),
    (80, 5, 0, 0, 0),
]

# Declaration order breaks ties for the dominant type
_REGRET_TYPE_ORDER: tuple[str, ...] = ("attentionDrain", "burnout", "habitualScrolling")

# ──────────────────────────────────────────────────────────────────────────────
# Letters from the future self, keyed by (dominant type, regret level).
# Only attentionDrain/high quotes figures: {daily_minutes}, {yearly_hours}.
# ──────────────────────────────────────────────────────────────────────────────

_SIGN_OFF = "Your future self"

_LETTER_TEMPLATES: dict[str, dict[str, str]] = {
    "attentionDrain": {
        "high": (
            "{greeting}\n\n"
            "I wish I had realized sooner how much of my attention I was giving "
            "away. Those {daily_minutes} minutes a day added up to "
            "{yearly_hours} hours a year, time I could have spent learning, "
            "creating, or connecting with people who mattered.\n\n"
            "The constant scrolling trained my brain to seek quick hits of "
            "dopamine instead of deep focus. Now, when I try to read a book or "
            "have a meaningful conversation, my mind wanders. I'm paying the "
            "price for those years of fragmented attention.\n\n"
            "If I could go back, I'd set strict boundaries. I'd ask myself: "
            "\"Is this serving me?\" before every open. I'd delete the apps "
            "that made me feel empty and keep only the ones that added real "
            "value.\n\n"
        ),
        "medium": (
            "{greeting}\n\n"
            "I see the patterns now. Those hours scrolling weren't rest; they "
            "were avoidance. I was using apps to escape from things I should "
            "have been facing.\n\n"
            "The habit of reaching for my phone whenever I felt bored or "
            "anxious became automatic. I didn't realize I was training myself "
            "to be uncomfortable with stillness, with my own thoughts.\n\n"
            "Looking back, I wish I'd been more intentional. I wish I'd tracked "
            "not just how much time I spent, but why I was spending it. The "
            "awareness would have changed everything.\n\n"
        ),
        "low": (
            "{greeting}\n\n"
            "You're doing better than most, but there's still room to be more "
            "intentional. Those moments of mindless scrolling add up, and they "
            "train your brain to seek constant stimulation.\n\n"
            "The key isn't to eliminate social media; it's to use it with "
            "purpose. Before you open an app, ask: \"What am I looking for?\" "
            "If you can't answer, close it.\n\n"
        ),
    },
    "burnout": {
        "high": (
            "{greeting}\n\n"
            "The late nights scrolling weren't rest; they were stealing my "
            "rest. I'd stay up until 2 AM, thinking I was relaxing, but I was "
            "actually keeping my brain in a state of hyperarousal.\n\n"
            "The blue light, the endless content, the comparison trap: it all "
            "added up. I'd wake up tired, reach for my phone, and the cycle "
            "would start again. I didn't realize I was creating my own "
            "exhaustion.\n\n"
            "I wish I'd set a hard cutoff time. I wish I'd put my phone in "
            "another room. I wish I'd understood that true rest requires "
            "stillness, not stimulation.\n\n"
        ),
        "medium": (
            "{greeting}\n\n"
            "I see now how those late-night sessions were affecting my sleep "
            "quality. Even when I thought I was \"winding down\" with my phone, "
            "I was actually keeping my mind active.\n\n"
            "The habit of checking one more thing, watching one more video, "
            "scrolling one more feed: it never felt like much in the moment. "
            "But over time, it eroded my ability to truly rest.\n\n"
            "I wish I'd been more protective of my evenings. I wish I'd created "
            "a buffer between screen time and sleep time. Your future self "
            "will thank you for it.\n\n"
        ),
        "low": (
            "{greeting}\n\n"
            "You're mostly doing well, but pay attention to those late-night "
            "sessions. Even occasional late scrolling can disrupt your sleep "
            "patterns and leave you feeling less rested.\n\n"
            "Consider setting a \"phone bedtime\" an hour before your actual "
            "bedtime. Give your brain time to wind down naturally.\n\n"
        ),
    },
    "habitualScrolling": {
        "high": (
            "{greeting}\n\n"
            "I opened apps without knowing why. I'd tell myself I was looking "
            "for something specific, but then I'd scroll for 30 minutes and "
            "forget what I came for. That wasn't browsing; that was "
            "autopilot.\n\n"
            "The pattern became so automatic that I didn't even notice I was "
            "doing it. My hand would reach for my phone, my thumb would open "
            "an app, and I'd be scrolling before I'd made a conscious "
            "decision.\n\n"
            "I wish I'd asked myself more often: \"Did I find what I was "
            "looking for?\" The answer was usually no, and that should have "
            "been a red flag.\n\n"
        ),
        "medium": (
            "{greeting}\n\n"
            "I see the pattern now: opening apps with intention but then "
            "getting lost in the feed. I'd go in looking for one thing and "
            "come out 20 minutes later, having consumed content I never "
            "intended to see.\n\n"
            "The gap between intention and action grew wider over time. I'd "
            "tell myself I was being productive or social, but I was really "
            "just scrolling on autopilot.\n\n"
            "I wish I'd been more honest with myself about what I was actually "
            "doing. Tracking my intentions helped, but only if I paid attention "
            "to the results.\n\n"
        ),
        "low": (
            "{greeting}\n\n"
            "You're mostly intentional, but there are still moments of "
            "autopilot scrolling. Those moments add up. The key is awareness: "
            "noticing when you're scrolling without purpose and choosing to "
            "stop.\n\n"
            "Before you open an app, pause. Ask yourself: \"What am I looking "
            "for?\" If you can't answer, don't open it.\n\n"
        ),
    },
}

# ──────────────────────────────────────────────────────────────────────────────
# "Things you wish you stopped earlier" list items
# ──────────────────────────────────────────────────────────────────────────────

_LIST_LATE_NIGHT = "Late-night scrolling that disrupted your sleep"
_LIST_INTENT_DRIFT = "Opening apps without a clear purpose"
_LIST_DAILY_AVG = "Spending 3+ hours a day on social media"
_LIST_HABITUAL = "Mindless scrolling on autopilot"
_LIST_ATTENTION = "Fragmented attention from constant app switching"
_LIST_BURNOUT = 'Using apps as a form of "rest" that actually exhausted you'
_LIST_REPEATED = "Checking the same apps multiple times per day"
_LIST_FALLBACK = "Not being more intentional about your digital habits"


class RegretService:
    """Score anticipated regret and render its narrative outputs."""

    HIGH_THRESHOLD: int = 70
    MEDIUM_THRESHOLD: int = 40

    # Regret list gates (strictly greater than)
    LIST_LATE_NIGHT: float = 0.3
    LIST_INTENT_DRIFT: float = 0.4
    LIST_DAILY_AVG: float = 180
    LIST_ACCUMULATOR: int = 15
    LIST_REPEATED_OPENS: int = 5

    STABLE_HIGH_RISK: int = 60

    # ── Public API ──────────────────────────────────────────────────

    def analyze(
        self,
        daily_avg: float,
        late_night_frequency: float,
        intent_drift_frequency: float,
        risk_score_trend: str,
        honesty_score: float,
    ) -> RegretAnalysis:
        """Score the five signals into a :class:`RegretAnalysis`."""
        totals = [0, 0, 0, 0]  # total, attentionDrain, burnout, habitualScrolling

        contributions = [
            self._match_at_least(daily_avg, _DAILY_AVG_TIERS),
            self._match_at_least(late_night_frequency, _LATE_NIGHT_TIERS),
            self._match_at_least(intent_drift_frequency, _INTENT_DRIFT_TIERS),
            _TREND_POINTS.get(risk_score_trend),
            self._match_below(honesty_score, _HONESTY_TIERS),
        ]
        for points in contributions:
            if points is None:
                continue
            for idx, value in enumerate(points):
                totals[idx] += value

        regret_score = int(clamp(totals[0]))
        types = {
            "attentionDrain": totals[1],
            "burnout": totals[2],
            "habitualScrolling": totals[3],
        }

        dominant = _REGRET_TYPE_ORDER[0]
        for name in _REGRET_TYPE_ORDER[1:]:
            if types[name] > types[dominant]:
                dominant = name

        analysis = RegretAnalysis(
            regret_score=regret_score,
            regret_level=self.level_for(regret_score),
            regret_types=RegretTypes(
                attention_drain=types["attentionDrain"],
                burnout=types["burnout"],
                habitual_scrolling=types["habitualScrolling"],
            ),
            dominant_type=dominant,
        )

        logger.info(
            "regret.analyze_done",
            regret_score=regret_score,
            regret_level=analysis.regret_level,
            dominant_type=dominant,
            **types,
        )
        return analysis

    @classmethod
    def level_for(cls, score: int) -> str:
        if score >= cls.HIGH_THRESHOLD:
            return "high"
        if score >= cls.MEDIUM_THRESHOLD:
            return "medium"
        return "low"

    def derive_inputs(
        self,
        records: Sequence[UsageRecord],
        weekly_stats: WeeklyStats,
        risk_score: RiskScore,
        honesty_score: int,
        tz: tzinfo | None = None,
    ) -> RegretInputs:
        """Build the regret signals from raw records and upstream results.

        ``late_night_frequency`` is over all records; ``intent_drift_frequency``
        is over records with both an intention and a known outcome.
        """
        total = len(records)
        late_night = sum(1 for r in records if is_late_night(r.created_at, tz))

        tagged = [r for r in records if r.has_intention_outcome]
        drifted = sum(1 for r in tagged if r.found_it is FoundIt.NOT_FOUND)

        if weekly_stats.trend == "increasing":
            trend = "increasing"
        elif risk_score.score > self.STABLE_HIGH_RISK:
            trend = "stable_high"
        else:
            trend = "stable"

        per_intention_day: dict[tuple[str, object], int] = {}
        for r in tagged:
            key = (r.intention.lower(), r.date)
            per_intention_day[key] = per_intention_day.get(key, 0) + 1

        inputs = RegretInputs(
            daily_avg=weekly_stats.average_daily_minutes,
            late_night_frequency=late_night / total if total else 0.0,
            intent_drift_frequency=drifted / len(tagged) if tagged else 0.0,
            risk_score_trend=trend,
            honesty_score=honesty_score,
            repeated_opens=sum(1 for c in per_intention_day.values() if c > 1),
            total_days=len({r.date for r in records}),
        )
        logger.debug("regret.inputs_derived", **inputs.model_dump())
        return inputs

    def generate_letter(
        self,
        analysis: RegretAnalysis,
        daily_avg: float,
        total_days: int,
    ) -> str:
        """Render the letter from the future self for this analysis."""
        by_level = _LETTER_TEMPLATES.get(analysis.dominant_type, {})
        template = by_level.get(analysis.regret_level) or _LETTER_TEMPLATES["attentionDrain"]["low"]

        greeting = "Dear Past Me," if total_days > 0 else "Dear Present Me,"
        body = template.format(
            greeting=greeting,
            daily_minutes=round_half_up(daily_avg),
            yearly_hours=round_half_up(daily_avg * 365 / 60),
        )
        return body + _SIGN_OFF

    def generate_regret_list(
        self,
        analysis: RegretAnalysis,
        late_night_frequency: float,
        intent_drift_frequency: float,
        daily_avg: float,
        repeated_opens: int = 0,
    ) -> list[str]:
        """Bullet list of habits the future self wishes had stopped sooner."""
        types = analysis.regret_types
        items: list[str] = []

        if late_night_frequency > self.LIST_LATE_NIGHT:
            items.append(_LIST_LATE_NIGHT)
        if intent_drift_frequency > self.LIST_INTENT_DRIFT:
            items.append(_LIST_INTENT_DRIFT)
        if daily_avg > self.LIST_DAILY_AVG:
            items.append(_LIST_DAILY_AVG)
        if types.habitual_scrolling > self.LIST_ACCUMULATOR:
            items.append(_LIST_HABITUAL)
        if types.attention_drain > self.LIST_ACCUMULATOR:
            items.append(_LIST_ATTENTION)
        if types.burnout > self.LIST_ACCUMULATOR:
            items.append(_LIST_BURNOUT)
        if repeated_opens > self.LIST_REPEATED_OPENS:
            items.append(_LIST_REPEATED)

        if not items:
            items.append(_LIST_FALLBACK)
        return items

    # ── Internal helpers ────────────────────────────────────────────

    @staticmethod
    def _match_at_least(
        value: float, tiers: list[tuple[float, int, int, int, int]]
    ) -> tuple[int, int, int, int] | None:
        for threshold, *points in tiers:
            if value >= threshold:
                return tuple(points)
        return None

    @staticmethod
    def _match_below(
        value: float, tiers: list[tuple[float, int, int, int, int]]
    ) -> tuple[int, int, int, int] | None:
        for threshold, *points in tiers:
            if value < threshold:
                return tuple(points)
        return None
