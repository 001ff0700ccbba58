"""Unit tests for MirrorService — intention vs. outcome pattern detection."""
from datetime import datetime, timedelta, timezone

import pytest

from usage_mirror.schemas import UsageRecord
from usage_mirror.services.mirror_service import MirrorService

# UTC-5, so 23:00 UTC reads as 18:00 and 01:00 UTC as 20:00
UTC_MINUS_5 = timezone(timedelta(hours=-5))


@pytest.fixture
def mirror_service():
    return MirrorService()


def _by_intention(insights):
    return {i.intention: i for i in insights}


class TestAnalyze:
    """Tests for the full analysis over the shared intention records."""

    def test_empty_input(self, mirror_service):
        assert mirror_service.analyze([]) == []

    def test_patterns_detected(self, mirror_service, intention_records):
        insights = _by_intention(mirror_service.analyze(intention_records))
        assert set(insights) == {"Relax", "Learn", "Chat"}
        assert insights["Relax"].pattern == "not_found"
        assert insights["Learn"].pattern == "long_session_not_found"
        assert insights["Chat"].pattern == "late_night"

    def test_relax_groups_case_insensitively(self, mirror_service, intention_records):
        """'relax', 'Relax' and 'RELAX', none found."""
        relax = _by_intention(mirror_service.analyze(intention_records))["Relax"]
        assert relax.count == 3
        assert relax.found_it_rate == 0
        assert relax.avg_minutes == 25
        assert relax.message == (
            "You opened apps to relax. You didn't find it 3 out of 3 times. "
            "This pattern occurred 3 times."
        )

    def test_long_session_message(self, mirror_service, intention_records):
        """Average of 90 and 95 is 92.5, shown as 93."""
        learn = _by_intention(mirror_service.analyze(intention_records))["Learn"]
        assert learn.count == 2
        assert learn.found_it_rate == 0.5
        assert learn.avg_minutes == 93
        assert learn.message == (
            "You opened apps to learn. You spent an average of 93 minutes but "
            "only found what you were looking for 50% of the time."
        )

    def test_late_night_message(self, mirror_service, intention_records):
        chat = _by_intention(mirror_service.analyze(intention_records))["Chat"]
        assert chat.late_night_count == 2
        assert chat.found_it_rate == 1.0
        assert chat.message == (
            "You opened apps to chat 2 times late at night. You closed them "
            "feeling unsatisfied. This pattern occurred 2 times this week."
        )

    def test_sorted_by_count_descending(self, mirror_service, intention_records):
        counts = [i.count for i in mirror_service.analyze(intention_records)]
        assert counts == sorted(counts, reverse=True)
        assert mirror_service.analyze(intention_records)[0].intention == "Relax"

    def test_timezone_moves_sessions_out_of_late_night(self, mirror_service, intention_records):
        insights = _by_intention(mirror_service.analyze(intention_records, tz=UTC_MINUS_5))
        assert "Chat" not in insights
        assert set(insights) == {"Relax", "Learn"}

    def test_naive_timestamps_read_as_local(self, mirror_service):
        records = [
            UsageRecord(
                app_name="WhatsApp",
                minutes_spent=10,
                date=datetime(2024, 3, 4).date(),
                created_at=datetime(2024, 3, 4, 23, 30),
                intention="chat",
                found_it=True,
            )
        ]
        insights = mirror_service.analyze(records, tz=UTC_MINUS_5)
        assert [i.pattern for i in insights] == ["late_night"]

    def test_idempotent(self, mirror_service, intention_records):
        assert mirror_service.analyze(intention_records) == mirror_service.analyze(intention_records)


class TestClassification:
    """Tests for pattern precedence and exclusions."""

    def test_unknown_outcome_excluded(self, mirror_service, make_record):
        records = [make_record(d, 20, intention="relax") for d in range(5)]
        assert mirror_service.analyze(records) == []

    def test_not_found_needs_three_sessions(self, mirror_service, make_record):
        records = [make_record(d, 20, intention="relax", found_it=False) for d in range(2)]
        assert mirror_service.analyze(records) == []

    def test_not_found_takes_precedence(self, mirror_service, make_record):
        """Long, late and unfruitful: the first rule wins."""
        records = [
            make_record(d, 120, intention="unwind", found_it=False, created_hour=23)
            for d in range(3)
        ]
        insights = mirror_service.analyze(records)
        assert [i.pattern for i in insights] == ["not_found"]

    def test_long_session_requires_low_found_rate(self, mirror_service, make_record):
        records = [
            make_record(0, 90, intention="learn", found_it=True),
            make_record(1, 90, intention="learn", found_it=True),
            make_record(2, 90, intention="learn", found_it=True),
            make_record(3, 90, intention="learn", found_it=False),
        ]
        assert mirror_service.analyze(records) == []

    def test_late_night_share_must_exceed_40_percent(self, mirror_service, make_record):
        """2 of 5 is exactly 40%: not flagged."""
        records = [
            make_record(0, 10, intention="chat", found_it=True, created_hour=23),
            make_record(1, 10, intention="chat", found_it=True, created_hour=2),
            make_record(2, 10, intention="chat", found_it=True, created_hour=12),
            make_record(3, 10, intention="chat", found_it=True, created_hour=13),
            make_record(4, 10, intention="chat", found_it=True, created_hour=14),
        ]
        assert mirror_service.analyze(records) == []

    def test_late_night_feeling_follows_found_rate(self, mirror_service, make_record):
        half_found = [
            make_record(0, 10, intention="scroll", found_it=True, created_hour=23),
            make_record(1, 10, intention="scroll", found_it=False, created_hour=1),
        ]
        assert "feeling unsatisfied" in mirror_service.analyze(half_found)[0].message

        none_found = [
            make_record(0, 10, intention="scroll", found_it=False, created_hour=23),
            make_record(1, 10, intention="scroll", found_it=False, created_hour=1),
        ]
        insight = mirror_service.analyze(none_found)[0]
        assert insight.pattern == "late_night"
        assert "feeling more tired" in insight.message

    def test_reported_intention_capitalised_message_lowercased(self, mirror_service, make_record):
        records = [
            make_record(0, 10, intention="CHAT with friends", found_it=True, created_hour=23),
            make_record(1, 10, intention="Chat With Friends", found_it=True, created_hour=23),
        ]
        insight = mirror_service.analyze(records)[0]
        assert insight.intention == "Chat with friends"
        assert insight.message.startswith("You opened apps to chat with friends 2 times")
        assert insight.message.endswith("This pattern occurred 2 times this week.")

    def test_repeated_opens_counts_days_with_multiple_sessions(self, mirror_service, make_record):
        records = [
            make_record(0, 20, intention="relax", found_it=False),
            make_record(0, 20, intention="relax", found_it=False, app="TikTok"),
            make_record(1, 20, intention="relax", found_it=False),
        ]
        insight = mirror_service.analyze(records)[0]
        assert insight.repeated_opens == 1
        assert MirrorService.repeated_opens(records) == 1
