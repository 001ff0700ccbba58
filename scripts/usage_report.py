#!/usr/bin/env python3
"""
Usage Mirror — Usage Report CLI

Runs the analytics engines over a JSON export of usage records and prints
the result as JSON on stdout.  Logs go to stderr.

The input file is either a list of records or an object holding the list
under ``logs`` or ``records``.  Records may use wire names (``appName``,
``minutesSpent``, ``createdAt``, ``foundIt``) or snake_case.

Usage examples
--------------
  # Weekly stats with a weekly time series
  python scripts/usage_report.py stats usage.json --period weekly

  # Risk and honesty scores
  python scripts/usage_report.py risk usage.json
  python scripts/usage_report.py honesty usage.json

  # Intention vs. outcome insights, late night read in London time
  python scripts/usage_report.py --tz Europe/London mirror usage.json

  # First 14 days vs. last 14 days
  python scripts/usage_report.py compare usage.json --days 14

  # Future regret report and full dashboard
  python scripts/usage_report.py regret usage.json
  python scripts/usage_report.py dashboard usage.json
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import timedelta
from typing import Any

# Ensure the project root is importable
sys.path.insert(0, ".")

import structlog
from pydantic import ValidationError

from usage_mirror.config import get_settings
from usage_mirror.logging_config import configure_logging
from usage_mirror.schemas import UsageRecord, parse_records
from usage_mirror.services import (
    ComparisonService,
    HonestyService,
    InsightsService,
    MirrorService,
    RiskService,
)
from usage_mirror.utils.time_utils import resolve_timezone

logger = structlog.get_logger("usage_mirror.cli")


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def load_records(path: str) -> list[UsageRecord]:
    """Read and validate a JSON export of usage records."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Usage data file not found: {path}")
    except OSError as e:
        raise OSError(f"Cannot read usage data file {path}: {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in usage data file: {e}")

    if isinstance(data, dict):
        for key in ("logs", "records"):
            if key in data:
                data = data[key]
                break

    if not isinstance(data, list):
        raise ValueError(
            "Usage data must be a list of records or an object with a 'logs' or 'records' list"
        )

    records = parse_records(data)
    logger.info("cli.records_loaded", path=path, count=len(records))
    return records


def _last_days(records: list[UsageRecord], days: int) -> list[UsageRecord]:
    """Records within ``days`` days of the most recent record."""
    if not records:
        return []
    latest = max(r.date for r in records)
    cutoff = latest - timedelta(days=days)
    return [r for r in records if r.date >= cutoff]


# ──────────────────────────────────────────────────────────────────────────────
# Subcommands
# ──────────────────────────────────────────────────────────────────────────────

def cmd_stats(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    return InsightsService().build_stats(records, args.period)


def cmd_risk(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    weekly = _last_days(records, 7)
    monthly = _last_days(records, 30)
    return RiskService().calculate_risk_score(weekly, monthly).model_dump(by_alias=True)


def cmd_honesty(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    service = HonestyService()
    score = service.calculate_honesty_score(records)
    return {"honestyScore": score, "label": service.label(score)}


def cmd_mirror(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    insights = MirrorService().analyze(records, tz=args.tzinfo)
    return [i.model_dump(by_alias=True) for i in insights]


def cmd_compare(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    service = ComparisonService()
    result = service.compare(records, days_to_compare=args.days, tz=args.tzinfo)
    if result is None:
        return {"comparison": None, "message": "Not enough data to compare"}
    payload = result.model_dump(by_alias=True)
    payload["highlights"] = service.summarize_changes(result)
    return payload


def cmd_regret(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    report = InsightsService().simulate_regret(records, _last_days(records, 7), tz=args.tzinfo)
    if report is None:
        return {"regret": None, "message": "Not enough data to generate regret analysis"}
    return report.model_dump(by_alias=True)


def cmd_dashboard(args: argparse.Namespace, records: list[UsageRecord]) -> Any:
    latest = max((r.date for r in records), default=None)
    today = [r for r in records if r.date == latest]
    return InsightsService().build_dashboard(
        today, _last_days(records, 7), _last_days(records, 30)
    )


_COMMANDS = {
    "stats": cmd_stats,
    "risk": cmd_risk,
    "honesty": cmd_honesty,
    "mirror": cmd_mirror,
    "compare": cmd_compare,
    "regret": cmd_regret,
    "dashboard": cmd_dashboard,
}


def create_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Usage Mirror — behavioral analytics over logged app usage",
    )
    parser.add_argument(
        "--tz",
        type=str,
        default=settings.LOCAL_TIMEZONE,
        help="IANA timezone for late-night detection (default: LOCAL_TIMEZONE setting)",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats_parser = subparsers.add_parser("stats", help="Usage stats and time series")
    stats_parser.add_argument(
        "--period",
        choices=["daily", "weekly", "monthly"],
        default="daily",
        help="Aggregation period (default: daily)",
    )

    subparsers.add_parser("risk", help="Behavioral risk score over the last 7 days")
    subparsers.add_parser("honesty", help="Digital honesty score")
    subparsers.add_parser("mirror", help="Intention vs. outcome insights")

    compare_parser = subparsers.add_parser("compare", help="First N days vs. last N days")
    compare_parser.add_argument(
        "--days",
        type=int,
        default=settings.DEFAULT_COMPARISON_DAYS,
        help=f"Days per window (default: {settings.DEFAULT_COMPARISON_DAYS})",
    )

    subparsers.add_parser("regret", help="Future regret report")
    subparsers.add_parser("dashboard", help="Full dashboard payload")

    for sub in subparsers.choices.values():
        sub.add_argument("input", type=str, help="Path to the JSON usage export")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        args.tzinfo = resolve_timezone(args.tz)
        records = load_records(args.input)
        result = _COMMANDS[args.command](args, records)
    except OSError as e:
        logger.error("cli.file_error", error=str(e))
        print(f"File Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        logger.error("cli.validation_error", errors=e.error_count())
        print(f"Data Validation Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        logger.error("cli.value_error", error=str(e))
        print(f"Data Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
