"""Command-line access to the dashboard core."""

import asyncio
import json
import logging
import sys
from datetime import datetime

import aiohttp

from commute_coffee.adapters.clock import SystemClock
from commute_coffee.adapters.config import AppConfig
from commute_coffee.application.services import DecisionEngine
from commute_coffee.domain.models.decision import Decision, DecisionThresholds
from commute_coffee.main import build_dashboard, configure_logging, load_configuration


def decision_to_dict(decision: Decision) -> dict:
    """Plain dict of a decision for JSON output."""
    return {
        "kind": decision.kind.value,
        "headline": decision.headline,
        "rationale": decision.rationale,
        "urgent": decision.urgent,
        "slack_minutes": decision.slack_minutes,
        "budget_minutes": decision.budget.total if decision.budget else None,
    }


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 instant for --at. Values without an offset are local shop time."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"--at must be an ISO 8601 timestamp, got {value!r}") from e


async def print_snapshot(config: AppConfig, indent: int | None) -> None:
    """Refresh once and print the dashboard snapshot as JSON."""
    loaded = load_configuration(config)
    async with aiohttp.ClientSession() as session:
        dashboard = build_dashboard(config, loaded, session, SystemClock())
        snapshot = await dashboard.service.get_snapshot()
    print(snapshot.model_dump_json(indent=indent))


def print_decision(config: AppConfig, train_minutes: int | None, at: datetime | None) -> None:
    """Evaluate the decision rules offline for a given train and time."""
    loaded = load_configuration(config)
    engine = DecisionEngine(
        loaded.policy,
        loaded.journey,
        DecisionThresholds(
            get_coffee_min_slack=config.get_coffee_min_slack,
            rush_min_slack=config.rush_min_slack,
        ),
    )
    now = at if at is not None else SystemClock().now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=loaded.policy.zone)
    decision = engine.decide(now, train_minutes)
    print(json.dumps(decision_to_dict(decision), indent=2, ensure_ascii=False))


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Commute Coffee dashboard core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch departures, weather and alerts once and print the snapshot
  commute-coffee-cli snapshot

  # Would a coffee fit before a train in 20 minutes at 08:15 local time?
  commute-coffee-cli decide --train-minutes 20 --at 2025-03-03T08:15:00
        """,
    )
    parser.add_argument("--config", help="TOML configuration file (overrides CONFIG_FILE)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    snapshot_parser = subparsers.add_parser("snapshot", help="Print the dashboard snapshot as JSON")
    snapshot_parser.add_argument("--indent", type=int, default=2, help="JSON indentation")

    decide_parser = subparsers.add_parser("decide", help="Evaluate the coffee decision offline")
    decide_parser.add_argument(
        "--train-minutes", type=int, default=None, help="Minutes until the next train"
    )
    decide_parser.add_argument(
        "--at", default=None, help="Local time to decide at (ISO 8601), defaults to now"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = AppConfig(config_file=args.config) if args.config else AppConfig()
        if args.command == "snapshot":
            await print_snapshot(config, args.indent)
        elif args.command == "decide":
            at = parse_instant(args.at) if args.at else None
            print_decision(config, args.train_minutes, at)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
