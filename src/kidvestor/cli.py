"""Command-line interface for the KidVestor simulator."""

from __future__ import annotations

import argparse
import sys

from kidvestor.config import QUOTE_SOURCES, Settings
from kidvestor.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="KidVestor 30-day paper trading simulator")
    parser.add_argument("--quote-source", choices=list(QUOTE_SOURCES), help="Market data source")
    parser.add_argument("--starting-cash", type=float, help="Virtual cash at the start")
    parser.add_argument("--max-days", type=int, help="Number of simulated days")
    parser.add_argument("--search-limit", type=int, help="Maximum search results shown")
    parser.add_argument("--historical-dir", type=str, help="CSV directory for --quote-source csv")
    parser.add_argument("--events-dir", type=str, help="Write a JSONL session journal here")
    parser.add_argument(
        "--script",
        type=str,
        help="Read shell commands from this file instead of the terminal",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.quote_source:
        overrides["quote_source"] = args.quote_source
    if args.starting_cash is not None:
        overrides["starting_cash"] = args.starting_cash
    if args.max_days is not None:
        overrides["max_days"] = args.max_days
    if args.search_limit is not None:
        overrides["search_limit"] = args.search_limit
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    return settings.with_overrides(**overrides)


def main() -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    try:
        return run(settings, script=args.script)
    except OSError as exc:
        print(f"Could not open file: {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
