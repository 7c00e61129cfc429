"""
Command-line access to the pipelines without a database.

    python -m dinger_pipeline.cli homeruns --date 2025-05-23
    python -m dinger_pipeline.cli leaders --season 2025 --limit 10
    python -m dinger_pipeline.cli pitchers
    python -m dinger_pipeline.cli players
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Iterable, Sequence

from dinger_pipeline.homeruns import collect_daily_homeruns
from dinger_pipeline.leaders import DEFAULT_LIMIT, collect_leaderboard
from dinger_pipeline.pitchers import collect_starting_pitchers
from dinger_pipeline.reporting import DEFAULT_TIMEZONE, parse_date, reporting_date
from dinger_pipeline.stats_api import DEFAULT_BASE_URL, StatsApiClient, get_all_players


def _date_arg(value: str) -> str:
    try:
        return parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Stats API root URL.")
    parser.add_argument("--timeout", type=float, default=10.0, help="Per-request timeout in seconds.")
    parser.add_argument("--timezone", default=DEFAULT_TIMEZONE, help="Reporting time zone.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every upstream request.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    homeruns = subparsers.add_parser("homeruns", help="First home run of the day per batter")
    homeruns.add_argument("--date", type=_date_arg, help="YYYY-MM-DD (default: today)")
    homeruns.add_argument("--season", type=int, help="Season used for headshot URLs")

    leaders = subparsers.add_parser("leaders", help="Ranked season home run leaderboard")
    leaders.add_argument("--season", type=int, help="Season (default: current year)")
    leaders.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Number of leaders to request")

    pitchers = subparsers.add_parser("pitchers", help="Starting pitchers with season lines")
    pitchers.add_argument("--date", type=_date_arg, help="YYYY-MM-DD (default: today)")
    pitchers.add_argument("--season", type=int, help="Season (default: year of --date)")

    subparsers.add_parser("players", help="Every rostered player across all teams")


def _print_records(records: Iterable) -> None:
    for record in records:
        print(json.dumps(record.to_dict()))


def main_from_parsed(args: argparse.Namespace) -> None:
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    client = StatsApiClient(base_url=args.base_url, timeout=args.timeout)
    try:
        if args.command == "players":
            players = get_all_players(client)
            print(f"Total players found: {len(players)}")
            for player in players:
                print(f"{player.player_id} - {player.name}")
            return

        date = getattr(args, "date", None) or reporting_date(args.timezone)
        season = args.season or int(date[:4])
        if args.command == "homeruns":
            _print_records(collect_daily_homeruns(client, date, season))
        elif args.command == "leaders":
            _print_records(collect_leaderboard(client, date, season, args.limit))
        elif args.command == "pitchers":
            _print_records(collect_starting_pitchers(client, date, season))
    finally:
        client.close()


def main(args: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="MLB daily home run / leaderboard / pitcher pipelines.")
    configure_parser(parser)
    opts = parser.parse_args(args)
    main_from_parsed(opts)


if __name__ == "__main__":
    main()
