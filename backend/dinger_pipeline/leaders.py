"""
Season home-run leaderboard.

Leaders come from the stats/leaders endpoint; each leader's full season
hitting line is then fetched one player at a time. The combined list is
sorted by home runs and ranked competition-style, with continuation ties
rendered as "T-<rank>".
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from dinger_pipeline.parsing import dig, fixed, safe_int
from dinger_pipeline.records import LeaderboardEntry, Rank
from dinger_pipeline.stats_api import StatsApiClient

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
LEADER_CATEGORY = "homeRuns"


def get_home_run_leaders(client: StatsApiClient, season: int, limit: int = DEFAULT_LIMIT) -> List[dict]:
    data = client.get_json(
        "/api/v1/stats/leaders",
        params={
            "leaderCategories": LEADER_CATEGORY,
            "season": season,
            "limit": limit,
            "playerPool": "ALL",
        },
    )
    for category in dig(data, "leagueLeaders", default=[]) or []:
        if isinstance(category, dict) and category.get("leaderCategory") == LEADER_CATEGORY:
            return category.get("leaders") or []
    return []


def get_season_hitting(client: StatsApiClient, player_id: int, season: int) -> Optional[dict]:
    """Season hitting stat line; `None` when the request failed, `{}` when the player has none."""
    data = client.get_json(
        f"/api/v1/people/{player_id}/stats",
        params={"stats": "season", "group": "hitting", "season": season},
    )
    if data is None:
        return None
    stat = dig(data, "stats", 0, "splits", 0, "stat", default={})
    return stat if isinstance(stat, dict) else {}


def build_entry(leader: dict, stat: dict, date: str) -> LeaderboardEntry:
    return LeaderboardEntry(
        player_id=dig(leader, "person", "id"),
        name=dig(leader, "person", "fullName", default="Unknown"),
        team=dig(leader, "team", "name", default="Unknown Team"),
        position=dig(leader, "position", "abbreviation", default="N/A"),
        home_runs=safe_int(stat.get("homeRuns")),
        rbi=safe_int(stat.get("rbi")),
        avg=fixed(stat.get("avg"), 3),
        ops=fixed(stat.get("ops"), 3),
        stolen_bases=safe_int(stat.get("stolenBases")),
        ab_per_hr=fixed(stat.get("atBatsPerHomeRun"), 2),
        date=date,
    )


def competition_ranks(values: Sequence[int]) -> List[Rank]:
    """
    Ranks for a metric sequence already sorted in descending order.

    The counter jumps to position + 1 whenever the value changes; an element
    whose value already appeared earlier is a tie continuation and renders as
    "T-<rank>".  [40, 40, 38, 37, 37] -> [1, "T-1", 3, 4, "T-4"].
    """
    ranks: List[Rank] = []
    rank = 1
    previous = None
    seen = set()
    for index, value in enumerate(values):
        if index == 0 or value != previous:
            rank = index + 1
        previous = value
        ranks.append(f"T-{rank}" if value in seen else rank)
        seen.add(value)
    return ranks


def rank_leaders(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Sort by home runs (stable for equal values) and set each entry's rank."""
    ordered = sorted(entries, key=lambda e: e.home_runs, reverse=True)
    for entry, rank in zip(ordered, competition_ranks([e.home_runs for e in ordered])):
        entry.rank = rank
    return ordered


def collect_leaderboard(
    client: StatsApiClient,
    date: str,
    season: int,
    limit: int = DEFAULT_LIMIT,
) -> List[LeaderboardEntry]:
    leaders = get_home_run_leaders(client, season, limit)
    if not leaders:
        logger.warning("No home run leaders returned for %s", season)
        return []

    entries: List[LeaderboardEntry] = []
    seen = set()
    for leader in leaders:
        player_id = dig(leader, "person", "id")
        if player_id is None or player_id in seen:
            continue
        seen.add(player_id)
        name = dig(leader, "person", "fullName", default="Unknown")
        logger.info("Fetching season stats for %s (%s)", name, player_id)
        stat = get_season_hitting(client, player_id, season)
        if stat is None:
            logger.error("Failed to fetch stats for %s; leaving them off the board", name)
            continue
        entries.append(build_entry(leader, stat, date))

    return rank_leaders(entries)
