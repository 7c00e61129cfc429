"""
Starting pitchers for the day's games, with their season pitching lines.
"""

from __future__ import annotations

import logging
from typing import List

from dinger_pipeline.parsing import dig, safe_int
from dinger_pipeline.records import StartingPitcherEntry
from dinger_pipeline.stats_api import StatsApiClient, get_game_pks

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
FETCH_ERROR = "Error"
PITCHER_POSITION_CODE = "1"
SIDES = ("home", "away")


def get_pitching_stats(client: StatsApiClient, player_id: int, season: int) -> dict:
    data = client.get_json(
        f"/api/v1/people/{player_id}/stats",
        params={"stats": "season", "group": "pitching", "season": season},
    )
    if data is None:
        logger.error("Error fetching stats for pitcher %s", player_id)
        return {
            "era": FETCH_ERROR,
            "hr_per_nine": FETCH_ERROR,
            "wins": 0,
            "losses": 0,
            "strikeouts": 0,
            "whip": FETCH_ERROR,
        }
    stat = dig(data, "stats", 0, "splits", 0, "stat", default={})
    if not isinstance(stat, dict):
        stat = {}
    return {
        "era": str(stat.get("era") or NOT_AVAILABLE),
        "hr_per_nine": str(stat.get("homeRunsPer9") or NOT_AVAILABLE),
        "wins": safe_int(stat.get("wins")),
        "losses": safe_int(stat.get("losses")),
        "strikeouts": safe_int(stat.get("strikeOuts")),
        "whip": str(stat.get("whip") or NOT_AVAILABLE),
    }


def _is_starter(player: dict) -> bool:
    return (
        str(dig(player, "position", "code", default="")) == PITCHER_POSITION_CODE
        and safe_int(dig(player, "stats", "pitching", "gamesStarted")) > 0
    )


def get_starting_pitchers_for_game(
    client: StatsApiClient,
    game_pk: int,
    date: str,
    season: int,
) -> List[StartingPitcherEntry]:
    data = client.get_json(f"/api/v1.1/game/{game_pk}/feed/live")
    if data is None:
        logger.error("Game %s failed: live feed unavailable", game_pk)
        return []

    starters: List[StartingPitcherEntry] = []
    for side in SIDES:
        team_name = dig(data, "gameData", "teams", side, "name", default="Unknown Team")
        players = dig(data, "liveData", "boxscore", "teams", side, "players", default={})
        if not isinstance(players, dict):
            continue
        for player in players.values():
            if not isinstance(player, dict) or not _is_starter(player):
                continue
            player_id = dig(player, "person", "id")
            if player_id is None:
                continue
            stats = get_pitching_stats(client, player_id, season)
            starters.append(
                StartingPitcherEntry(
                    game_pk=game_pk,
                    team=team_name,
                    team_side=side,
                    player_id=player_id,
                    name=dig(player, "person", "fullName", default="Unknown"),
                    date=date,
                    **stats,
                )
            )
    return starters


def collect_starting_pitchers(client: StatsApiClient, date: str, season: int) -> List[StartingPitcherEntry]:
    starters: List[StartingPitcherEntry] = []
    for game_pk in get_game_pks(client, date):
        starters.extend(get_starting_pitchers_for_game(client, game_pk, date, season))
    logger.info("Found %d starting pitchers for %s", len(starters), date)
    return starters
