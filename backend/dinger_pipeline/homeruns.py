"""
Daily home runs from the live game feeds.

For every game on the reporting date the play-by-play is scanned for
`home_run` events; only a batter's first home run of the day is kept.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from dinger_pipeline.parsing import dig, optional_float, optional_int
from dinger_pipeline.records import HomeRunEvent
from dinger_pipeline.stats_api import StatsApiClient, get_game_pks

logger = logging.getLogger(__name__)

HEADSHOT_URL = "https://content.mlb.com/images/mlb/{season}/players/headshots/{player_id}.jpg"
DEFAULT_DESCRIPTION = "Hit a home run"


def get_game_plays(client: StatsApiClient, game_pk: int) -> List[dict]:
    data = client.get_json(f"/api/v1.1/game/{game_pk}/feed/live")
    if data is None:
        logger.error("Could not load live feed for game %s", game_pk)
        return []
    plays = dig(data, "liveData", "plays", "allPlays", default=[])
    return plays if isinstance(plays, list) else []


def _hit_data(play: dict) -> dict:
    for event in play.get("playEvents") or []:
        if isinstance(event, dict) and event.get("hitData"):
            return event["hitData"]
    return {}


def extract_first_homeruns(
    plays: Iterable[dict],
    date: str,
    season: int,
    seen: Optional[Set[int]] = None,
) -> List[HomeRunEvent]:
    """
    Turn a game's plays into HomeRunEvents.

    `seen` holds player ids that already homered today; it is updated in place
    so it can be shared across every game of a run.
    """
    if seen is None:
        seen = set()
    homers: List[HomeRunEvent] = []
    for play in plays:
        if not isinstance(play, dict):
            continue
        player_id = dig(play, "matchup", "batter", "id")
        name = dig(play, "matchup", "batter", "fullName")
        if not player_id or not name or player_id in seen:
            continue
        if dig(play, "result", "eventType") != "home_run":
            continue

        hit = _hit_data(play)
        homers.append(
            HomeRunEvent(
                player_id=player_id,
                name=name,
                description=dig(play, "result", "description") or DEFAULT_DESCRIPTION,
                image_url=HEADSHOT_URL.format(season=season, player_id=player_id),
                launch_speed=optional_float(hit.get("launchSpeed"), places=1),
                total_distance=optional_int(hit.get("totalDistance")),
                date=date,
            )
        )
        seen.add(player_id)
    return homers


def collect_daily_homeruns(client: StatsApiClient, date: str, season: int) -> List[HomeRunEvent]:
    seen: Set[int] = set()
    homers: List[HomeRunEvent] = []
    for game_pk in get_game_pks(client, date):
        homers.extend(extract_first_homeruns(get_game_plays(client, game_pk), date, season, seen))
    logger.info("Collected %d home run hitters for %s", len(homers), date)
    return homers
