"""
MLB Stats API access.

`StatsApiClient.get_json` is the single place that talks to the network. It
never raises: a non-success status, a transport error or an undecodable body
is logged and reported as `None`, so every caller can treat "no data" and
"upstream failed" the same way.

Identifier extraction (stage 1 of every pipeline) lives here as well.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from dinger_pipeline.parsing import dig
from dinger_pipeline.records import RosterPlayer

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://statsapi.mlb.com"
HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; dinger-tracker/1.0)",
    "Accept": "application/json",
}
SPORT_ID_MLB = 1


class StatsApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(self, path: str, params: Optional[dict] = None) -> Optional[Any]:
        url = self.url_for(path)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Request to %s failed: %s", url, exc)
            return None
        if not resp.ok:
            logger.warning("Stats API returned %s for %s", resp.status_code, url)
            return None
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Undecodable JSON from %s: %s", url, exc)
            return None

    def close(self) -> None:
        self.session.close()


def get_game_pks(client: StatsApiClient, date: str) -> List[int]:
    """Game ids scheduled on `date` (YYYY-MM-DD); empty when none or on failure."""
    data = client.get_json("/api/v1/schedule", params={"sportId": SPORT_ID_MLB, "date": date})
    games = dig(data, "dates", 0, "games", default=[]) or []
    game_pks = [g["gamePk"] for g in games if isinstance(g, dict) and g.get("gamePk") is not None]
    logger.info("Found %d scheduled games for %s", len(game_pks), date)
    return game_pks


def get_team_ids(client: StatsApiClient) -> List[int]:
    data = client.get_json("/api/v1/teams", params={"sportId": SPORT_ID_MLB})
    teams = dig(data, "teams", default=[]) or []
    team_ids = [t["id"] for t in teams if isinstance(t, dict) and t.get("id") is not None]
    logger.info("Found %d teams", len(team_ids))
    return team_ids


def get_team_roster(client: StatsApiClient, team_id: int) -> List[RosterPlayer]:
    data = client.get_json(f"/api/v1/teams/{team_id}/roster")
    if data is None:
        logger.warning("No roster found for team %s", team_id)
        return []
    players = []
    for entry in dig(data, "roster", default=[]) or []:
        person_id = dig(entry, "person", "id")
        if person_id is None:
            continue
        players.append(
            RosterPlayer(
                player_id=person_id,
                name=dig(entry, "person", "fullName", default="Unknown"),
                team_id=team_id,
            )
        )
    return players


def get_all_players(client: StatsApiClient) -> List[RosterPlayer]:
    """Every rostered player across all teams, team by team in upstream order."""
    players: List[RosterPlayer] = []
    for team_id in get_team_ids(client):
        logger.info("Fetching roster for team %s", team_id)
        players.extend(get_team_roster(client, team_id))
    return players
