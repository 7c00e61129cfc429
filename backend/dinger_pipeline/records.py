"""
Flat records produced by each pipeline run.

Records carry no identity beyond their natural key; a run always produces a
fresh set for one reporting date.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Union

Rank = Union[int, str]


@dataclass
class HomeRunEvent:
    player_id: int
    name: str
    description: str
    image_url: str
    launch_speed: Optional[float]
    total_distance: Optional[int]
    date: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LeaderboardEntry:
    player_id: int
    name: str
    team: str
    position: str
    home_runs: int
    rbi: int
    avg: str
    ops: str
    stolen_bases: int
    ab_per_hr: str
    date: str
    rank: Optional[Rank] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StartingPitcherEntry:
    game_pk: int
    team: str
    team_side: str
    player_id: int
    name: str
    era: str
    hr_per_nine: str
    wins: int
    losses: int
    strikeouts: int
    whip: str
    date: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RosterPlayer:
    player_id: int
    name: str
    team_id: int
