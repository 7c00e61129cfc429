from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Field aliases are the wire names the single-page front end already reads.


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HomeRun(WireModel):
    player_id: int = Field(alias="playerId")
    name: str
    description: str
    image_url: str = Field(alias="imageUrl")
    launch_speed: Optional[float] = Field(default=None, alias="launchSpeed")
    total_distance: Optional[int] = Field(default=None, alias="totalDistance")
    date: str


class LeaderboardEntry(WireModel):
    player_id: int = Field(alias="playerId")
    name: str
    team: str
    position: str
    home_runs: int = Field(alias="HR")
    rbi: int = Field(alias="RBI")
    avg: str = Field(alias="AVG")
    ops: str = Field(alias="OPS")
    stolen_bases: int = Field(alias="SB")
    ab_per_hr: str = Field(alias="abPerHr")
    date: str
    rank: Union[int, str]


class StartingPitcher(WireModel):
    game_pk: int = Field(alias="gamePk")
    team: str
    team_side: str = Field(alias="teamSide")
    player_id: int = Field(alias="playerId")
    name: str
    era: str = Field(alias="ERA")
    hr_per_nine: str = Field(alias="HR9")
    wins: int
    losses: int
    strikeouts: int
    whip: str
    date: str


class UpdateResponse(BaseModel):
    success: bool
    message: str
    timestamp: datetime
    counts: Dict[str, int] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    database: str
    timestamp: datetime
    error: Optional[str] = None


class CollectionInfo(BaseModel):
    count: int


class CollectionsResponse(BaseModel):
    collections: Dict[str, CollectionInfo]
    timestamp: datetime


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    timestamp: datetime
