from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Field, SQLModel

# Every table is partitioned by `date` (reporting date, YYYY-MM-DD); a refresh
# replaces all rows of one date at once.


class DailyHomeRun(SQLModel, table=True):
    __tablename__ = "daily_homeruns"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(index=True, nullable=False)
    player_id: int = Field(nullable=False)
    name: str
    description: str
    image_url: str
    launch_speed: Optional[float] = None
    total_distance: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False)


class LeaderboardRow(SQLModel, table=True):
    __tablename__ = "leaderboard"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(index=True, nullable=False)
    player_id: int = Field(nullable=False)
    name: str
    team: str
    position: str
    home_runs: int = 0
    rbi: int = 0
    avg: str = "0.000"
    ops: str = "0.000"
    stolen_bases: int = 0
    ab_per_hr: str = "0.00"
    rank: str = Field(description="Integer rank or tie marker such as T-3, stored as text")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False)


class StartingPitcher(SQLModel, table=True):
    __tablename__ = "pitchers"

    id: Optional[int] = Field(default=None, primary_key=True)
    date: str = Field(index=True, nullable=False)
    game_pk: int = Field(index=True, nullable=False)
    team: str
    team_side: str
    player_id: int = Field(nullable=False)
    name: str
    era: str = "N/A"
    hr_per_nine: str = "N/A"
    wins: int = 0
    losses: int = 0
    strikeouts: int = 0
    whip: str = "N/A"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False)
