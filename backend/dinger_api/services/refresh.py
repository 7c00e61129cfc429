"""
Refresh service: runs a pipeline against the Stats API and replaces the
reporting date's rows in the matching table.

One service instance is built per process (see `dinger_api.main`) and shared
by the periodic refresher and the manual update endpoints. Runs are
single-flight: while one is in progress any other attempt fails fast with
`RefreshInProgress` instead of queueing behind it.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Type

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from dinger_api import models
from dinger_api.core.config import Settings
from dinger_pipeline import (
    StatsApiClient,
    collect_daily_homeruns,
    collect_leaderboard,
    collect_starting_pitchers,
)
from dinger_pipeline.records import HomeRunEvent, LeaderboardEntry, StartingPitcherEntry
from dinger_pipeline.reporting import reporting_date

logger = logging.getLogger(__name__)

CATEGORIES = ("homeruns", "leaderboard", "pitchers")


class RefreshInProgress(RuntimeError):
    """Raised when a refresh is requested while another one is still running."""


def replace_for_date(session: Session, model: Type[SQLModel], date: str, rows: Iterable[SQLModel]) -> int:
    """
    Delete every row of `model` for `date` and insert `rows`, committed together.

    An empty `rows` still clears the date. Readers never see the gap between
    the delete and the insert since both land in one transaction.
    """
    rows = list(rows)
    try:
        for existing in session.exec(select(model).where(model.date == date)).all():
            session.delete(existing)
        session.add_all(rows)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Replacing %s rows for %s failed", model.__tablename__, date)
        raise
    return len(rows)


def _homerun_rows(events: List[HomeRunEvent]) -> List[models.DailyHomeRun]:
    return [models.DailyHomeRun(**event.to_dict()) for event in events]


def _leaderboard_rows(entries: List[LeaderboardEntry]) -> List[models.LeaderboardRow]:
    rows = []
    for entry in entries:
        data = entry.to_dict()
        data["rank"] = str(data["rank"])
        rows.append(models.LeaderboardRow(**data))
    return rows


def _pitcher_rows(entries: List[StartingPitcherEntry]) -> List[models.StartingPitcher]:
    return [models.StartingPitcher(**entry.to_dict()) for entry in entries]


class RefreshService:
    def __init__(
        self,
        client: StatsApiClient,
        session_factory: Callable[[], Session],
        timezone: str,
        season: Optional[int] = None,
        leaderboard_limit: int = 10,
        today: Optional[Callable[[], str]] = None,
    ):
        self.client = client
        self.session_factory = session_factory
        self.timezone = timezone
        self.season = season
        self.leaderboard_limit = leaderboard_limit
        self._today = today or (lambda: reporting_date(self.timezone))
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: Callable[[], Session],
        today: Optional[Callable[[], str]] = None,
    ) -> "RefreshService":
        client = StatsApiClient(base_url=settings.stats_api_base_url, timeout=settings.stats_api_timeout)
        return cls(
            client=client,
            session_factory=session_factory,
            timezone=settings.reporting_timezone,
            season=settings.season,
            leaderboard_limit=settings.leaderboard_limit,
            today=today,
        )

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def today(self) -> str:
        return self._today()

    def season_year(self) -> int:
        return self.season or int(self.today()[:4])

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise RefreshInProgress("A data refresh is already running")
        try:
            yield
        finally:
            self._lock.release()

    def _store(self, model: Type[SQLModel], date: str, rows: List[SQLModel]) -> int:
        with self.session_factory() as session:
            inserted = replace_for_date(session, model, date, rows)
        logger.info("Stored %d %s rows for %s", inserted, model.__tablename__, date)
        return inserted

    def _refresh_homeruns(self) -> int:
        date = self.today()
        events = collect_daily_homeruns(self.client, date, self.season_year())
        return self._store(models.DailyHomeRun, date, _homerun_rows(events))

    def _refresh_leaderboard(self) -> int:
        date = self.today()
        entries = collect_leaderboard(self.client, date, self.season_year(), self.leaderboard_limit)
        return self._store(models.LeaderboardRow, date, _leaderboard_rows(entries))

    def _refresh_pitchers(self) -> int:
        date = self.today()
        entries = collect_starting_pitchers(self.client, date, self.season_year())
        return self._store(models.StartingPitcher, date, _pitcher_rows(entries))

    def refresh(self, category: str) -> Dict[str, int]:
        """Refresh one category ("homeruns", "leaderboard", "pitchers") or "all"."""
        runners = {
            "homeruns": self._refresh_homeruns,
            "leaderboard": self._refresh_leaderboard,
            "pitchers": self._refresh_pitchers,
        }
        if category == "all":
            selected = list(CATEGORIES)
        elif category in runners:
            selected = [category]
        else:
            raise ValueError(f"Unknown refresh category: {category}")

        with self._exclusive():
            counts = {}
            for name in selected:
                logger.info("Refreshing %s", name)
                counts[name] = runners[name]()
            return counts

    def refresh_all(self) -> Dict[str, int]:
        return self.refresh("all")

    def close(self) -> None:
        """Close the upstream session, first waiting for any in-flight refresh to finish."""
        with self._lock:
            self.client.close()


def get_refresh_service(request: Request) -> RefreshService:
    """Dependency returning the process-wide service built during app startup."""
    return request.app.state.refresh_service
