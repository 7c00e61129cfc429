import logging
from datetime import UTC, datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlmodel import Session, select

from dinger_api import models
from dinger_api.core.config import Settings, get_settings
from dinger_api.db import get_session
from dinger_api.schemas import (
    CollectionInfo,
    CollectionsResponse,
    ErrorResponse,
    HomeRun,
    LeaderboardEntry,
    StartingPitcher,
    UpdateResponse,
)
from dinger_api.services.refresh import CATEGORIES, RefreshInProgress, RefreshService, get_refresh_service
from dinger_pipeline.reporting import parse_date, reporting_date

logger = logging.getLogger(__name__)

router = APIRouter()


def get_reporting_date(settings: Settings = Depends(get_settings)) -> str:
    """Today's partition key; overridable in tests."""
    return reporting_date(settings.reporting_timezone)


def _decode_rank(value: str) -> Union[int, str]:
    return int(value) if value.isdigit() else value


def _serialize_homerun(row: models.DailyHomeRun) -> HomeRun:
    return HomeRun(
        player_id=row.player_id,
        name=row.name,
        description=row.description,
        image_url=row.image_url,
        launch_speed=row.launch_speed,
        total_distance=row.total_distance,
        date=row.date,
    )


def _serialize_leader(row: models.LeaderboardRow) -> LeaderboardEntry:
    return LeaderboardEntry(
        player_id=row.player_id,
        name=row.name,
        team=row.team,
        position=row.position,
        home_runs=row.home_runs,
        rbi=row.rbi,
        avg=row.avg,
        ops=row.ops,
        stolen_bases=row.stolen_bases,
        ab_per_hr=row.ab_per_hr,
        date=row.date,
        rank=_decode_rank(row.rank),
    )


def _serialize_pitcher(row: models.StartingPitcher) -> StartingPitcher:
    return StartingPitcher(
        game_pk=row.game_pk,
        team=row.team,
        team_side=row.team_side,
        player_id=row.player_id,
        name=row.name,
        era=row.era,
        hr_per_nine=row.hr_per_nine,
        wins=row.wins,
        losses=row.losses,
        strikeouts=row.strikeouts,
        whip=row.whip,
        date=row.date,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message, timestamp=datetime.now(UTC))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _run_refresh(service: RefreshService, category: str) -> Union[UpdateResponse, JSONResponse]:
    """Run a refresh synchronously; failures become an error body, never a partial success."""
    try:
        counts = service.refresh(category)
    except RefreshInProgress as exc:
        return _error(status.HTTP_409_CONFLICT, str(exc))
    except Exception as exc:
        logger.exception("Manual %s update failed", category)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    label = "All data" if category == "all" else f"{category.capitalize()} data"
    return UpdateResponse(
        success=True,
        message=f"{label} updated successfully",
        timestamp=datetime.now(UTC),
        counts=counts,
    )


@router.get("/daily_homeruns", response_model=List[HomeRun], tags=["homeruns"])
def daily_homeruns(
    date: Optional[str] = Query(None, description="YYYY-MM-DD; defaults to today"),
    today: str = Depends(get_reporting_date),
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
) -> List[HomeRun]:
    """Home runs for a date, longest first."""
    if date:
        try:
            date = parse_date(date)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format")
    else:
        date = settings.pinned_date or today

    rows = session.exec(
        select(models.DailyHomeRun)
        .where(models.DailyHomeRun.date == date)
        .order_by(models.DailyHomeRun.id)
    ).all()
    rows = sorted(rows, key=lambda r: r.total_distance or 0, reverse=True)
    logger.info("Found %d home runs for %s", len(rows), date)
    return [_serialize_homerun(r) for r in rows]


@router.get("/leaderboard", response_model=List[LeaderboardEntry], tags=["leaderboard"])
def leaderboard(
    today: str = Depends(get_reporting_date),
    session: Session = Depends(get_session),
) -> List[LeaderboardEntry]:
    rows = session.exec(
        select(models.LeaderboardRow)
        .where(models.LeaderboardRow.date == today)
        .order_by(models.LeaderboardRow.home_runs.desc(), models.LeaderboardRow.id)
    ).all()
    return [_serialize_leader(r) for r in rows]


@router.get("/pitchers", response_model=List[StartingPitcher], tags=["pitchers"])
def pitchers(
    today: str = Depends(get_reporting_date),
    session: Session = Depends(get_session),
) -> List[StartingPitcher]:
    rows = session.exec(
        select(models.StartingPitcher)
        .where(models.StartingPitcher.date == today)
        .order_by(models.StartingPitcher.id)
    ).all()
    return [_serialize_pitcher(r) for r in rows]


@router.post(
    "/update-data",
    response_model=UpdateResponse,
    responses={409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["admin"],
)
def update_data(
    x_admin_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    service: RefreshService = Depends(get_refresh_service),
):
    """Re-run every pipeline now. Open unless ADMIN_KEY is configured."""
    if settings.admin_key and x_admin_key != settings.admin_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")
    logger.info("Manual data update triggered")
    return _run_refresh(service, "all")


@router.get(
    "/admin/update-{category}",
    response_model=UpdateResponse,
    responses={409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["admin"],
)
def admin_update(
    category: str,
    key: Optional[str] = Query(None),
    settings: Settings = Depends(get_settings),
    service: RefreshService = Depends(get_refresh_service),
):
    """Key-gated refresh of one category (or "all"); disabled when no ADMIN_KEY is set."""
    if not settings.admin_key or key != settings.admin_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")
    if category != "all" and category not in CATEGORIES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown data category")
    return _run_refresh(service, category)


@router.get("/debug/collections", response_model=CollectionsResponse, tags=["health"])
def debug_collections(session: Session = Depends(get_session)) -> CollectionsResponse:
    tables = (models.DailyHomeRun, models.LeaderboardRow, models.StartingPitcher)
    collections = {
        model.__tablename__: CollectionInfo(count=session.exec(select(func.count()).select_from(model)).one())
        for model in tables
    }
    return CollectionsResponse(collections=collections, timestamp=datetime.now(UTC))
