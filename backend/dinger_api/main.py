import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from dinger_api import db
from dinger_api.api.routes import router
from dinger_api.core.config import get_settings
from dinger_api.scheduler import PeriodicRefresher
from dinger_api.schemas import HealthResponse
from dinger_api.services.refresh import RefreshService

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db.init_db()
    service = RefreshService.from_settings(settings, session_factory=lambda: Session(db.engine))
    app.state.refresh_service = service

    refresher = None
    if settings.refresh_enabled:
        refresher = PeriodicRefresher(
            service,
            interval=settings.refresh_interval_minutes * 60,
            initial_delay=settings.refresh_initial_delay_seconds,
        )
        refresher.start()
    app.state.refresher = refresher
    yield
    if refresher is not None:
        await refresher.stop()
    # A scheduled run may still be busy in its worker thread.
    await asyncio.to_thread(service.close)
    logger.info("Shut down cleanly")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse, tags=["health"])
def health(session: Session = Depends(db.get_session)):
    """Database connectivity probe."""
    try:
        db.ping(session)
    except Exception as exc:
        body = HealthResponse(status="unhealthy", database="disconnected", error=str(exc), timestamp=datetime.now(UTC))
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
    return HealthResponse(status="healthy", database="connected", timestamp=datetime.now(UTC))


app.include_router(router, prefix=settings.api_prefix)
