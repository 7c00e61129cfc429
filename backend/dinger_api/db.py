from sqlalchemy import text
from sqlmodel import Session, SQLModel, create_engine

from dinger_api.core.config import get_settings
from dinger_api import models  # noqa: F401 - ensures models are registered with metadata

settings = get_settings()
engine = create_engine(settings.database_url, echo=settings.debug)


def init_db() -> None:
    """Create tables; called during startup."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a session for dependency injection."""
    with Session(engine) as session:
        yield session


def ping(session: Session) -> None:
    """Round-trip a trivial query; raises if the database is unreachable."""
    session.connection().execute(text("SELECT 1"))
