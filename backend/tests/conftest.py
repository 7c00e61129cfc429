import os
import sys
from pathlib import Path

# Ensure the backend packages are importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the app off disk and off the network while under test.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REFRESH_ENABLED"] = "false"
os.environ.pop("ADMIN_KEY", None)
os.environ.pop("PINNED_DATE", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

# Register models for metadata creation in tests.
from dinger_api import models  # noqa: E402,F401
from dinger_api.api.routes import get_reporting_date  # noqa: E402
from dinger_api.core.config import Settings, get_settings  # noqa: E402
from dinger_api.db import get_session  # noqa: E402
from dinger_api.main import app  # noqa: E402
from dinger_api.services.refresh import RefreshService, get_refresh_service  # noqa: E402

from payloads import TODAY, FakeStatsApi, default_routes  # noqa: E402


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture(name="routes")
def routes_fixture():
    return default_routes()


@pytest.fixture(name="stats_api")
def stats_api_fixture(routes):
    return FakeStatsApi(routes)


@pytest.fixture(name="service")
def service_fixture(engine, stats_api):
    return RefreshService(
        client=stats_api,
        session_factory=lambda: Session(engine),
        timezone="America/New_York",
        season=2025,
        today=lambda: TODAY,
    )


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(admin_key=None, pinned_date=None)


@pytest.fixture(name="client")
def client_fixture(engine, service, settings):
    def _get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_test_session
    app.dependency_overrides[get_refresh_service] = lambda: service
    app.dependency_overrides[get_reporting_date] = lambda: TODAY
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
