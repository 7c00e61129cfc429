import os
from pathlib import Path
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

from dinger_pipeline.reporting import DEFAULT_TIMEZONE

# Prefer backend/.env so running from the repo root still picks up settings.
# __file__ is backend/dinger_api/core/config.py -> parents[2] is backend/
BACKEND_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(BACKEND_ENV)


def _env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean from the environment with sensible defaults."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str] | None = None) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default or []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


@dataclass
class Settings:
    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Dinger Tracker API"))
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", ""))
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///dinger_dev.db"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", ["*"]))

    stats_api_base_url: str = field(
        default_factory=lambda: os.getenv("STATS_API_BASE_URL", "https://statsapi.mlb.com")
    )
    stats_api_timeout: int = field(default_factory=lambda: _env_int("STATS_API_TIMEOUT", 10))
    reporting_timezone: str = field(default_factory=lambda: os.getenv("REPORTING_TIMEZONE", DEFAULT_TIMEZONE))
    season: Optional[int] = field(default_factory=lambda: _env_int("SEASON", 0) or None)
    leaderboard_limit: int = field(default_factory=lambda: _env_int("LEADERBOARD_LIMIT", 10))

    refresh_enabled: bool = field(default_factory=lambda: _env_bool("REFRESH_ENABLED", True))
    refresh_interval_minutes: int = field(default_factory=lambda: _env_int("REFRESH_INTERVAL_MINUTES", 30))
    refresh_initial_delay_seconds: int = field(
        default_factory=lambda: _env_int("REFRESH_INITIAL_DELAY_SECONDS", 10)
    )

    admin_key: Optional[str] = field(default_factory=lambda: _env_optional("ADMIN_KEY"))
    # Test mode: /daily_homeruns serves this date when the caller gives none.
    pinned_date: Optional[str] = field(default_factory=lambda: _env_optional("PINNED_DATE"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance sourced from environment variables."""
    return Settings()
