"""Reporting-date helpers; stored rows are partitioned by this date."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/New_York"


def reporting_now(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def reporting_date(tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Today's calendar date (YYYY-MM-DD) in the reporting time zone."""
    return reporting_now(tz_name).date().isoformat()


def parse_date(value: str) -> str:
    """Validate a YYYY-MM-DD string and return it normalized; raises ValueError."""
    return date.fromisoformat(value.strip()).isoformat()
