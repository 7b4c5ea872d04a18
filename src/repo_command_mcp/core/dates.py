from __future__ import annotations

import os
from datetime import date, datetime, timedelta


# Day boundaries for git date filters are anchored to this offset, not to the
# host's local timezone, so the same query gives the same commits everywhere.
GIT_DATE_UTC_OFFSET = timedelta(hours=8)

UTC_OFFSET_ENV = "REPO_COMMAND_MCP_UTC_OFFSET_HOURS"


def format_utc_offset(offset: timedelta) -> str:
    """timedelta(hours=8) -> '+08:00', timedelta(hours=-5, minutes=-30) -> '-05:30'."""
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_since(day: date | datetime, utc_offset: timedelta = GIT_DATE_UTC_OFFSET) -> str:
    return f"{day:%Y-%m-%d}T00:00:00{format_utc_offset(utc_offset)}"


def format_until(day: date | datetime, utc_offset: timedelta = GIT_DATE_UTC_OFFSET) -> str:
    return f"{day:%Y-%m-%d}T23:59:59{format_utc_offset(utc_offset)}"


def parse_day(value: str | None) -> date | None:
    """Parse an ISO 'YYYY-MM-DD' string; blank or None means 'no bound'."""
    if value is None or not value.strip():
        return None
    return date.fromisoformat(value.strip())


def utc_offset_from_env() -> timedelta:
    raw = os.environ.get(UTC_OFFSET_ENV, "").strip()
    if not raw:
        return GIT_DATE_UTC_OFFSET
    return timedelta(hours=float(raw))
