"""Calendar helpers for release-date windows."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(timezone.utc).date()


def add_years(value: date, years: int) -> date:
    """Same calendar day ``years`` later; Feb 29 falls back to Feb 28."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)
