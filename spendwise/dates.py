"""Date utilities for spendwise.

Pure functions for calendar-date arithmetic and formatting. The only impure
helper is today_iso, which reads the local wall clock.
"""

import re
from datetime import date, datetime, timedelta

import pandas as pd

from spendwise.domain.models import IsoDate

YEAR_FIRST_DATE = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})$")


def today_iso() -> IsoDate:
    """Get the current local calendar date as YYYY-MM-DD."""
    return IsoDate(date.today().isoformat())


def trailing_days(end: IsoDate, days: int = 7) -> list[IsoDate]:
    """List the calendar days ending at end (inclusive), oldest first.

    Args:
        end: Last day of the window (YYYY-MM-DD).
        days: Number of days in the window.

    Returns:
        List of exactly `days` dates.
    """
    last = date.fromisoformat(end)
    return [IsoDate((last - timedelta(days=offset)).isoformat()) for offset in range(days - 1, -1, -1)]


def month_range(month: str) -> tuple[IsoDate, IsoDate, str]:
    """Calculate the inclusive date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (first_day, last_day, label) where:
        - first_day: First day of month (YYYY-MM-DD)
        - last_day: Last day of month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    first = dt.date()
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1).date()
    last = next_month - timedelta(days=1)
    return IsoDate(first.isoformat()), IsoDate(last.isoformat()), dt.strftime("%B %Y")


def short_day_label(day: IsoDate) -> str:
    """Format a date as a short chart label (e.g., "Mon 03")."""
    return date.fromisoformat(day).strftime("%a %d")


def normalize_remote_date(raw: str) -> IsoDate:
    """Normalize a date or timestamp from the remote store to YYYY-MM-DD.

    The store may hand back a plain date, a timestamp, or a timestamp with
    an offset, depending on the column type.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    raw = str(raw).strip()
    try:
        parsed = pd.to_datetime(raw, utc=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw}': {e}") from e
    return IsoDate(parsed.strftime("%Y-%m-%d"))


def normalize_user_date(raw: str) -> IsoDate:
    """Normalize a user-entered date to YYYY-MM-DD.

    Accepts ISO and other year-first dates, European (day first) and other
    common formats. Year-first input is never reinterpreted, so 2024-13-01
    is rejected rather than read day first.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    raw = raw.strip()
    try:
        return IsoDate(date.fromisoformat(raw).isoformat())
    except ValueError:
        pass

    year_first = YEAR_FIRST_DATE.match(raw)
    if year_first:
        year, month, day = (int(part) for part in year_first.groups())
        try:
            return IsoDate(date(year, month, day).isoformat())
        except ValueError as e:
            raise ValueError(f"Invalid date '{raw}': {e}") from e
    if re.match(r"^\d{4}[-/.]", raw):
        raise ValueError(f"Invalid date '{raw}', expected YYYY-MM-DD")

    try:
        return IsoDate(pd.to_datetime(raw, dayfirst=True).strftime("%Y-%m-%d"))
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Invalid date '{raw}': {e}") from e


def epoch_millis(moment: datetime | None = None) -> int:
    """Convert a datetime (default: now) to epoch milliseconds."""
    moment = moment or datetime.now().astimezone()
    return int(moment.timestamp() * 1000)
