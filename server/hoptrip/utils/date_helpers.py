"""Trip date helpers: itinerary expansion and display formatting."""
from datetime import date, datetime, timedelta
from typing import List

ISO_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%d %B %Y"


def expand_itinerary_dates(start: date, end: date) -> List[str]:
    """Every calendar day in [start, end] as YYYY-MM-DD."""
    days = (end - start).days
    return [(start + timedelta(days=offset)).strftime(ISO_FORMAT) for offset in range(days + 1)]


def format_display_date(value: date) -> str:
    """2024-06-01 -> '01 June 2024'."""
    return value.strftime(DISPLAY_FORMAT)


def parse_display_date(value: str) -> date:
    """Accepts the stored display format or ISO."""
    for fmt in (DISPLAY_FORMAT, ISO_FORMAT):
        try:
            return datetime.strptime(value, fmt).date()
        except (TypeError, ValueError):
            continue
    raise ValueError(f"Unrecognized date: {value!r}")


def weekday_name(value: date) -> str:
    return value.strftime("%A")
