from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: Any, field_name: str = "fecha") -> date:
    """Parse YYYY-MM-DD string into date.

    Raises ValidationError for anything else so handlers can answer 400.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} debe tener formato AAAA-MM-DD")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"{field_name} debe tener formato AAAA-MM-DD")


def parse_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_iso_date(value, field_name)


def parse_clock_time(value: Any, field_name: str = "hora") -> time:
    """Parse HH:MM (seconds tolerated) into time."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} debe tener formato HH:MM")
    raw = value.strip()
    for fmt in (TIME_FORMAT, "%H:%M:%S"):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} debe tener formato HH:MM")


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime(DATE_FORMAT) if value else None


def format_clock_time(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value else None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(sep=" ", timespec="seconds") if value else None


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()
