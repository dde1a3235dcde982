from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]

_MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)
_WEEKDAYS_ES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or an ISO timestamp as sent by the API) into date."""
    v = (value or "").strip()
    return datetime.strptime(v[:10], "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM[:SS]' or 'YYYY-MM-DDTHH:MM:SS[.fff][Z]'."""
    v = (value or "").strip().replace("T", " ")
    if v.endswith("Z"):
        v = v[:-1]
    v = v.split(".")[0]
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(v, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid datetime string: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def as_day(value: DateLike) -> date:
    """Strip the time-of-day so comparisons happen at day granularity."""
    if isinstance(value, datetime):
        return value.date()
    return value


def business_days(start: Optional[DateLike], end: Optional[DateLike]) -> Optional[int]:
    """Count Monday-Friday days in ``[start, end)``.

    Returns None when a bound is missing or ``end <= start``; callers treat that
    as an invalid range rather than a zero-day one.
    """
    if start is None or end is None:
        return None
    current = as_day(start)
    stop = as_day(end)
    if stop <= current:
        return None

    count = 0
    while current < stop:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


def week_bounds(day: DateLike) -> tuple[date, date]:
    """Sunday..Saturday week that contains ``day``."""
    d = as_day(day)
    first = d - timedelta(days=(d.weekday() + 1) % 7)
    return first, first + timedelta(days=6)


def format_dmy(value: Optional[DateLike]) -> str:
    if value is None:
        return "-"
    return as_day(value).strftime("%d/%m/%Y")


def format_long_es(value: DateLike) -> str:
    """'Lunes 4 de marzo de 2024'."""
    d = as_day(value)
    weekday = _WEEKDAYS_ES[d.weekday()]
    return f"{weekday.capitalize()} {d.day} de {_MONTHS_ES[d.month - 1]} de {d.year}"
