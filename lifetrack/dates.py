"""Calendar helpers for YYYY-MM-DD strings.

Month membership is decided on the string components, never on a parsed
date, so a record dated on the last day of a month cannot drift into the
next one.  Months are 0-based (0 = January) throughout.
"""
import calendar
from datetime import date
from typing import Optional, Tuple

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _as_int(part: str) -> Optional[int]:
    part = part.strip()
    if not part.isdigit():
        return None
    return int(part)


def matches_month(date_str: str, year: int, month0: int) -> bool:
    if not date_str or not isinstance(date_str, str):
        return False
    parts = date_str.split("-")
    if len(parts) < 2:
        return False
    y = _as_int(parts[0])
    m = _as_int(parts[1])
    if y is None or m is None:
        return False
    return y == year and m - 1 == month0


def shift_month(year: int, month0: int, delta: int) -> Tuple[int, int]:
    month0 += delta
    while month0 < 0:
        month0 += 12
        year -= 1
    while month0 > 11:
        month0 -= 12
        year += 1
    return year, month0


def end_of_month_str(year: int, month0: int) -> str:
    # day 0 of the following month is the last day of this one
    next_year, next_month0 = shift_month(year, month0, 1)
    last = date(next_year, next_month0 + 1, 1).toordinal() - 1
    return date.fromordinal(last).strftime("%Y-%m-%d")


def month_key(year: int, month0: int) -> str:
    return f"{year:04d}-{month0 + 1:02d}"


def month_label(month0: int) -> str:
    return MONTH_LABELS[month0 % 12]


def month_title(year: int, month0: int) -> str:
    return f"{calendar.month_name[month0 + 1]} {year}"


def parse_date(date_str: str) -> Optional[date]:
    try:
        return date.fromisoformat(date_str[:10])
    except (TypeError, ValueError):
        return None


def today_str() -> str:
    return date.today().isoformat()
