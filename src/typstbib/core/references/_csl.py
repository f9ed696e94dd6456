"""Helpers shared by the CSL-JSON mappers."""

from __future__ import annotations

from datetime import date, datetime
import re
from typing import Any


_ISO_DATE_RE = re.compile(
    r"^(?P<year>-?\d{1,4})(?:-(?P<month>\d{1,2})(?:-(?P<day>\d{1,2}))?)?$"
)

_MONTH_NAME_TO_INT: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}


def csl_date(year: int, month: int | None = None, day: int | None = None) -> dict[str, Any]:
    """Build a CSL date object from its components."""
    parts = [year]
    if month is not None:
        parts.append(month)
        if day is not None:
            parts.append(day)
    return {"date-parts": [parts]}


def parse_date(value: object) -> dict[str, Any] | None:
    """Convert ISO-like strings, integers, and date objects to CSL dates.

    Returns None when the value does not follow ``YYYY``, ``YYYY-MM`` or
    ``YYYY-MM-DD``; callers decide whether that is an error.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return csl_date(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return csl_date(value)
    if not isinstance(value, str):
        return None

    match = _ISO_DATE_RE.match(value.strip())
    if match is None:
        return None
    year = int(match.group("year"))
    month = int(match.group("month")) if match.group("month") else None
    day = int(match.group("day")) if match.group("day") else None
    if month is not None and not 1 <= month <= 12:
        return None
    if day is not None and not 1 <= day <= 31:
        return None
    return csl_date(year, month, day)


def normalise_month(value: str) -> int | None:
    """Convert month names, abbreviations, or digits to an integer."""
    candidate = value.strip().strip("{}\"'").lower().rstrip(".")
    if not candidate:
        return None
    if candidate.isdigit():
        month_int = int(candidate)
        return month_int if 1 <= month_int <= 12 else None
    return _MONTH_NAME_TO_INT.get(candidate)


def scalar_text(value: object) -> str | None:
    """Return a stripped textual form of scalar YAML/BibTeX values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        candidate = value.strip()
        return candidate or None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return None


__all__ = ["csl_date", "normalise_month", "parse_date", "scalar_text"]
