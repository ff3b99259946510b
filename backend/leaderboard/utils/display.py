"""
Display helpers shared by the leaderboard, profile and tournament pages.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]

_YEAR = r"(201[6-9]|20[2-9]\d)"

# Applied in order; the parenthesised form has to go first.
_YEAR_PATTERNS = [
    (re.compile(rf"\s*\({_YEAR}\)\s*"), " "),
    (re.compile(rf"^{_YEAR}\s*[-–—]?\s*"), ""),
    (re.compile(rf"\s*[-–—,]\s*{_YEAR}\s*$"), ""),
    (re.compile(rf"\s+{_YEAR}\s*$"), ""),
    (re.compile(rf"^{_YEAR}\s+"), ""),
    (re.compile(rf"\s+{_YEAR}\s+"), " "),
    (re.compile(r"\s+"), " "),
]

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def remove_year_from_event_name(name: Optional[str]) -> str:
    """'2024 Winter League' -> 'Winter League', 'Spring Open (2019)' -> 'Spring Open'."""
    if not name:
        return ""
    cleaned = name
    for pattern, replacement in _YEAR_PATTERNS:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()


def _to_date(value: DateLike) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def get_formatted_date(value: DateLike) -> str:
    """Long US date, e.g. 'July 4, 2024'. Unparseable strings come back as-is."""
    if not value:
        return ""
    try:
        d = _to_date(value)
    except ValueError:
        return str(value)
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year}"


def get_numeric_date(value: DateLike) -> str:
    """Numeric US date, e.g. '07/04/2024'. Unparseable strings come back as-is."""
    if not value:
        return ""
    try:
        d = _to_date(value)
    except ValueError:
        return str(value)
    return f"{d.month:02d}/{d.day:02d}/{d.year}"
