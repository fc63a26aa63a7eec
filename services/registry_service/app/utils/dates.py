"""
Conversions between the display format (DD/MM/YYYY) users type and the
plain calendar dates the store keeps, plus the input masks the forms apply
while a date is being typed.
"""
import re
from datetime import date, datetime
from typing import Optional, Tuple, Union

from ..exceptions import InvalidDateFormat

DISPLAY_FORMAT = "%d/%m/%Y"
MIN_YEAR = 1900
MAX_YEAR = 2100

_DISPLAY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_DAY_MONTH_RE = re.compile(r"^(\d{2})/(\d{2})$")


def to_display(value: Union[date, str, None]) -> str:
    """Format a stored date as DD/MM/YYYY; empty string for None or garbage."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(DISPLAY_FORMAT)
    try:
        # Stored values may arrive serialized, e.g. "1960-05-10" or "1960-05-10T00:00:00"
        return date.fromisoformat(str(value)[:10]).strftime(DISPLAY_FORMAT)
    except ValueError:
        return ""


def to_storage(display: Optional[str]) -> Optional[date]:
    """
    Parse a DD/MM/YYYY string into a date.

    Returns None for empty input, a malformed string, a year outside
    1900..2100, or a day/month pair that is not on the calendar.
    """
    if not display:
        return None
    match = _DISPLAY_RE.match(display.strip())
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    if not MIN_YEAR <= year <= MAX_YEAR or not 1 <= month <= 12 or day < 1:
        return None
    try:
        parsed = date(year, month, day)
    except ValueError:
        return None
    if (parsed.year, parsed.month, parsed.day) != (year, month, day):
        return None
    return parsed


def is_valid_display(display: Optional[str]) -> bool:
    # Dates are optional fields, so blank is acceptable
    if not display:
        return True
    if not _DISPLAY_RE.match(display.strip()):
        return False
    return to_storage(display) is not None


def parse_day_month(text: Optional[str]) -> Tuple[int, int]:
    """
    Parse a DD/MM birthday query into ``(day, month)``.

    Only ranges are checked (month 1..12, day 1..31); 31/02 passes and simply
    matches nobody.
    """
    match = _DAY_MONTH_RE.match((text or "").strip())
    if not match:
        raise InvalidDateFormat("Invalid day/month, use DD/MM")
    day, month = (int(part) for part in match.groups())
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise InvalidDateFormat("Invalid day/month, use DD/MM")
    return day, month


def mask_date_input(raw: str) -> str:
    digits = re.sub(r"\D", "", raw or "")[:8]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}/{digits[2:]}"
    return f"{digits[:2]}/{digits[2:4]}/{digits[4:]}"


def mask_day_month_input(raw: str) -> str:
    digits = re.sub(r"\D", "", raw or "")[:4]
    if len(digits) <= 2:
        return digits
    return f"{digits[:2]}/{digits[2:]}"
