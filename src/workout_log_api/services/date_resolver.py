"""
Date resolution for workout logs.

Every date in the log is a "date key": a YYYY-MM-DD string built from
integer year/month/day fields. Nothing here parses a date-only string
into a datetime and reads it back, because doing that through UTC shifts
the day for users east or west of Greenwich.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Motra writes Spanish month abbreviations: "11 feb 2026, 18:36"
MONTH_ABBREVIATIONS: Dict[str, int] = {
    "ene": 1, "feb": 2, "mar": 3, "abr": 4,
    "may": 5, "jun": 6, "jul": 7, "ago": 8,
    "sep": 9, "oct": 10, "nov": 11, "dic": 12,
}

MONTH_NAMES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

# Indexed by date.weekday(), Monday first
DAY_NAMES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]

EMBEDDED_DATE_PATTERN = re.compile(r'(\d{1,2})\s+([^\W\d_]{3})\.?\s+(\d{4})')
DATE_KEY_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')


def to_date_key(value: date) -> str:
    """Format a date (or datetime, using its own calendar fields) as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def date_key_to_date(date_key: str) -> date:
    """Convert a YYYY-MM-DD key to a date. Raises ValueError if malformed."""
    match = DATE_KEY_PATTERN.match(date_key or "")
    if not match:
        raise ValueError(f"Invalid date key: {date_key!r}. Expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def is_canonical_date(value) -> bool:
    """True if value is a YYYY-MM-DD string naming a real calendar day."""
    if not isinstance(value, str):
        return False
    try:
        date_key_to_date(value)
    except ValueError:
        return False
    return True


def parse_embedded_date(text: Optional[str]) -> Optional[str]:
    """
    Extract "<day> <month abbrev> <year>" from free text.

    Example: "11 feb 2026, 18:36" -> "2026-02-11"

    Returns:
        Date key, or None when no recognisable date is present
    """
    if not text:
        return None

    match = EMBEDDED_DATE_PATTERN.search(text)
    if not match:
        return None

    day_str, month_str, year_str = match.groups()
    month = MONTH_ABBREVIATIONS.get(month_str.lower())
    if month is None:
        return None

    try:
        return to_date_key(date(int(year_str), month, int(day_str)))
    except ValueError:
        logger.debug("Embedded date is not a real day: %r", match.group(0))
        return None


def days_between(date_key_a: str, date_key_b: str) -> int:
    """Absolute number of days between two date keys."""
    return abs((date_key_to_date(date_key_b) - date_key_to_date(date_key_a)).days)


def day_name(date_key: str) -> str:
    return DAY_NAMES[date_key_to_date(date_key).weekday()]


def display_full(date_key: str) -> str:
    """Long Spanish rendering, e.g. "miércoles, 11 de febrero de 2026"."""
    value = date_key_to_date(date_key)
    return (
        f"{DAY_NAMES[value.weekday()]}, {value.day} de "
        f"{MONTH_NAMES[value.month - 1]} de {value.year}"
    )


def _system_clock(tz_name: Optional[str]) -> Clock:
    if tz_name:
        try:
            zone = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                f"Unknown LOCAL_TIMEZONE {tz_name!r}. Falling back to the host local time."
            )
        else:
            return lambda: datetime.now(zone)
    return datetime.now


class DateTextResolver:
    """Resolves "today" and the dates embedded in session text."""

    def __init__(self, clock: Optional[Clock] = None, tz_name: Optional[str] = None):
        """
        Args:
            clock: Zero-argument callable returning the current local datetime.
                Defaults to the host clock, in tz_name when given.
            tz_name: IANA timezone used by the default clock
        """
        self._clock = clock or _system_clock(tz_name)

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        current = self._clock()
        return date(current.year, current.month, current.day)

    def resolve_today_key(self) -> str:
        """Today's date key from the clock's local calendar fields."""
        return to_date_key(self.today())

    def parse_embedded_date(self, text: Optional[str]) -> Optional[str]:
        return parse_embedded_date(text)

    def display_full(self, date_key: str) -> str:
        return display_full(date_key)

    def is_today(self, date_key: str) -> bool:
        return date_key == self.resolve_today_key()

    def days_ago(self, days: int) -> str:
        """Date key of `days` days before today."""
        return to_date_key(self.today() - timedelta(days=days))

    def today_full_info(self) -> Dict[str, str]:
        """Today's date in the forms the coach prompt needs."""
        current = self._clock()
        today_key = to_date_key(current)
        name = day_name(today_key)
        return {
            "date_key": today_key,
            "day_name": name,
            "full_date": (
                f"{name.capitalize()} {current.day} de "
                f"{MONTH_NAMES[current.month - 1]} de {current.year}"
            ),
            "timestamp": current.isoformat(),
        }
