"""Utility functions."""
import re
from typing import Optional, Union

# "60", "60 kg", "62,5kg", "135 lbs"; ranges and bodyweight markers do not match
PLAIN_WEIGHT_PATTERN = re.compile(r'^(\d+(?:[.,]\d+)?)\s*(?:kgs?|lbs?)?$', re.IGNORECASE)


def to_int(s: Union[str, int, None]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    if isinstance(s, bool):
        return None
    if isinstance(s, int):
        return s
    try:
        return int(s.strip()) if s is not None else None
    except (AttributeError, ValueError):
        return None


def plain_weight(txt: Optional[str]) -> Optional[float]:
    """Numeric value of a load written as a bare number, optionally with a mass unit."""
    if not txt:
        return None
    match = PLAIN_WEIGHT_PATTERN.match(txt.strip())
    if not match:
        return None
    return float(match.group(1).replace(",", "."))
