"""
Set Notation

Decodes the text of a single Motra set line (after the "<N>: " prefix)
into a rep-based, time-based or unparsed set.
"""

import re

from .models import DecodedSet, RepBasedSet, TimeBasedSet, UnparsedSet

# "01:01 x PC"
TIME_PATTERN = re.compile(r'^(\d{2}:\d{2})\s*[xX×]\s*(.+)$')

# "12 repeticiones x 45 kg", "1 repetición x 100 kg", "8 reps x 60 kg"
REPS_PATTERN = re.compile(
    r'^(\d+)\s*'
    r'(?:repeticiones|repetici[oó]n|reps?)\.?'
    r'\s*[xX×]\s*(.+)$',
    re.IGNORECASE,
)


def decode_set(set_text: str) -> DecodedSet:
    """
    Decode one set entry.

    The load text after the "x" is kept verbatim (trimmed); it can be
    "45 kg", "10-12 kg" or a bodyweight marker like "PC".
    Text matching neither notation comes back as an UnparsedSet.
    """
    text = set_text.strip()

    time_match = TIME_PATTERN.match(text)
    if time_match:
        return TimeBasedSet(
            duration_text=time_match.group(1),
            weight_text=time_match.group(2).strip(),
        )

    reps_match = REPS_PATTERN.match(text)
    if reps_match:
        return RepBasedSet(
            reps=int(reps_match.group(1)),
            weight_text=reps_match.group(2).strip(),
        )

    return UnparsedSet(raw=set_text)
