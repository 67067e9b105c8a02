"""Motra session text parsing."""
from .models import (
    ParsedExercise,
    ParsedSession,
    RepBasedSet,
    SetKind,
    TimeBasedSet,
    UnparsedSet,
)
from .motra_parser import EmptyInputError, MotraParser, ParseError, parse_session
from .set_notation import decode_set
from .validator import looks_like_valid_session

__all__ = [
    "EmptyInputError",
    "MotraParser",
    "ParseError",
    "ParsedExercise",
    "ParsedSession",
    "RepBasedSet",
    "SetKind",
    "TimeBasedSet",
    "UnparsedSet",
    "decode_set",
    "looks_like_valid_session",
    "parse_session",
]
