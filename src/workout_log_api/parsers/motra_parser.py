"""
Motra Parser

Parses the text Motra produces when a workout is shared:

    Mi entrenamiento:
    Empuje fuerte
    11 feb 2026, 18:36
    DURACIÓN: 1h 05min
    Volumen: 5.430 kg
    Calorías: 410 kcal
    Ejercicios: 5
    Press banca
    1: 12 repeticiones x 45 kg
    2: 10 repeticiones x 50 kg
    Plancha
    1: 01:01 x PC
    Rastreado con Motra
    https://motra.com

The header (title, date, duration, volume, calories) ends at the
"Ejercicios:" line. Each body line is either a set ("<N>: ...") of the
current exercise or the name of a new exercise.
"""

import re
import logging
from typing import List, Optional

from .models import ParsedExercise, ParsedSession
from .set_notation import decode_set

logger = logging.getLogger(__name__)


class ParseError(RuntimeError):
    """Raised when session text cannot be parsed at all."""


class EmptyInputError(ParseError):
    """Raised when the pasted text has no non-blank line."""


class MotraParser:
    """Parser for shared Motra session text"""

    # Header patterns
    TITLE_MARKER_PATTERN = re.compile(r'^Mi entrenamiento:?$')
    DATE_PATTERN = re.compile(r'\b\d{1,2}\s+[^\W\d_]{3}\.?\s+\d{4}\b')  # "11 feb 2026, 18:36"
    DURATION_PATTERN = re.compile(r'DURACI[ÓO]N\s*:?\s*(.*)$', re.IGNORECASE)
    VOLUME_PATTERN = re.compile(r'Volumen:\s*(.*)$')
    CALORIES_PATTERN = re.compile(r'Calor[íi]as:\s*(.*)$')
    EXERCISES_PATTERN = re.compile(r'Ejercicios:')

    # Body patterns
    SET_LINE_PATTERN = re.compile(r'^(\d+):\s+(.+)$')  # "1: 12 repeticiones x 45 kg"
    URL_PATTERN = re.compile(r'^(?:https?://|www\.)', re.IGNORECASE)
    FOOTER_MARKERS = ("Rastreado con", "motra.com")

    def parse(self, text: str) -> ParsedSession:
        """
        Parse a full pasted session.

        Args:
            text: Raw text as copied from Motra

        Returns:
            ParsedSession, possibly without exercises

        Raises:
            EmptyInputError: If the text has no content
        """
        lines = [line.strip() for line in (text or "").splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            raise EmptyInputError("No workout text to parse")

        warnings: List[str] = []
        session = ParsedSession()

        body_start = self._parse_header(lines, session)
        session.exercises = self._parse_body(lines[body_start:], warnings)
        session.warnings = warnings

        logger.info(
            "Parsed Motra session %r: %d exercises, %d sets",
            session.title,
            len(session.exercises),
            session.total_sets,
        )
        return session

    def _parse_header(self, lines: List[str], session: ParsedSession) -> int:
        """Fill header fields and return the index of the first body line."""
        has_exercises_marker = any(self.EXERCISES_PATTERN.search(line) for line in lines)

        i = 0
        while i < len(lines):
            line = lines[i]

            if self.EXERCISES_PATTERN.search(line):
                return i + 1

            if self.TITLE_MARKER_PATTERN.match(line):
                next_line = lines[i + 1] if i + 1 < len(lines) else None
                if next_line is not None and not self._is_header_line(next_line):
                    session.title = next_line
                    i += 2
                else:
                    i += 1
                continue

            if self._classify_header_line(line, session):
                i += 1
                continue

            # Without an "Ejercicios:" line the body starts at the first
            # line that is not a header field.
            if not has_exercises_marker:
                return i

            logger.debug("Ignoring unrecognised header line: %r", line)
            i += 1

        return len(lines)

    def _classify_header_line(self, line: str, session: ParsedSession) -> bool:
        """Store a header field if the line is one. Returns True on match."""
        if self.DATE_PATTERN.search(line):
            if session.raw_date_text is None:
                session.raw_date_text = line
            return True

        duration_match = self.DURATION_PATTERN.search(line)
        if duration_match:
            session.duration = duration_match.group(1).strip() or None
            return True

        volume_match = self.VOLUME_PATTERN.search(line)
        if volume_match:
            session.volume_text = volume_match.group(1).strip() or None
            return True

        calories_match = self.CALORIES_PATTERN.search(line)
        if calories_match:
            session.calories_text = calories_match.group(1).strip() or None
            return True

        return False

    def _is_header_line(self, line: str) -> bool:
        return bool(
            self.TITLE_MARKER_PATTERN.match(line)
            or self.EXERCISES_PATTERN.search(line)
            or self.DATE_PATTERN.search(line)
            or self.DURATION_PATTERN.search(line)
            or self.VOLUME_PATTERN.search(line)
            or self.CALORIES_PATTERN.search(line)
        )

    def _parse_body(self, lines: List[str], warnings: List[str]) -> List[ParsedExercise]:
        exercises: List[ParsedExercise] = []
        current: Optional[ParsedExercise] = None

        for line in lines:
            if self._is_footer(line):
                continue

            set_match = self.SET_LINE_PATTERN.match(line)
            if set_match:
                if current is None:
                    self._add_warning(warnings, f"Set line before any exercise ignored: {line}")
                    continue

                decoded = decode_set(set_match.group(2))
                current.sets.append(
                    decoded.model_copy(update={"set_number": int(set_match.group(1))})
                )
                if decoded.kind == "unparsed":
                    self._add_warning(
                        warnings, f"Unrecognised set notation in {current.name!r}: {line}"
                    )
                continue

            self._flush_exercise(current, exercises)
            current = ParsedExercise(name=line)

        # Last exercise has no following name line to close it
        self._flush_exercise(current, exercises)
        return exercises

    def _flush_exercise(self, exercise: Optional[ParsedExercise], exercises: List[ParsedExercise]):
        if exercise is None:
            return
        if exercise.sets:
            exercises.append(exercise)
        else:
            logger.debug("Discarding line without sets: %r", exercise.name)

    def _is_footer(self, line: str) -> bool:
        if self.URL_PATTERN.match(line):
            return True
        return any(marker in line for marker in self.FOOTER_MARKERS)

    def _add_warning(self, warnings: List[str], warning: str):
        warnings.append(warning)
        logger.warning(f"Parser warning: {warning}")


def parse_session(text: str) -> ParsedSession:
    """Parse session text with a default MotraParser."""
    return MotraParser().parse(text)
