"""Maps a parsed Motra session onto one date of the canonical workout log."""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from workout_log_api.parsers.models import (
    DaySessions,
    ExerciseSets,
    LoggedSet,
    NormalizedSession,
    ParsedSession,
    SetKind,
    WorkoutLog,
    WorkoutMetadata,
)
from workout_log_api.services.date_resolver import is_canonical_date

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def extract_metadata(parsed: ParsedSession) -> WorkoutMetadata:
    """Summary fields of a parsed session."""
    return WorkoutMetadata(
        title=parsed.title,
        raw_date_text=parsed.raw_date_text,
        duration=parsed.duration,
        volume_text=parsed.volume_text,
        calories_text=parsed.calories_text,
        exercise_count=len(parsed.exercises),
        total_sets=parsed.total_sets,
    )


class SessionNormalizer:
    """Builds the per-date, per-exercise, per-set log entries of a session."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _utc_now

    def normalize(self, parsed: ParsedSession, target_date: str) -> NormalizedSession:
        """
        Normalize a parsed session under target_date.

        The date written in the session text is ignored; choosing the date
        is up to the caller.

        Raises:
            ValueError: If target_date is not a YYYY-MM-DD date key
        """
        if not is_canonical_date(target_date):
            raise ValueError(f"Invalid target date: {target_date!r}. Expected YYYY-MM-DD")

        recorded_at = self._clock().isoformat()
        exercises: DaySessions = {}

        for exercise in parsed.exercises:
            exercise_sets: ExerciseSets = {}
            for index, parsed_set in enumerate(exercise.sets, start=1):
                set_number = parsed_set.set_number if parsed_set.set_number is not None else index
                if set_number in exercise_sets:
                    logger.debug(
                        "Duplicate set %d in %r, keeping the later one", set_number, exercise.name
                    )
                exercise_sets[set_number] = self._to_logged_set(parsed_set, recorded_at)
            exercises[exercise.name] = exercise_sets

        return NormalizedSession(
            date=target_date,
            exercises=exercises,
            metadata=extract_metadata(parsed),
        )

    @staticmethod
    def _to_logged_set(parsed_set, recorded_at: str) -> LoggedSet:
        if parsed_set.kind == "reps":
            return LoggedSet(
                weight_text=parsed_set.weight_text,
                reps_or_duration=parsed_set.reps,
                recorded_at=recorded_at,
                kind=SetKind.REPS,
            )
        if parsed_set.kind == "time":
            return LoggedSet(
                weight_text=parsed_set.weight_text,
                reps_or_duration=parsed_set.duration_text,
                recorded_at=recorded_at,
                kind=SetKind.TIME,
            )
        return LoggedSet(
            recorded_at=recorded_at,
            kind=SetKind.UNPARSED,
            raw=parsed_set.raw,
        )


def merge_into_log(log: WorkoutLog, normalized: NormalizedSession) -> WorkoutLog:
    """
    Return a new log with the session merged into its date.

    Only the exercises named in the session are replaced; other exercises
    on that date and every other date are kept.
    """
    merged: WorkoutLog = dict(log)
    day: DaySessions = dict(merged.get(normalized.date, {}))
    day.update(normalized.exercises)
    merged[normalized.date] = day
    return merged


def merge_metadata(
    metadata: Dict[str, WorkoutMetadata], normalized: NormalizedSession
) -> Dict[str, WorkoutMetadata]:
    merged = dict(metadata)
    merged[normalized.date] = normalized.metadata
    return merged
