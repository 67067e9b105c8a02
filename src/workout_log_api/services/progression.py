"""
Progression analytics over the canonical workout log.

Each date an exercise was trained is represented by its best set, the
one with the largest weight x reps product. Estimated one-rep max uses
the Epley formula.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Tuple

from workout_log_api.parsers.models import (
    ExerciseHistoryEntry,
    ExerciseSets,
    ProgressionSummary,
    SetKind,
    WorkoutLog,
)
from workout_log_api.utils import plain_weight, to_int

logger = logging.getLogger(__name__)

MIN_HISTORY_ENTRIES = 2


def estimate_1rm(weight: float, reps: int) -> float:
    """Epley estimate of the one-rep max."""
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def has_sufficient_history(entries: List[ExerciseHistoryEntry]) -> bool:
    """Charts and progress comparisons need at least two sessions."""
    return len(entries) >= MIN_HISTORY_ENTRIES


def all_exercises(log: WorkoutLog) -> List[str]:
    """Sorted unique exercise names in the log."""
    names = set()
    for day in log.values():
        names.update(day.keys())
    return sorted(names)


def exercise_frequency(log: WorkoutLog) -> Dict[str, int]:
    """Number of dates each exercise appears on."""
    counts: Counter = Counter()
    for day in log.values():
        counts.update(day.keys())
    return dict(counts)


class ProgressionAnalyzer:
    """Builds per-exercise history from the workout log"""

    def history(self, log: WorkoutLog, exercise_name: str) -> List[ExerciseHistoryEntry]:
        """
        Best set per date for one exercise, oldest first.

        Only sets with numeric reps and a plain numeric load count. Dates
        where the exercise has no such set ("PC", ranges, timed sets) are
        left out instead of being reported as zero.
        """
        entries: List[ExerciseHistoryEntry] = []

        for date_key, day in log.items():
            sets = day.get(exercise_name)
            if not sets:
                continue

            candidates = self._numeric_sets(sets)
            if not candidates:
                logger.debug("No numeric sets for %r on %s", exercise_name, date_key)
                continue

            best_weight, best_reps = candidates[0]
            best_score = best_weight * best_reps
            for weight, reps in candidates[1:]:
                score = weight * reps
                if score > best_score:
                    best_weight, best_reps, best_score = weight, reps, score

            entries.append(
                ExerciseHistoryEntry(
                    date=date_key,
                    max_weight=best_weight,
                    reps_at_max=best_reps,
                    volume=best_score,
                    estimated_1rm=estimate_1rm(best_weight, best_reps),
                )
            )

        # YYYY-MM-DD keys sort chronologically as strings
        entries.sort(key=lambda entry: entry.date)
        return entries

    def summarize(self, log: WorkoutLog, exercise_name: str) -> Optional[ProgressionSummary]:
        """First vs latest session, or None without enough history."""
        entries = self.history(log, exercise_name)
        if not has_sufficient_history(entries):
            return None

        first, last = entries[0], entries[-1]
        return ProgressionSummary(
            exercise=exercise_name,
            sessions=len(entries),
            start_weight=first.max_weight,
            current_weight=last.max_weight,
            progress=last.max_weight - first.max_weight,
            current_1rm=last.estimated_1rm,
            max_volume=max(entry.volume for entry in entries),
            rm_progress=last.estimated_1rm - first.estimated_1rm,
        )

    @staticmethod
    def _numeric_sets(sets: ExerciseSets) -> List[Tuple[float, int]]:
        """(weight, reps) of the usable sets, in set-number order."""
        candidates = []
        for _, logged in sorted(sets.items()):
            if logged.kind != SetKind.REPS:
                continue
            reps = to_int(logged.reps_or_duration)
            weight = plain_weight(logged.weight_text)
            if reps is None or weight is None:
                continue
            candidates.append((weight, reps))
        return candidates
