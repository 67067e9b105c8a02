"""
Import flow for pasted Motra sessions.

validate -> parse -> pick date -> normalize -> merge into the stored log.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from workout_log_api.parsers.models import ParsedSession, WorkoutMetadata
from workout_log_api.parsers.motra_parser import MotraParser
from workout_log_api.parsers.validator import looks_like_valid_session
from workout_log_api.services.date_resolver import DateTextResolver
from workout_log_api.services.session_normalizer import SessionNormalizer, merge_into_log
from workout_log_api.services.storage import StorageError, WorkoutRepository

logger = logging.getLogger(__name__)


class RejectedInputError(RuntimeError):
    """Raised when pasted text is not an importable Motra session."""


class ImportPreview(BaseModel):
    """What an import would write, shown before the user confirms the date"""
    session: ParsedSession
    detected_date: Optional[str] = Field(default=None, description="Date found in the text")
    suggested_date: str = Field(..., description="Detected date, or today when none was found")
    suggested_date_display: str


class ImportResult(BaseModel):
    """Outcome of a committed import"""
    date: str
    exercises: List[str]
    exercise_count: int
    total_sets: int
    metadata: WorkoutMetadata
    warnings: List[str] = Field(default_factory=list)


class ImportService:
    """Runs the import flow against a WorkoutRepository."""

    def __init__(
        self,
        repository: WorkoutRepository,
        resolver: Optional[DateTextResolver] = None,
        normalizer: Optional[SessionNormalizer] = None,
        parser: Optional[MotraParser] = None,
    ):
        self.repository = repository
        self.resolver = resolver or DateTextResolver()
        self.normalizer = normalizer or SessionNormalizer()
        self.parser = parser or MotraParser()

    def preview(self, text: str) -> ImportPreview:
        """
        Parse pasted text without saving anything.

        Raises:
            EmptyInputError: If the text is blank
            RejectedInputError: If the text is not a Motra session or has no exercises
        """
        # Blank text gets the parser's EmptyInputError rather than a rejection
        if text and text.strip() and not looks_like_valid_session(text):
            raise RejectedInputError(
                "The text does not look like a Motra workout. Copy the whole shared workout."
            )

        session = self.parser.parse(text)
        if not session.exercises:
            raise RejectedInputError("No exercises found. Check the format of the text.")

        detected = self.resolver.parse_embedded_date(session.raw_date_text)
        suggested = detected or self.resolver.resolve_today_key()
        if detected is None:
            logger.info("No date in session text, suggesting today (%s)", suggested)

        return ImportPreview(
            session=session,
            detected_date=detected,
            suggested_date=suggested,
            suggested_date_display=self.resolver.display_full(suggested),
        )

    def commit(self, text: str, target_date: Optional[str] = None) -> ImportResult:
        """
        Import pasted text into the stored log.

        Args:
            text: Raw Motra session text
            target_date: Date confirmed by the user; defaults to the suggested date

        Raises:
            EmptyInputError, RejectedInputError: If the text cannot be imported
            ValueError: If target_date is not YYYY-MM-DD
            StorageError: If the log could not be saved
        """
        preview = self.preview(text)
        date_key = target_date or preview.suggested_date

        normalized = self.normalizer.normalize(preview.session, date_key)

        logs = merge_into_log(self.repository.get_workout_logs(), normalized)
        if not self.repository.save_workout_logs(logs):
            raise StorageError("Could not save workout logs")
        if not self.repository.save_workout_metadata(date_key, normalized.metadata):
            raise StorageError("Could not save workout metadata")

        logger.info(
            "Imported %d exercises (%d sets) into %s",
            normalized.metadata.exercise_count,
            normalized.metadata.total_sets,
            date_key,
        )
        return ImportResult(
            date=date_key,
            exercises=list(normalized.exercises.keys()),
            exercise_count=normalized.metadata.exercise_count,
            total_sets=normalized.metadata.total_sets,
            metadata=normalized.metadata,
            warnings=preview.session.warnings,
        )
