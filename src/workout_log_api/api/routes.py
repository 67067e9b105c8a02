"""
API routes for the workout log.

Import of shared Motra sessions, log and progression queries, the AI
coach chat and the optional Supabase mirror.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field, ValidationError

from workout_log_api.config import settings
from workout_log_api.parsers.models import ExerciseHistoryEntry, WorkoutLog, WorkoutMetadata
from workout_log_api.parsers.motra_parser import EmptyInputError
from workout_log_api.parsers.validator import looks_like_valid_session
from workout_log_api.services.coach_service import (
    CoachError,
    CoachNotConfiguredError,
    CoachService,
)
from workout_log_api.services.date_resolver import DateTextResolver
from workout_log_api.services.import_service import (
    ImportPreview,
    ImportResult,
    ImportService,
    RejectedInputError,
)
from workout_log_api.services.progression import (
    ProgressionAnalyzer,
    all_exercises,
    has_sufficient_history,
)
from workout_log_api.services.storage import JsonFileStore, StorageError, WorkoutRepository
from workout_log_api.services.sync_service import (
    SyncError,
    SyncResult,
    WorkoutSyncService,
    get_supabase_client,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_repository() -> WorkoutRepository:
    return WorkoutRepository(JsonFileStore(settings.STORAGE_PATH))


def get_date_resolver() -> DateTextResolver:
    return DateTextResolver(tz_name=settings.LOCAL_TIMEZONE)


def get_sync_service() -> Optional[WorkoutSyncService]:
    client = get_supabase_client()
    if client is None:
        return None
    return WorkoutSyncService(client, settings.SYNC_USER_ID)


def get_coach_service(
    resolver: DateTextResolver = Depends(get_date_resolver),
) -> CoachService:
    return CoachService(resolver=resolver)


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------


class ImportTextRequest(BaseModel):
    """Request model for POST /import/validate and /import/preview"""
    text: str = Field(..., max_length=50000, description="Text shared from Motra")


class ImportCommitRequest(ImportTextRequest):
    """Request model for POST /import"""
    target_date: Optional[str] = Field(
        default=None,
        pattern=r'^\d{4}-\d{2}-\d{2}$',
        description="Date confirmed by the user; defaults to the date in the text or today",
    )


class ValidateResponse(BaseModel):
    valid: bool


class WorkoutsResponse(BaseModel):
    logs: WorkoutLog
    metadata: Dict[str, WorkoutMetadata]


class ExercisesResponse(BaseModel):
    exercises: List[str]
    count: int


class HistoryResponse(BaseModel):
    """Response model for GET /exercises/{name}/history"""
    exercise: str
    entries: List[ExerciseHistoryEntry]
    sufficient_data: bool = Field(..., description="False until there are two sessions to compare")


class CoachChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    provider: Optional[str] = Field(default=None, description="'anthropic' or 'openai'")


class CoachChatResponse(BaseModel):
    reply: str


class PullResponse(BaseModel):
    dates: int
    logs: WorkoutLog
    metadata: Dict[str, WorkoutMetadata]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


@router.post("/import/validate", response_model=ValidateResponse)
def validate_import(request: ImportTextRequest):
    """Quick check that the text looks like a Motra export."""
    return ValidateResponse(valid=looks_like_valid_session(request.text))


@router.post("/import/preview", response_model=ImportPreview)
def preview_import(
    request: ImportTextRequest,
    repository: WorkoutRepository = Depends(get_repository),
    resolver: DateTextResolver = Depends(get_date_resolver),
):
    """Parse the text and suggest a date without saving."""
    service = ImportService(repository, resolver=resolver)
    try:
        return service.preview(request.text)
    except (EmptyInputError, RejectedInputError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/import", response_model=ImportResult)
def commit_import(
    request: ImportCommitRequest,
    repository: WorkoutRepository = Depends(get_repository),
    resolver: DateTextResolver = Depends(get_date_resolver),
):
    """Import the text into the log under the confirmed date."""
    service = ImportService(repository, resolver=resolver)
    try:
        return service.commit(request.text, request.target_date)
    except (EmptyInputError, RejectedInputError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.error(f"Import could not be saved: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# Log and progression
# ---------------------------------------------------------------------------


@router.get("/workouts", response_model=WorkoutsResponse)
def get_workouts(repository: WorkoutRepository = Depends(get_repository)):
    return WorkoutsResponse(
        logs=repository.get_workout_logs(),
        metadata=repository.get_workout_metadata(),
    )


@router.get("/exercises", response_model=ExercisesResponse)
def get_exercises(repository: WorkoutRepository = Depends(get_repository)):
    exercises = all_exercises(repository.get_workout_logs())
    return ExercisesResponse(exercises=exercises, count=len(exercises))


@router.get("/exercises/{exercise_name}/history", response_model=HistoryResponse)
def get_exercise_history(
    exercise_name: str,
    repository: WorkoutRepository = Depends(get_repository),
):
    """Best set per session for charts. Unknown exercises give an empty history."""
    entries = ProgressionAnalyzer().history(repository.get_workout_logs(), exercise_name)
    return HistoryResponse(
        exercise=exercise_name,
        entries=entries,
        sufficient_data=has_sufficient_history(entries),
    )


# ---------------------------------------------------------------------------
# Coach
# ---------------------------------------------------------------------------


@router.post("/coach/chat", response_model=CoachChatResponse)
def coach_chat(
    request: CoachChatRequest,
    repository: WorkoutRepository = Depends(get_repository),
    coach: CoachService = Depends(get_coach_service),
):
    try:
        reply = coach.ask(
            request.message,
            repository.get_workout_logs(),
            repository.get_workout_metadata(),
            provider=request.provider,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CoachNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except CoachError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return CoachChatResponse(reply=reply)


# ---------------------------------------------------------------------------
# Remote mirror
# ---------------------------------------------------------------------------


def _require_sync(sync: Optional[WorkoutSyncService]) -> WorkoutSyncService:
    if sync is None:
        raise HTTPException(
            status_code=503,
            detail="Remote sync is not configured. Set SUPABASE_URL and SUPABASE_KEY.",
        )
    return sync


@router.post("/sync/push", response_model=SyncResult)
def sync_push(
    repository: WorkoutRepository = Depends(get_repository),
    sync: Optional[WorkoutSyncService] = Depends(get_sync_service),
):
    """Upload the local log to the remote mirror."""
    return _require_sync(sync).push(
        repository.get_workout_logs(),
        repository.get_workout_metadata(),
    )


@router.post("/sync/pull", response_model=PullResponse)
def sync_pull(
    repository: WorkoutRepository = Depends(get_repository),
    sync: Optional[WorkoutSyncService] = Depends(get_sync_service),
):
    """Replace local dates with their remote copies, keeping local-only dates."""
    try:
        remote_logs, remote_metadata = _require_sync(sync).pull()
    except SyncError as e:
        raise HTTPException(status_code=502, detail=str(e))

    logs = {**repository.get_workout_logs(), **remote_logs}
    metadata = {**repository.get_workout_metadata(), **remote_metadata}
    if not (repository.save_workout_logs(logs) and repository.save_all_workout_metadata(metadata)):
        raise HTTPException(status_code=500, detail="Could not save pulled workouts")

    return PullResponse(dates=len(remote_logs), logs=logs, metadata=metadata)


# ---------------------------------------------------------------------------
# Backup
# ---------------------------------------------------------------------------


@router.get("/data/export")
def export_data(
    repository: WorkoutRepository = Depends(get_repository),
    resolver: DateTextResolver = Depends(get_date_resolver),
):
    return repository.export_all_data(clock=resolver.now)


@router.post("/data/import")
def import_backup(
    data: Dict[str, Any] = Body(...),
    repository: WorkoutRepository = Depends(get_repository),
):
    """Restore a backup from GET /data/export."""
    try:
        ok = repository.import_data(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid backup: {e.error_count()} errors")
    if not ok:
        raise HTTPException(status_code=500, detail="Could not save imported data")
    return {"ok": True}
