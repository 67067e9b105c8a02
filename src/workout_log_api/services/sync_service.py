"""
Remote mirror of the workout log in a Supabase `workouts` table.

Table: workouts
- user_id: text
- date: date
- exercises: jsonb (exercise -> set number -> set)
- metadata: jsonb
- updated_at: timestamptz
- UNIQUE(user_id, date)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, TypeAdapter, ValidationError

from workout_log_api.config import settings
from workout_log_api.parsers.models import DaySessions, WorkoutLog, WorkoutMetadata

logger = logging.getLogger(__name__)

_DAY_ADAPTER = TypeAdapter(DaySessions)


class SyncError(RuntimeError):
    """Raised when the remote mirror cannot be reached or read."""


def get_supabase_client() -> Optional[Any]:
    """Get Supabase client instance, or None when sync is not configured."""
    try:
        from supabase import create_client
    except ImportError:
        logger.warning("Supabase library not installed. Remote sync will be disabled.")
        return None

    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.info("Supabase credentials not configured. Remote sync is disabled.")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


class SyncResult(BaseModel):
    """Per-date upsert counts"""
    success: int = 0
    errors: int = 0
    skipped: int = 0


class WorkoutSyncService:
    """Pushes and pulls the workout log for one user."""

    TABLE_NAME = "workouts"

    def __init__(self, client: Any, user_id: str):
        self.client = client
        self.user_id = user_id

    def push(
        self,
        logs: WorkoutLog,
        metadata: Dict[str, WorkoutMetadata],
    ) -> SyncResult:
        """Upsert every non-empty date. A failing date does not stop the others."""
        result = SyncResult()

        for date_key, day in logs.items():
            if not day:
                result.skipped += 1
                continue

            day_metadata = metadata.get(date_key)
            row = {
                "user_id": self.user_id,
                "date": date_key,
                "exercises": _DAY_ADAPTER.dump_python(day, mode="json"),
                "metadata": day_metadata.model_dump(mode="json") if day_metadata else {},
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            try:
                self.client.table(self.TABLE_NAME) \
                    .upsert(row, on_conflict="user_id,date") \
                    .execute()
                result.success += 1
            except Exception as e:
                logger.error(f"Error syncing workout for {date_key}: {e}")
                result.errors += 1

        logger.info(
            "Synced workouts for %s: %d ok, %d failed, %d empty",
            self.user_id,
            result.success,
            result.errors,
            result.skipped,
        )
        return result

    def pull(self) -> Tuple[WorkoutLog, Dict[str, WorkoutMetadata]]:
        """
        Load the mirrored log.

        Raises:
            SyncError: If the query fails
        """
        try:
            response = self.client.table(self.TABLE_NAME) \
                .select("*") \
                .eq("user_id", self.user_id) \
                .order("date", desc=True) \
                .execute()
        except Exception as e:
            logger.error(f"Error loading workouts for {self.user_id}: {e}")
            raise SyncError(f"Could not load workouts: {e}") from e

        logs: WorkoutLog = {}
        metadata: Dict[str, WorkoutMetadata] = {}
        for row in response.data or []:
            date_key = str(row["date"])
            try:
                logs[date_key] = _DAY_ADAPTER.validate_python(row.get("exercises") or {})
                if row.get("metadata"):
                    metadata[date_key] = WorkoutMetadata.model_validate(row["metadata"])
            except ValidationError as e:
                logger.warning(f"Skipping malformed remote workout for {date_key}: {e}")

        return logs, metadata
