"""
Parser Models

Pydantic models for the Motra session text, the canonical workout log
and the analytics derived from it.
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class SetKind(str, Enum):
    """How a set was recorded"""
    REPS = "reps"          # "12 repeticiones x 45 kg"
    TIME = "time"          # "01:01 x PC"
    UNPARSED = "unparsed"  # neither notation matched


class RepBasedSet(BaseModel):
    """Set recorded as repetitions with a load"""
    kind: Literal["reps"] = "reps"
    set_number: Optional[int] = Field(default=None, description="Set number as written in the source")
    reps: int = Field(..., ge=0)
    weight_text: str = Field(..., description="Load as written: '45 kg', '10-12 kg', 'PC'")


class TimeBasedSet(BaseModel):
    """Set recorded as a duration with a load"""
    kind: Literal["time"] = "time"
    set_number: Optional[int] = None
    duration_text: str = Field(..., description="Duration as written, 'MM:SS'")
    weight_text: str


class UnparsedSet(BaseModel):
    """Set line that matched no known notation, kept verbatim"""
    kind: Literal["unparsed"] = "unparsed"
    set_number: Optional[int] = None
    raw: str


DecodedSet = Annotated[
    Union[RepBasedSet, TimeBasedSet, UnparsedSet],
    Field(discriminator="kind"),
]


class ParsedExercise(BaseModel):
    """Exercise block from the session body"""
    name: str = Field(..., description="Exercise name exactly as written")
    sets: List[DecodedSet] = Field(default_factory=list)


class ParsedSession(BaseModel):
    """Output of the session text parser"""
    title: Optional[str] = None
    raw_date_text: Optional[str] = Field(default=None, description="e.g. '11 feb 2026, 18:36'")
    duration: Optional[str] = None
    volume_text: Optional[str] = None
    calories_text: Optional[str] = None
    exercises: List[ParsedExercise] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(len(exercise.sets) for exercise in self.exercises)


class LoggedSet(BaseModel):
    """One set in the canonical workout log"""
    weight_text: Optional[str] = None
    reps_or_duration: Union[int, str, None] = Field(
        default=None,
        description="Reps for rep sets, 'MM:SS' for time sets",
    )
    recorded_at: str = Field(..., description="ISO timestamp of the import")
    kind: SetKind = SetKind.REPS
    raw: Optional[str] = Field(default=None, description="Original text of unparsed sets")


# date key -> exercise name -> set number -> set
ExerciseSets = Dict[int, LoggedSet]
DaySessions = Dict[str, ExerciseSets]
WorkoutLog = Dict[str, DaySessions]


class WorkoutMetadata(BaseModel):
    """Summary of an imported session, cached per date"""
    title: Optional[str] = None
    raw_date_text: Optional[str] = None
    duration: Optional[str] = None
    volume_text: Optional[str] = None
    calories_text: Optional[str] = None
    exercise_count: int = 0
    total_sets: int = 0


class NormalizedSession(BaseModel):
    """A parsed session mapped onto one date of the canonical log"""
    date: str
    exercises: DaySessions = Field(default_factory=dict)
    metadata: WorkoutMetadata


class ExerciseHistoryEntry(BaseModel):
    """Best set of one exercise on one date"""
    date: str
    max_weight: float
    reps_at_max: int
    volume: float
    estimated_1rm: float


class ProgressionSummary(BaseModel):
    """First-to-last comparison of an exercise history"""
    exercise: str
    sessions: int
    start_weight: float
    current_weight: float
    progress: float
    current_1rm: float
    max_volume: float = Field(..., description="Largest best-set volume across the history")
    rm_progress: float = Field(..., description="Change in estimated 1RM, first to latest")
