# rep_coach/backend/models.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class LandmarkIn(BaseModel):
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class RepStateModel(BaseModel):
    count: int = Field(0, ge=0)
    phase: Optional[str] = None           # None -> exercise's start phase
    last_updated: Optional[float] = None
    last_known_phase: Optional[str] = None


class CountRepRequest(BaseModel):
    exercise: str                          # tracking key, e.g. "squat"
    landmarks: List[LandmarkIn] = []
    state: Optional[RepStateModel] = None  # None -> exercise's starting state


class FeedbackItem(BaseModel):
    type: str
    message: str
    severity: str


class CountRepResponse(BaseModel):
    count: int
    phase: str
    feedback: List[FeedbackItem]
    form_score: int
    state: RepStateModel


class ExerciseResultIn(BaseModel):
    exercise: str
    target_count: int = Field(..., ge=0)
    actual_count: int = Field(..., ge=0)
    form_score: int = Field(..., ge=0, le=100)
    success: bool
    elapsed_seconds: float = Field(0.0, ge=0)


class WorkoutResultIn(BaseModel):
    workout_id: str
    workout_name: str
    type: str
    duration: int = Field(..., ge=0)
    elapsed_seconds: float = Field(0.0, ge=0)    # measured active time
    date: datetime
    exercises: List[ExerciseResultIn]


class ExerciseRecord(ExerciseResultIn):
    tracking_key: str


class WorkoutRecord(BaseModel):
    id: int
    workout_id: str
    name: str
    type: str
    duration: int
    elapsed_seconds: float = 0.0
    date: datetime
    exercises: List[ExerciseRecord]


class SaveWorkoutResponse(BaseModel):
    success: bool
    workout: WorkoutRecord


class WorkoutList(BaseModel):
    workouts: List[WorkoutRecord]
