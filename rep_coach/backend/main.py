# rep_coach/backend/main.py
import logging
import re
from dataclasses import asdict
from datetime import datetime, timezone
from threading import Lock
from typing import List

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from rep_coach import config
from rep_coach.backend.models import (
    CountRepRequest,
    CountRepResponse,
    ExerciseRecord,
    FeedbackItem,
    RepStateModel,
    SaveWorkoutResponse,
    WorkoutList,
    WorkoutRecord,
    WorkoutResultIn,
)
from rep_coach.client.pose_utils import Landmark
from rep_coach.client.rep_logic import RepCountState, calculate_form_score, count_reps
from rep_coach.client.workouts import WORKOUT_LEVELS, get_workouts

logger = logging.getLogger(__name__)


class WorkoutStore:
    """In-process workout history. Records are never modified once saved."""

    def __init__(self):
        self._lock = Lock()
        self._records: List[WorkoutRecord] = []

    def add(self, result: WorkoutResultIn) -> WorkoutRecord:
        with self._lock:
            record = WorkoutRecord(
                id=len(self._records) + 1,
                workout_id=result.workout_id,
                name=result.workout_name,
                type=result.type,
                duration=result.duration,
                elapsed_seconds=result.elapsed_seconds,
                date=_as_utc(result.date),
                exercises=[
                    ExerciseRecord(**item.model_dump(), tracking_key=tracking_key_for(item.exercise))
                    for item in result.exercises
                ],
            )
            self._records.append(record)
        return record

    def newest_first(self) -> List[WorkoutRecord]:
        with self._lock:
            return sorted(self._records, key=lambda r: r.date, reverse=True)

    def clear(self):
        with self._lock:
            self._records.clear()

    def __len__(self):
        with self._lock:
            return len(self._records)


def tracking_key_for(exercise_name: str) -> str:
    return re.sub(r"\s+", "", exercise_name.lower())


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are taken as UTC so history stays sortable
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


store = WorkoutStore()

app = FastAPI(title="Rep Coach Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # for demo
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_check():
    return {"status": "ok", "workouts": len(store)}


@app.post("/count_rep", response_model=CountRepResponse)
def count_rep(req: CountRepRequest):
    """Stateless: the caller sends back the returned state with the next frame."""
    frame = [Landmark(**lm.model_dump()) for lm in req.landmarks]
    prev_state = RepCountState.from_dict(req.state.model_dump()) if req.state else None

    update = count_reps(req.exercise, frame, prev_state)

    return CountRepResponse(
        count=update.count,
        phase=update.phase,
        feedback=[FeedbackItem(**item.to_dict()) for item in update.feedback],
        form_score=calculate_form_score(update.feedback),
        state=RepStateModel(**update.state.to_dict()),
    )


@app.post("/workouts", response_model=SaveWorkoutResponse)
def save_workout(result: WorkoutResultIn):
    record = store.add(result)
    logger.info("Saved workout %s (%d sets)", record.workout_id, len(record.exercises))
    return SaveWorkoutResponse(success=True, workout=record)


@app.get("/workouts", response_model=WorkoutList)
def list_workouts():
    return WorkoutList(workouts=store.newest_first())


@app.get("/catalog/{level}")
def workout_catalog(level: str):
    if level not in WORKOUT_LEVELS:
        raise HTTPException(status_code=404, detail=f"Unknown level {level!r}")
    return {"level": level, "workouts": [asdict(w) for w in get_workouts(level)]}


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=config.BACKEND_HOST, port=config.BACKEND_PORT)


if __name__ == "__main__":
    main()
