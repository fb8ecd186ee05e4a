# rep_coach/client/session.py

import logging
import time
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from rep_coach.client.pose_utils import PoseFrame, is_valid_frame
from rep_coach.client.rep_logic import (
    UNKNOWN_PHASE,
    ExerciseKind,
    FormFeedback,
    RepCountState,
    RepUpdate,
    calculate_form_score,
    count_reps,
    initial_state,
    resolve_exercise_kind,
)
from rep_coach.client.workouts import Workout, WorkoutExercise

logger = logging.getLogger(__name__)

DEFAULT_COUNTDOWN_SECONDS = 3
DEFAULT_EXERCISE_REST_SECONDS = 60

STATUS_NO_POSE = "No pose detected, step into the frame"
STATUS_NOT_VISIBLE = "Body not clearly visible"
STATUS_NOT_TRACKED = "Automatic counting not available, use manual reps"
STATUS_TRACKING = "Tracking"
STATUS_TIME_UP = "Time's up! Great job!"


class Stage(str, Enum):
    SETUP = "setup"
    READY = "ready"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    RESTING = "resting"
    SUMMARY = "summary"
    ABORTED = "aborted"


@dataclass(frozen=True)
class ExerciseResult:
    exercise: str
    target_count: int
    actual_count: int
    form_score: int
    success: bool
    elapsed_seconds: float = 0.0      # active time measured through tick()


@dataclass(frozen=True)
class WorkoutResult:
    workout_id: str
    workout_name: str
    type: str
    duration: int                     # planned minutes
    date: datetime
    exercises: Tuple[ExerciseResult, ...]
    elapsed_seconds: float = 0.0      # sum of the sets' measured active time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workout_id": self.workout_id,
            "workout_name": self.workout_name,
            "type": self.type,
            "duration": self.duration,
            "elapsed_seconds": self.elapsed_seconds,
            "date": self.date.isoformat(),
            "exercises": [asdict(result) for result in self.exercises],
        }


WorkoutResultSink = Callable[[WorkoutResult], None]


class WorkoutSession:
    """
    Walks one workout: ready -> countdown -> (active <-> resting)* -> summary.

    The caller drives everything: pose frames go to process_frame() in capture
    order, wall-clock time goes to tick(), operator buttons map to the
    start/skip/manual-rep/reset/abort methods. Operator events that do not
    apply to the current stage are ignored and return False.

    With time_limit_seconds every set is time-boxed (the fitness test): it
    ends when the ticked active time runs out, however many reps were done,
    and the rep target only decides success.

    When the last set is done the WorkoutResult is handed to on_complete.
    A failure there is logged and kept in persist_error; the summary stays.
    """

    def __init__(
        self,
        workout: Workout,
        on_complete: Optional[WorkoutResultSink] = None,
        countdown_seconds: float = DEFAULT_COUNTDOWN_SECONDS,
        exercise_rest_seconds: float = DEFAULT_EXERCISE_REST_SECONDS,
        clock: Callable[[], float] = time.time,
        time_limit_seconds: Optional[float] = None,
    ):
        if countdown_seconds < 0:
            raise ValueError("countdown_seconds must be >= 0")
        if exercise_rest_seconds < 0:
            raise ValueError("exercise_rest_seconds must be >= 0")
        if time_limit_seconds is not None and time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be > 0")

        self.workout = workout
        self._on_complete = on_complete
        self._countdown_seconds = countdown_seconds
        self._exercise_rest_seconds = exercise_rest_seconds
        self._clock = clock
        self._time_limit = time_limit_seconds
        self._active_elapsed = 0.0

        self._stage = Stage.SETUP
        self._exercise_index = 0
        self._set_index = 0
        self._rep_state = RepCountState()
        self._feedback: List[FormFeedback] = []
        self._form_score = 100
        self._status = ""
        self._countdown_remaining = 0.0
        self._rest_remaining = 0.0
        self._results: List[ExerciseResult] = []
        self._workout_result: Optional[WorkoutResult] = None
        self.persist_error: Optional[Exception] = None

    # ----------------- Read-only views -----------------

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def exercise_index(self) -> int:
        return self._exercise_index

    @property
    def set_index(self) -> int:
        return self._set_index

    @property
    def current_exercise(self) -> WorkoutExercise:
        return self.workout.exercises[self._exercise_index]

    @property
    def exercise_kind(self) -> ExerciseKind:
        return resolve_exercise_kind(self.current_exercise.exercise.tracking_key)

    @property
    def target_count(self) -> int:
        return self.current_exercise.reps

    @property
    def rep_state(self) -> RepCountState:
        return self._rep_state

    @property
    def rep_count(self) -> int:
        return self._rep_state.count

    @property
    def feedback(self) -> List[FormFeedback]:
        return list(self._feedback)

    @property
    def form_score(self) -> int:
        return self._form_score

    @property
    def status(self) -> str:
        return self._status

    @property
    def countdown_remaining(self) -> float:
        return self._countdown_remaining

    @property
    def rest_remaining(self) -> float:
        return self._rest_remaining

    @property
    def time_limit_seconds(self) -> Optional[float]:
        return self._time_limit

    @property
    def active_elapsed(self) -> float:
        return self._active_elapsed

    @property
    def time_remaining(self) -> Optional[float]:
        """Seconds left in a time-boxed set; None when sets are not timed."""
        if self._time_limit is None:
            return None
        return max(0.0, self._time_limit - self._active_elapsed)

    @property
    def results(self) -> List[ExerciseResult]:
        return list(self._results)

    @property
    def workout_result(self) -> Optional[WorkoutResult]:
        return self._workout_result

    # ----------------- Operator events -----------------

    def start_workout(self) -> bool:
        if self._stage != Stage.SETUP:
            return False

        self._exercise_index = 0
        self._set_index = 0
        self._results = []
        self._reset_counter()
        self._stage = Stage.READY
        self._status = f"Ready: {self.current_exercise.exercise.name}"
        logger.info("Workout %s started (%d exercises)", self.workout.id, len(self.workout.exercises))
        return True

    def start_exercise(self) -> bool:
        if self._stage != Stage.READY:
            return False

        self._reset_counter()
        if self._countdown_seconds > 0:
            self._stage = Stage.COUNTDOWN
            self._countdown_remaining = float(self._countdown_seconds)
            self._status = "Get ready"
        else:
            self._enter_active()
        return True

    def skip_rest(self) -> bool:
        if self._stage != Stage.RESTING:
            return False

        logger.info("Rest skipped with %.0fs left", self._rest_remaining)
        self._enter_active()
        return True

    def add_manual_rep(self) -> bool:
        """Operator override: count one rep now and re-check the set target."""
        if self._stage != Stage.ACTIVE:
            return False

        self._rep_state = replace(
            self._rep_state,
            count=self._rep_state.count + 1,
            last_updated=self._clock(),
        )
        self._check_set_complete()
        return True

    def reset_set(self) -> bool:
        """Start the current set over from zero."""
        if self._stage not in (Stage.COUNTDOWN, Stage.ACTIVE):
            return False

        self._reset_counter()
        self._active_elapsed = 0.0
        logger.info("Set %d of %s reset", self._set_index + 1, self.current_exercise.exercise.name)
        return True

    def abort(self) -> bool:
        if self._stage in (Stage.SUMMARY, Stage.ABORTED):
            return False

        logger.info("Workout %s aborted in stage %s", self.workout.id, self._stage.value)
        self._stage = Stage.ABORTED
        self._feedback = []
        self._status = "Workout stopped"
        return True

    # ----------------- Clock and frames -----------------

    def tick(self, seconds: float = 1.0) -> Stage:
        """Advance countdown, rest and set timers by wall-clock seconds supplied by the caller."""
        seconds = max(0.0, seconds)

        if self._stage == Stage.ACTIVE:
            self._active_elapsed += seconds
            if self._time_limit is not None and self._active_elapsed >= self._time_limit:
                self._active_elapsed = float(self._time_limit)
                self._complete_set()
                if self._stage == Stage.SUMMARY:
                    self._status = STATUS_TIME_UP
        elif self._stage == Stage.COUNTDOWN:
            self._countdown_remaining = max(0.0, self._countdown_remaining - seconds)
            if self._countdown_remaining == 0:
                self._enter_active()
        elif self._stage == Stage.RESTING:
            self._rest_remaining = max(0.0, self._rest_remaining - seconds)
            if self._rest_remaining == 0:
                self._enter_active()

        return self._stage

    def process_frame(self, frame: Optional[PoseFrame]) -> Optional[RepUpdate]:
        """
        Feeds one pose frame to the current exercise's counter.
        Returns None outside the active stage.
        """
        if self._stage != Stage.ACTIVE:
            return None

        tracking_key = self.current_exercise.exercise.tracking_key
        if is_valid_frame(frame):
            update = count_reps(tracking_key, frame, self._rep_state)
            if self.exercise_kind == ExerciseKind.GENERIC:
                status = STATUS_NOT_TRACKED
            elif update.phase == UNKNOWN_PHASE:
                status = STATUS_NOT_VISIBLE
            else:
                status = STATUS_TRACKING
        else:
            update = count_reps(tracking_key, None, self._rep_state)
            status = STATUS_NO_POSE

        state = update.state
        if state.count > self._rep_state.count:
            state = replace(state, last_updated=self._clock())

        self._rep_state = state
        self._feedback = list(update.feedback)
        if update.feedback:
            self._form_score = calculate_form_score(update.feedback)
        self._status = status

        self._check_set_complete()
        return RepUpdate(state=state, feedback=list(update.feedback))

    # ----------------- Transitions -----------------

    def _reset_counter(self):
        self._rep_state = initial_state(self.current_exercise.exercise.tracking_key)
        self._feedback = []
        self._form_score = 100

    def _enter_active(self):
        self._stage = Stage.ACTIVE
        self._countdown_remaining = 0.0
        self._rest_remaining = 0.0
        self._active_elapsed = 0.0
        self._status = f"Go! {self.current_exercise.exercise.name}, set {self._set_index + 1}"

    def _begin_rest(self, seconds: float):
        if seconds <= 0:
            self._enter_active()
            return
        self._stage = Stage.RESTING
        self._rest_remaining = float(seconds)
        self._feedback = []
        self._status = "Rest"

    def _check_set_complete(self):
        # time-boxed sets end only when tick() runs the clock out
        if self._time_limit is not None:
            return
        if self._stage == Stage.ACTIVE and self._rep_state.count >= self.target_count:
            self._complete_set()

    def _complete_set(self):
        planned = self.current_exercise
        actual = self._rep_state.count
        result = ExerciseResult(
            exercise=planned.exercise.name,
            target_count=planned.reps,
            actual_count=actual,
            form_score=self._form_score,
            success=actual >= planned.reps,
            elapsed_seconds=self._active_elapsed,
        )
        self._results.append(result)
        logger.info(
            "%s set %d/%d done: %d/%d reps, form %d",
            planned.exercise.name, self._set_index + 1, planned.sets,
            actual, planned.reps, self._form_score,
        )

        if self._set_index < planned.sets - 1:
            self._set_index += 1
            self._reset_counter()
            self._begin_rest(planned.rest_between_sets)
        elif self._exercise_index < len(self.workout.exercises) - 1:
            self._exercise_index += 1
            self._set_index = 0
            self._reset_counter()
            self._begin_rest(self._exercise_rest_seconds)
        else:
            self._finish()

    def _finish(self):
        self._stage = Stage.SUMMARY
        self._feedback = []
        self._status = "Workout complete"
        self._workout_result = WorkoutResult(
            workout_id=self.workout.id,
            workout_name=self.workout.name,
            type=self.workout.type,
            duration=self.workout.duration,
            date=datetime.fromtimestamp(self._clock(), tz=timezone.utc),
            exercises=tuple(self._results),
            elapsed_seconds=sum(r.elapsed_seconds for r in self._results),
        )
        logger.info("Workout %s complete, %d sets recorded", self.workout.id, len(self._results))

        if self._on_complete is None:
            return
        try:
            self._on_complete(self._workout_result)
        except Exception as e:
            self.persist_error = e
            logger.warning("Could not hand off workout %s: %s", self.workout.id, e)
