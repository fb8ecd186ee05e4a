# rep_coach/client/rep_logic.py

import logging
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

from rep_coach.client.pose_utils import (
    PoseFrame,
    PoseLandmark,
    angle_between,
    angle_from_vertical,
    distance,
    get_visible_landmarks,
)

logger = logging.getLogger(__name__)

UNKNOWN_PHASE = "unknown"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Form score penalty per feedback item
SEVERITY_PENALTY: Dict[Severity, int] = {
    Severity.LOW: 5,
    Severity.MEDIUM: 10,
    Severity.HIGH: 20,
}


class ExerciseKind(Enum):
    SQUAT = "squat"
    PUSHUP = "pushup"
    JUMPING_JACK = "jumpingjack"
    GENERIC = "generic"


INITIAL_PHASES: Dict[ExerciseKind, str] = {
    ExerciseKind.SQUAT: "up",
    ExerciseKind.PUSHUP: "up",
    ExerciseKind.JUMPING_JACK: "together",
    ExerciseKind.GENERIC: UNKNOWN_PHASE,
}


@dataclass(frozen=True)
class FormFeedback:
    type: str
    message: str
    severity: Severity

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "message": self.message,
            "severity": Severity(self.severity).value,
        }


@dataclass(frozen=True)
class RepCountState:
    """
    Everything one exercise attempt remembers between frames.

    Counters take it in and hand a new one back; nobody mutates it.
      - phase            : exercise-specific ("up"/"down", "together"/"apart")
                           or "unknown" while landmarks are not visible;
                           any other value restarts at the exercise's start phase
      - last_known_phase : phase in force before a visibility gap, so the
                           cycle resumes where it stopped
      - last_updated     : timestamp of the last count change (set by the caller)
    """
    count: int = 0
    phase: str = "up"
    last_updated: Optional[float] = None
    last_known_phase: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepCountState":
        last_updated = data.get("last_updated")
        return cls(
            count=int(data.get("count", 0)),
            phase=str(data.get("phase") or UNKNOWN_PHASE),
            last_updated=None if last_updated is None else float(last_updated),
            last_known_phase=data.get("last_known_phase"),
        )


@dataclass(frozen=True)
class RepUpdate:
    state: RepCountState
    feedback: List[FormFeedback] = field(default_factory=list)

    @property
    def count(self) -> int:
        return self.state.count

    @property
    def phase(self) -> str:
        return self.state.phase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "phase": self.phase,
            "feedback": [item.to_dict() for item in self.feedback],
        }


RepCounter = Callable[[Optional[PoseFrame], Optional[RepCountState]], RepUpdate]


# ----------------- Per-exercise thresholds -----------------

# Squat: average hip-knee-ankle angle
SQUAT_DOWN_THRESHOLD = 110.0
SQUAT_UP_THRESHOLD = 160.0
SQUAT_SHALLOW_LIMIT = 100.0          # (100, 110) -> not deep enough yet
KNEE_ALIGNMENT_TOLERANCE = 0.05      # |knee.x - ankle.x|, normalized units

SQUAT_LANDMARKS = (
    PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE,
    PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE,
)

# Push-up: average shoulder-elbow-wrist angle
PUSHUP_DOWN_THRESHOLD = 90.0
PUSHUP_UP_THRESHOLD = 160.0
PUSHUP_DEPTH_LIMIT = 70.0            # still above this while down -> go lower
ELBOW_FLARE_LIMIT = 60.0             # upper arm vs vertical, degrees

PUSHUP_LANDMARKS = (
    PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_ELBOW, PoseLandmark.LEFT_WRIST,
    PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_ELBOW, PoseLandmark.RIGHT_WRIST,
)

# Jumping jack: wrist-to-wrist and ankle-to-ankle distances, both must agree
ARMS_TOGETHER_THRESHOLD = 0.3
ARMS_APART_THRESHOLD = 0.6
FEET_TOGETHER_THRESHOLD = 0.1
FEET_APART_THRESHOLD = 0.3

JUMPING_JACK_LANDMARKS = (
    PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER,
    PoseLandmark.LEFT_WRIST, PoseLandmark.RIGHT_WRIST,
    PoseLandmark.LEFT_ANKLE, PoseLandmark.RIGHT_ANKLE,
)


# ----------------- Shared state machine -----------------

def _resume_phase(prev: RepCountState, kind: ExerciseKind, own_phases: Tuple[str, str]) -> str:
    """Phase to continue from; one this counter does not own restarts the cycle."""
    for phase in (prev.phase, prev.last_known_phase):
        if phase in own_phases:
            return phase
    return INITIAL_PHASES[kind]


def _signal_lost(prev: RepCountState) -> RepUpdate:
    last_known = prev.phase if prev.phase != UNKNOWN_PHASE else prev.last_known_phase
    return RepUpdate(
        state=RepCountState(
            count=prev.count,
            phase=UNKNOWN_PHASE,
            last_updated=prev.last_updated,
            last_known_phase=last_known,
        )
    )


def _advance(
    prev: RepCountState,
    kind: ExerciseKind,
    rest_phase: str,
    active_phase: str,
    entered_active: bool,
    returned_to_rest: bool,
) -> RepCountState:
    """
    Two-phase hysteresis. rest -> active never counts;
    active -> rest completes exactly one rep.
    """
    phase = _resume_phase(prev, kind, (rest_phase, active_phase))
    count = prev.count
    if phase == rest_phase and entered_active:
        phase = active_phase
    elif phase == active_phase and returned_to_rest:
        phase = rest_phase
        count += 1

    return RepCountState(count=count, phase=phase, last_updated=prev.last_updated)


# ----------------- Counters -----------------

def count_squat(frame: Optional[PoseFrame], prev_state: Optional[RepCountState] = None) -> RepUpdate:
    prev = prev_state or initial_state(ExerciseKind.SQUAT)

    landmarks = get_visible_landmarks(frame, SQUAT_LANDMARKS)
    if landmarks is None:
        return _signal_lost(prev)
    left_hip, left_knee, left_ankle, right_hip, right_knee, right_ankle = landmarks

    knee_angle = (
        angle_between(left_hip, left_knee, left_ankle)
        + angle_between(right_hip, right_knee, right_ankle)
    ) / 2

    state = _advance(
        prev,
        ExerciseKind.SQUAT,
        rest_phase="up",
        active_phase="down",
        entered_active=knee_angle < SQUAT_DOWN_THRESHOLD,
        returned_to_rest=knee_angle > SQUAT_UP_THRESHOLD,
    )

    feedback: List[FormFeedback] = []
    if SQUAT_SHALLOW_LIMIT < knee_angle < SQUAT_DOWN_THRESHOLD:
        feedback.append(FormFeedback("depth", "Go deeper!", Severity.MEDIUM))

    if (abs(left_knee.x - left_ankle.x) > KNEE_ALIGNMENT_TOLERANCE
            or abs(right_knee.x - right_ankle.x) > KNEE_ALIGNMENT_TOLERANCE):
        feedback.append(FormFeedback("kneeAlignment", "Keep knees aligned with toes", Severity.HIGH))

    return RepUpdate(state=state, feedback=feedback)


def count_pushup(frame: Optional[PoseFrame], prev_state: Optional[RepCountState] = None) -> RepUpdate:
    prev = prev_state or initial_state(ExerciseKind.PUSHUP)

    landmarks = get_visible_landmarks(frame, PUSHUP_LANDMARKS)
    if landmarks is None:
        return _signal_lost(prev)
    left_shoulder, left_elbow, left_wrist, right_shoulder, right_elbow, right_wrist = landmarks

    elbow_angle = (
        angle_between(left_shoulder, left_elbow, left_wrist)
        + angle_between(right_shoulder, right_elbow, right_wrist)
    ) / 2

    state = _advance(
        prev,
        ExerciseKind.PUSHUP,
        rest_phase="up",
        active_phase="down",
        entered_active=elbow_angle < PUSHUP_DOWN_THRESHOLD,
        returned_to_rest=elbow_angle > PUSHUP_UP_THRESHOLD,
    )

    feedback: List[FormFeedback] = []
    if state.phase == "down" and elbow_angle > PUSHUP_DEPTH_LIMIT:
        feedback.append(FormFeedback("depth", "Lower your chest closer to the ground", Severity.MEDIUM))

    if (angle_from_vertical(left_shoulder, left_elbow) > ELBOW_FLARE_LIMIT
            or angle_from_vertical(right_shoulder, right_elbow) > ELBOW_FLARE_LIMIT):
        feedback.append(FormFeedback("elbowPosition", "Keep elbows closer to body", Severity.MEDIUM))

    return RepUpdate(state=state, feedback=feedback)


def count_jumping_jack(frame: Optional[PoseFrame], prev_state: Optional[RepCountState] = None) -> RepUpdate:
    prev = prev_state or initial_state(ExerciseKind.JUMPING_JACK)

    landmarks = get_visible_landmarks(frame, JUMPING_JACK_LANDMARKS)
    if landmarks is None:
        return _signal_lost(prev)
    _, _, left_wrist, right_wrist, left_ankle, right_ankle = landmarks

    wrist_distance = distance(left_wrist, right_wrist)
    ankle_distance = distance(left_ankle, right_ankle)

    state = _advance(
        prev,
        ExerciseKind.JUMPING_JACK,
        rest_phase="together",
        active_phase="apart",
        entered_active=(wrist_distance > ARMS_APART_THRESHOLD
                        and ankle_distance > FEET_APART_THRESHOLD),
        returned_to_rest=(wrist_distance < ARMS_TOGETHER_THRESHOLD
                          and ankle_distance < FEET_TOGETHER_THRESHOLD),
    )

    feedback: List[FormFeedback] = []
    if state.phase == "apart":
        if wrist_distance < ARMS_APART_THRESHOLD:
            feedback.append(FormFeedback("armExtension", "Extend arms fully overhead", Severity.LOW))
        if ankle_distance < FEET_APART_THRESHOLD:
            feedback.append(FormFeedback("jumpWidth", "Jump wider", Severity.MEDIUM))

    return RepUpdate(state=state, feedback=feedback)


def count_generic(frame: Optional[PoseFrame], prev_state: Optional[RepCountState] = None) -> RepUpdate:
    """Exercise not supported yet: holds the count, never guesses."""
    prev = prev_state or initial_state(ExerciseKind.GENERIC)
    return RepUpdate(
        state=RepCountState(count=prev.count, phase=UNKNOWN_PHASE, last_updated=prev.last_updated)
    )


# ----------------- Dispatch -----------------

REP_COUNTERS: Dict[ExerciseKind, RepCounter] = {
    ExerciseKind.SQUAT: count_squat,
    ExerciseKind.PUSHUP: count_pushup,
    ExerciseKind.JUMPING_JACK: count_jumping_jack,
    ExerciseKind.GENERIC: count_generic,
}

TRACKING_KEY_ALIASES: Dict[str, ExerciseKind] = {
    "squat": ExerciseKind.SQUAT,
    "deepsquat": ExerciseKind.SQUAT,
    "pushup": ExerciseKind.PUSHUP,
    "perfectpushup": ExerciseKind.PUSHUP,
    "wallpushup": ExerciseKind.PUSHUP,
    "jumpingjack": ExerciseKind.JUMPING_JACK,
    "generic": ExerciseKind.GENERIC,
}

_unmapped_keys: Set[str] = set()


def normalize_tracking_key(key: Optional[str]) -> str:
    return re.sub(r"[\s_\-]+", "", (key or "").lower())


def resolve_exercise_kind(key: Union[str, ExerciseKind, None]) -> ExerciseKind:
    """
    Maps a tracking key (or synonym) to its exercise kind.
    Unmapped keys fall back to GENERIC, which never counts; warned once per key.
    """
    if isinstance(key, ExerciseKind):
        return key

    normalized = normalize_tracking_key(key)
    kind = TRACKING_KEY_ALIASES.get(normalized)
    if kind is None:
        if normalized not in _unmapped_keys:
            _unmapped_keys.add(normalized)
            logger.warning("No rep counter for exercise %r, reps will not be counted", key)
        return ExerciseKind.GENERIC
    return kind


def get_rep_counter(key: Union[str, ExerciseKind, None]) -> RepCounter:
    return REP_COUNTERS[resolve_exercise_kind(key)]


def initial_state(key: Union[str, ExerciseKind, None]) -> RepCountState:
    return RepCountState(count=0, phase=INITIAL_PHASES[resolve_exercise_kind(key)])


def count_reps(
    key: Union[str, ExerciseKind, None],
    frame: Optional[PoseFrame],
    prev_state: Optional[RepCountState] = None,
) -> RepUpdate:
    return get_rep_counter(key)(frame, prev_state)


# ----------------- Form score -----------------

def calculate_form_score(feedback: List[FormFeedback]) -> int:
    """100 minus a penalty per feedback item (low 5, medium 10, high 20), clamped to 0..100."""
    score = 100
    for item in feedback:
        score -= SEVERITY_PENALTY[Severity(item.severity)]
    return max(0, min(100, score))
