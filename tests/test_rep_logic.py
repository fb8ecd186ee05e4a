import json
import logging

import pytest

from rep_coach.client.pose_utils import PoseLandmark
from rep_coach.client.rep_logic import (
    UNKNOWN_PHASE,
    ExerciseKind,
    FormFeedback,
    RepCountState,
    Severity,
    calculate_form_score,
    count_generic,
    count_jumping_jack,
    count_pushup,
    count_reps,
    count_squat,
    get_rep_counter,
    initial_state,
    resolve_exercise_kind,
)

from frames import blank_frame, hide, jack_frame, pushup_frame, squat_cycle, squat_frame


def run(counter, frames, state=None):
    update = None
    for frame in frames:
        update = counter(frame, state)
        state = update.state
    return update


# ----------------- Squat -----------------

def test_squat_counts_one_full_cycle():
    update = run(count_squat, [squat_frame(a) for a in (180, 90, 180)])
    assert update.count == 1
    assert update.phase == "up"


def test_squat_lingering_frames_do_not_double_count():
    frames = [squat_frame(180)] * 5 + [squat_frame(90)] * 7 + [squat_frame(180)] * 6
    update = run(count_squat, frames, RepCountState(count=4, phase="up"))
    assert update.count == 5


def test_squat_several_cycles():
    assert run(count_squat, squat_cycle(reps=3)).count == 3


def test_squat_hysteresis_band_never_counts():
    frames = [squat_frame(a) for a in (111, 159) * 20]
    update = run(count_squat, frames)
    assert update.count == 0
    assert update.phase == "up"


def test_squat_down_phase_without_return_does_not_count():
    update = run(count_squat, [squat_frame(a) for a in (180, 90, 120, 150, 100)])
    assert update.count == 0
    assert update.phase == "down"


def test_squat_feedback_composition():
    update = count_squat(squat_frame(105, knee_offset=0.08))
    assert [(f.type, f.severity) for f in update.feedback] == [
        ("depth", Severity.MEDIUM),
        ("kneeAlignment", Severity.HIGH),
    ]
    assert update.feedback[0].message == "Go deeper!"
    assert update.feedback[1].message == "Keep knees aligned with toes"


@pytest.mark.parametrize("angle", [95, 115, 175])
def test_squat_no_depth_feedback_outside_band(angle):
    assert count_squat(squat_frame(angle)).feedback == []


def test_squat_small_knee_offset_is_fine():
    assert count_squat(squat_frame(170, knee_offset=0.03)).feedback == []


# ----------------- Push-up -----------------

def test_pushup_counts_one_full_cycle():
    update = run(count_pushup, [pushup_frame(a) for a in (170, 120, 60, 60, 120, 170)])
    assert update.count == 1
    assert update.phase == "up"


def test_pushup_depth_feedback_only_while_down():
    # 85 is below the down threshold but not deep enough
    update = count_pushup(pushup_frame(85))
    assert update.phase == "down"
    assert [f.type for f in update.feedback] == ["depth"]

    assert count_pushup(pushup_frame(60)).feedback == []
    # not down yet: no depth feedback even above 70
    assert count_pushup(pushup_frame(120)).feedback == []


def test_pushup_elbow_flare_feedback():
    update = count_pushup(pushup_frame(170, upper_arm_tilt=75))
    assert [(f.type, f.severity) for f in update.feedback] == [("elbowPosition", Severity.MEDIUM)]
    assert count_pushup(pushup_frame(170, upper_arm_tilt=30)).feedback == []


# ----------------- Jumping jack -----------------

def test_jumping_jack_counts_together_apart_together():
    frames = [jack_frame(0.2, 0.05), jack_frame(0.7, 0.4), jack_frame(0.7, 0.4), jack_frame(0.2, 0.05)]
    update = run(count_jumping_jack, frames)
    assert update.count == 1
    assert update.phase == "together"


def test_jumping_jack_needs_arms_and_feet():
    # arms apart but feet together: never leaves "together"
    frames = [jack_frame(0.8, 0.05), jack_frame(0.2, 0.05)] * 3
    assert run(count_jumping_jack, frames).count == 0


def test_jumping_jack_feedback_in_apart_phase():
    state = count_jumping_jack(jack_frame(0.7, 0.4)).state
    assert state.phase == "apart"

    update = count_jumping_jack(jack_frame(0.5, 0.2), state)
    assert update.phase == "apart"
    assert [(f.type, f.severity) for f in update.feedback] == [
        ("armExtension", Severity.LOW),
        ("jumpWidth", Severity.MEDIUM),
    ]


# ----------------- Visibility and malformed frames -----------------

@pytest.mark.parametrize("counter,frame,hidden", [
    (count_squat, squat_frame(90), PoseLandmark.LEFT_KNEE),
    (count_squat, squat_frame(90), PoseLandmark.RIGHT_ANKLE),
    (count_pushup, pushup_frame(60), PoseLandmark.LEFT_WRIST),
    (count_pushup, pushup_frame(60), PoseLandmark.RIGHT_SHOULDER),
    (count_jumping_jack, jack_frame(0.7, 0.4), PoseLandmark.LEFT_SHOULDER),
    (count_jumping_jack, jack_frame(0.7, 0.4), PoseLandmark.RIGHT_ANKLE),
])
def test_unusable_landmark_freezes_count(counter, frame, hidden):
    prev = RepCountState(count=7, phase="up")
    update = counter(hide(frame, hidden, visibility=0.5), prev)
    assert update.count == 7
    assert update.phase == UNKNOWN_PHASE
    assert update.feedback == []


@pytest.mark.parametrize("counter", [count_squat, count_pushup, count_jumping_jack, count_generic])
@pytest.mark.parametrize("frame", [None, [], blank_frame()[:12]])
def test_malformed_frame_is_a_visibility_gap(counter, frame):
    update = counter(frame, RepCountState(count=2, phase="down"))
    assert update.count == 2
    assert update.phase == UNKNOWN_PHASE


def test_counting_resumes_after_visibility_gap():
    state = count_squat(squat_frame(90)).state
    assert state.phase == "down"

    gap = count_squat(hide(squat_frame(90), PoseLandmark.LEFT_HIP), state).state
    gap = count_squat(None, gap).state
    assert gap.phase == UNKNOWN_PHASE
    assert gap.last_known_phase == "down"

    update = count_squat(squat_frame(175), gap)
    assert update.count == 1
    assert update.phase == "up"
    assert update.state.last_known_phase is None


JACK_CYCLE = [jack_frame(0.7, 0.4), jack_frame(0.2, 0.05)]


@pytest.mark.parametrize("state", [
    RepCountState(),
    RepCountState(count=0, phase="down"),
    RepCountState(count=0, phase="None"),
    RepCountState(count=0, phase=UNKNOWN_PHASE, last_known_phase="up"),
    RepCountState.from_dict({"count": 0, "phase": None}),
])
def test_jumping_jack_recovers_from_foreign_phase(state):
    assert run(count_jumping_jack, JACK_CYCLE * 3, state).count == 3


@pytest.mark.parametrize("state", [
    RepCountState(count=2, phase="together"),
    RepCountState(count=2, phase="apart"),
    RepCountState(count=2, phase=UNKNOWN_PHASE, last_known_phase="together"),
])
def test_squat_recovers_from_foreign_phase(state):
    update = run(count_squat, squat_cycle(reps=2), state)
    assert update.count == 4
    assert update.phase == "up"


def test_state_from_partial_dict():
    state = RepCountState.from_dict({"count": 5})
    assert state.count == 5
    assert state.phase == UNKNOWN_PHASE
    assert state.last_known_phase is None


def test_counter_does_not_touch_prior_state():
    prev = RepCountState(count=1, phase="down")
    count_squat(squat_frame(175), prev)
    assert prev == RepCountState(count=1, phase="down")


# ----------------- Generic and dispatch -----------------

def test_generic_counter_holds_count():
    update = count_generic(squat_frame(90), RepCountState(count=3, phase="up"))
    assert update.count == 3
    assert update.phase == UNKNOWN_PHASE
    assert update.feedback == []


@pytest.mark.parametrize("key,counter", [
    ("squat", count_squat),
    ("deepsquat", count_squat),
    ("pushup", count_pushup),
    ("perfectpushup", count_pushup),
    ("wallpushup", count_pushup),
    ("jumpingjack", count_jumping_jack),
    ("Jumping Jack", count_jumping_jack),
    (ExerciseKind.PUSHUP, count_pushup),
])
def test_dispatch(key, counter):
    assert get_rep_counter(key) is counter


def test_unknown_key_falls_back_to_generic_and_warns_once(caplog):
    with caplog.at_level(logging.WARNING, logger="rep_coach.client.rep_logic"):
        assert resolve_exercise_kind("underwaterbasketweaving") is ExerciseKind.GENERIC
        assert get_rep_counter("underwaterbasketweaving") is count_generic
        update = count_reps("underwaterbasketweaving", squat_frame(90))
    assert update.count == 0
    warnings = [r for r in caplog.records if "underwaterbasketweaving" in r.getMessage()]
    assert len(warnings) == 1


@pytest.mark.parametrize("key,phase", [
    ("squat", "up"),
    ("pushup", "up"),
    ("jumpingjack", "together"),
    ("generic", UNKNOWN_PHASE),
])
def test_initial_state(key, phase):
    assert initial_state(key) == RepCountState(count=0, phase=phase)


# ----------------- State serialization -----------------

def test_state_round_trip_mid_set_gives_same_count():
    frames = squat_cycle(reps=4)
    uninterrupted = run(count_squat, frames).count

    split = len(frames) // 2 + 3
    saved = json.dumps(run(count_squat, frames[:split]).state.to_dict())
    restored = RepCountState.from_dict(json.loads(saved))
    resumed = run(count_squat, frames[split:], restored).count

    assert uninterrupted == resumed == 4


# ----------------- Form score -----------------

def test_form_score_penalties():
    assert calculate_form_score([]) == 100
    feedback = [
        FormFeedback("a", "a", Severity.LOW),
        FormFeedback("b", "b", Severity.MEDIUM),
        FormFeedback("c", "c", Severity.HIGH),
    ]
    assert calculate_form_score(feedback) == 65


def test_form_score_is_clamped():
    feedback = [FormFeedback("x", "x", Severity.HIGH)] * 8
    assert calculate_form_score(feedback) == 0


def test_update_to_dict():
    update = count_squat(squat_frame(105, knee_offset=0.08))
    data = update.to_dict()
    assert data["count"] == 0
    assert data["phase"] == "down"
    assert data["feedback"][1] == {
        "type": "kneeAlignment",
        "message": "Keep knees aligned with toes",
        "severity": "high",
    }
