import pytest

from rep_coach.client.rep_logic import ExerciseKind, resolve_exercise_kind
from rep_coach.client.workouts import (
    BEGINNER_WORKOUTS,
    BODYWEIGHT_SQUAT,
    EXPERT_WORKOUTS,
    FITNESS_TEST_SECONDS,
    WORKOUT_LEVELS,
    Workout,
    WorkoutExercise,
    get_fitness_test,
    get_workout,
    get_workouts,
)


def test_levels():
    assert WORKOUT_LEVELS == ("beginner", "expert")
    assert [w.id for w in get_workouts("beginner")] == [f"beginner-{i}" for i in range(1, 6)]
    assert [w.id for w in get_workouts("expert")] == [f"expert-{i}" for i in range(1, 6)]


def test_unknown_level():
    with pytest.raises(ValueError):
        get_workouts("intermediate")


def test_get_workouts_returns_a_copy():
    get_workouts("beginner").clear()
    assert len(BEGINNER_WORKOUTS) == 5


def test_foundational_circuit():
    workout = get_workout("beginner-1")
    assert workout.name == "Foundational Strength Circuit"
    assert workout.duration == 30
    plan = [(item.exercise.tracking_key, item.sets, item.reps, item.rest_between_sets)
            for item in workout.exercises]
    assert plan == [
        ("squat", 3, 12, 60),
        ("pushup", 3, 8, 60),
        ("jumpingjack", 3, 20, 45),
    ]


def test_unknown_workout_id():
    with pytest.raises(KeyError):
        get_workout("beginner-42")


@pytest.mark.parametrize("workout", BEGINNER_WORKOUTS + EXPERT_WORKOUTS, ids=lambda w: w.id)
def test_catalog_is_well_formed(workout):
    assert workout.type in WORKOUT_LEVELS
    assert workout.id.startswith(workout.type)
    for item in workout.exercises:
        assert item.sets >= 1
        assert item.reps >= 1
        assert item.rest_between_sets >= 0
        assert item.exercise.tracking_key == item.exercise.tracking_key.lower()


def test_tracked_exercises_in_catalog():
    kinds = {
        item.exercise.tracking_key: resolve_exercise_kind(item.exercise.tracking_key)
        for item in get_workout("expert-1").exercises[:2]
    }
    assert kinds == {"deepsquat": ExerciseKind.SQUAT, "perfectpushup": ExerciseKind.PUSHUP}


@pytest.mark.parametrize("kwargs", [
    {"sets": 0, "reps": 10, "rest_between_sets": 30},
    {"sets": 3, "reps": 0, "rest_between_sets": 30},
    {"sets": 3, "reps": 10, "rest_between_sets": -1},
])
def test_invalid_workout_exercise(kwargs):
    with pytest.raises(ValueError):
        WorkoutExercise(BODYWEIGHT_SQUAT, **kwargs)


def test_invalid_workout():
    item = WorkoutExercise(BODYWEIGHT_SQUAT, sets=1, reps=1, rest_between_sets=0)
    with pytest.raises(ValueError):
        Workout(id="x", name="x", type="advanced", description="", duration=5, exercises=(item,))
    with pytest.raises(ValueError):
        Workout(id="x", name="x", type="beginner", description="", duration=5, exercises=())


@pytest.mark.parametrize("key,name,tracking_key", [
    ("squat", "Squat Test", "squat"),
    ("pushup", "Push-up Test", "pushup"),
])
def test_fitness_tests(key, name, tracking_key):
    workout = get_fitness_test(key)
    assert workout.name == name
    assert workout.id == f"fitness-test-{key}"
    assert workout.duration * 60 == FITNESS_TEST_SECONDS
    (item,) = workout.exercises
    assert item.exercise.tracking_key == tracking_key
    assert item.sets == 1


def test_unknown_fitness_test():
    with pytest.raises(KeyError):
        get_fitness_test("handrotation")
