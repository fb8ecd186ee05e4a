# rep_coach/client/workouts.py

from dataclasses import dataclass
from typing import Dict, List, Tuple

WORKOUT_LEVELS = ("beginner", "expert")


@dataclass(frozen=True)
class Exercise:
    name: str
    tracking_key: str                 # picks the rep counter
    description: str = ""
    target_muscles: Tuple[str, ...] = ()
    instructions: Tuple[str, ...] = ()
    form_tips: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkoutExercise:
    exercise: Exercise
    sets: int
    reps: int
    rest_between_sets: int            # seconds

    def __post_init__(self):
        if self.sets < 1:
            raise ValueError(f"{self.exercise.name}: sets must be >= 1, got {self.sets}")
        if self.reps < 1:
            raise ValueError(f"{self.exercise.name}: reps must be >= 1, got {self.reps}")
        if self.rest_between_sets < 0:
            raise ValueError(
                f"{self.exercise.name}: rest_between_sets must be >= 0, got {self.rest_between_sets}"
            )


@dataclass(frozen=True)
class Workout:
    id: str
    name: str
    type: str                         # "beginner" or "expert"
    description: str
    duration: int                     # minutes
    exercises: Tuple[WorkoutExercise, ...]

    def __post_init__(self):
        if self.type not in WORKOUT_LEVELS:
            raise ValueError(f"{self.id}: unknown workout type {self.type!r}")
        if not self.exercises:
            raise ValueError(f"{self.id}: a workout needs at least one exercise")


# ----------------- Exercise library -----------------

BODYWEIGHT_SQUAT = Exercise(
    name="Bodyweight Squat",
    tracking_key="squat",
    description="A fundamental lower body exercise that targets the quadriceps, hamstrings, and glutes.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Core"),
    instructions=(
        "Stand with feet shoulder-width apart",
        "Lower your body as if sitting in a chair",
        "Keep chest up and back straight",
        "Return to standing position",
    ),
    form_tips=(
        "Keep knees aligned with toes",
        "Lower until thighs are parallel to ground",
        "Maintain weight in heels",
    ),
)

MODIFIED_PUSHUP = Exercise(
    name="Modified Push-up",
    tracking_key="pushup",
    description="An upper body exercise that can be performed from the knees for beginners.",
    target_muscles=("Chest", "Shoulders", "Triceps", "Core"),
    instructions=(
        "Start on hands and knees with hands slightly wider than shoulders",
        "Lower chest toward the ground",
        "Push back up to starting position",
    ),
    form_tips=(
        "Keep body in a straight line from head to knees",
        "Elbows should bend at about 45 degrees from body",
        "Look slightly ahead, not directly at the floor",
    ),
)

JUMPING_JACKS = Exercise(
    name="Jumping Jacks",
    tracking_key="jumpingjack",
    description="A full-body cardio exercise that raises your heart rate.",
    target_muscles=("Shoulders", "Hips", "Quads", "Cardiovascular system"),
    instructions=(
        "Start standing with feet together and arms at sides",
        "Jump feet out wide while raising arms overhead",
        "Jump feet back together while lowering arms",
    ),
    form_tips=(
        "Land softly on the balls of your feet",
        "Keep a slight bend in knees",
        "Extend arms fully overhead",
    ),
)

MARCHING = Exercise(
    name="Marching in Place",
    tracking_key="marching",
    description="A simple cardio exercise that elevates your heart rate.",
    target_muscles=("Quadriceps", "Hip flexors", "Cardiovascular system"),
    instructions=(
        "Stand tall with feet hip-width apart",
        "Lift right knee up to hip height",
        "Lower right foot and lift left knee",
        "Continue alternating at a comfortable pace",
    ),
    form_tips=(
        "Maintain an upright posture",
        "Engage your core",
        "Pump arms naturally as you march",
    ),
)

ARM_CIRCLES = Exercise(
    name="Arm Circles",
    tracking_key="armcircles",
    description="An upper body exercise that improves shoulder mobility.",
    target_muscles=("Shoulders", "Upper back", "Arms"),
    instructions=(
        "Stand with feet shoulder-width apart",
        "Extend arms out to sides at shoulder height",
        "Make small circles with arms",
        "Switch direction after completing reps",
    ),
    form_tips=(
        "Keep shoulders down away from ears",
        "Maintain arm height at shoulder level",
        "Start with small circles and gradually increase size",
    ),
)

MODIFIED_PLANK = Exercise(
    name="Modified Plank",
    tracking_key="plank",
    description="A core stabilizing exercise performed from the knees for beginners.",
    target_muscles=("Core", "Shoulders", "Back"),
    instructions=(
        "Start on hands and knees",
        "Walk hands forward and lower to forearms if comfortable",
        "Hold position with back straight",
        "Hold for specified time",
    ),
    form_tips=(
        "Keep back flat (no sagging or arching)",
        "Engage core by drawing navel to spine",
        "Keep neck in neutral position",
    ),
)

BIRD_DOG = Exercise(
    name="Bird Dog",
    tracking_key="birddog",
    description="A core stability exercise that also improves balance and coordination.",
    target_muscles=("Core", "Lower back", "Glutes", "Shoulders"),
    instructions=(
        "Start on hands and knees",
        "Extend right arm forward and left leg back",
        "Return to starting position",
        "Extend left arm forward and right leg back",
        "Return to starting position",
    ),
    form_tips=(
        "Keep back flat and core engaged",
        "Extend limbs fully without arching back",
        "Move slowly and with control",
    ),
)

WALL_PUSHUP = Exercise(
    name="Wall Push-up",
    tracking_key="wallpushup",
    description="A modified push-up using a wall for support, ideal for beginners.",
    target_muscles=("Chest", "Shoulders", "Triceps"),
    instructions=(
        "Stand facing wall at arm's length",
        "Place hands on wall at shoulder height",
        "Bend elbows to bring chest toward wall",
        "Push back to starting position",
    ),
    form_tips=(
        "Keep body in a straight line",
        "Engage core throughout movement",
        "Keep elbows at 45-degree angle from body",
    ),
)

SEATED_SHOULDER_PRESS = Exercise(
    name="Seated Shoulder Press",
    tracking_key="shoulderpress",
    description="An upper body exercise that targets the shoulders.",
    target_muscles=("Shoulders", "Triceps", "Upper back"),
    instructions=(
        "Sit with back supported",
        "Start with arms bent at 90 degrees at shoulder height",
        "Press arms overhead until almost straight",
        "Lower back to starting position",
    ),
    form_tips=(
        "Keep core engaged and back supported",
        "Don't lock elbows at the top",
        "Avoid arching lower back",
    ),
)

STANDING_LEG_RAISES = Exercise(
    name="Standing Leg Raises",
    tracking_key="legraise",
    description="A balance exercise that also strengthens the hip flexors.",
    target_muscles=("Hip flexors", "Core", "Balance"),
    instructions=(
        "Stand tall with feet together",
        "Lift one leg forward to hip height",
        "Hold briefly, then lower",
        "Repeat with other leg",
    ),
    form_tips=(
        "Use a wall or chair for support if needed",
        "Keep standing leg slightly bent",
        "Maintain upright posture",
    ),
)

SEATED_TORSO_ROTATION = Exercise(
    name="Seated Torso Rotation",
    tracking_key="torsorotation",
    description="A mobility exercise for the spine and core.",
    target_muscles=("Obliques", "Lower back", "Spine mobility"),
    instructions=(
        "Sit on edge of chair with feet flat",
        "Cross arms over chest",
        "Rotate torso to right as far as comfortable",
        "Return to center and rotate to left",
        "Continue alternating sides",
    ),
    form_tips=(
        "Keep hips facing forward",
        "Sit tall with good posture",
        "Move slowly and with control",
    ),
)

DEEP_SQUAT = Exercise(
    name="Deep Squat",
    tracking_key="deepsquat",
    description="An advanced squat variation focusing on full range of motion.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Core"),
    instructions=(
        "Stand with feet shoulder-width apart",
        "Lower your body until thighs are below parallel to ground",
        "Maintain upright chest and neutral spine",
        "Drive through heels to return to standing",
    ),
    form_tips=(
        "Keep weight in heels and mid-foot",
        "Maintain knee alignment with toes",
        "Achieve depth with good form",
    ),
)

PERFECT_PUSHUP = Exercise(
    name="Perfect Push-up",
    tracking_key="perfectpushup",
    description="A standard push-up with strict form requirements.",
    target_muscles=("Chest", "Shoulders", "Triceps", "Core"),
    instructions=(
        "Start in plank position with hands slightly wider than shoulders",
        "Lower body until chest nearly touches ground",
        "Keep elbows at 45-degree angle from body",
        "Push back up to starting position",
    ),
    form_tips=(
        "Maintain rigid plank throughout movement",
        "Touch chest to ground at bottom position",
        "Fully extend arms at top without locking elbows",
    ),
)

BULGARIAN_SPLIT_SQUAT = Exercise(
    name="Bulgarian Split Squat",
    tracking_key="splitsquat",
    description="A unilateral leg exercise that challenges balance and builds strength.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Core", "Balance"),
    instructions=(
        "Stand about 2 feet in front of a bench or chair",
        "Place one foot behind you on the bench",
        "Lower your body until front thigh is parallel to ground",
        "Push through front heel to return to starting position",
    ),
    form_tips=(
        "Keep front knee aligned with toes",
        "Maintain upright torso",
        "Lower until front thigh is parallel to ground",
    ),
)

SQUAT_JUMP = Exercise(
    name="Squat Jump",
    tracking_key="squatjump",
    description="An explosive lower body exercise that builds power and athleticism.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Calves"),
    instructions=(
        "Stand with feet shoulder-width apart",
        "Lower into squat position",
        "Explosively jump upward as high as possible",
        "Land softly with bent knees and immediately repeat",
    ),
    form_tips=(
        "Use arms to help propel body upward",
        "Land softly with knees bent to absorb impact",
        "Maintain proper squat form throughout",
    ),
)

PLYO_PUSHUP = Exercise(
    name="Plyo Push-up",
    tracking_key="plyopushup",
    description="An explosive upper body exercise that builds power in the chest and arms.",
    target_muscles=("Chest", "Shoulders", "Triceps", "Core"),
    instructions=(
        "Start in push-up position",
        "Lower chest to ground",
        "Push up explosively so hands leave ground",
        "Land softly and immediately begin next rep",
    ),
    form_tips=(
        "Maintain rigid body alignment throughout",
        "Push with enough force for hands to leave ground",
        "Control the landing to protect wrists and shoulders",
    ),
)

DUMBBELL_CLEAN = Exercise(
    name="Dumbbell Clean",
    tracking_key="dbclean",
    description="A technical lift that develops power and coordination.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Shoulders", "Traps", "Core"),
    instructions=(
        "Stand with feet shoulder-width apart, dumbbells in front of thighs",
        "Hinge at hips, keeping back flat",
        "Explosively extend hips and shrug shoulders",
        "Pull dumbbells to shoulder height and rotate elbows under",
        "Catch in quarter squat position with dumbbells at shoulders",
    ),
    form_tips=(
        "Drive through heels during extension",
        "Keep dumbbells close to body throughout movement",
        "Fully extend hips before pulling with arms",
    ),
)

DUMBBELL_SNATCH = Exercise(
    name="Dumbbell Snatch",
    tracking_key="dbsnatch",
    description="A full-body explosive movement that develops power and coordination.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Shoulders", "Traps", "Core"),
    instructions=(
        "Stand with feet shoulder-width apart, dumbbell between feet",
        "Hinge at hips with flat back to grasp dumbbell",
        "Explosively extend hips, knees, and ankles",
        "Pull dumbbell upward keeping it close to body",
        "Punch hand upward and catch dumbbell overhead with arm locked out",
    ),
    form_tips=(
        "Keep dumbbell close to body during pull",
        "Fully extend hips before pulling with arm",
        "Lock out arm completely overhead",
    ),
)

PISTOL_SQUAT = Exercise(
    name="Pistol Squat",
    tracking_key="pistolsquat",
    description="A challenging unilateral squat that tests strength, balance, and mobility.",
    target_muscles=("Quadriceps", "Hamstrings", "Glutes", "Core", "Balance"),
    instructions=(
        "Stand on one leg with other leg extended forward",
        "Slowly lower into a single-leg squat",
        "Keep extended leg off ground throughout movement",
        "Return to standing using only working leg",
    ),
    form_tips=(
        "Keep chest up throughout movement",
        "Extend arms forward for counterbalance",
        "Keep heel of working leg firmly planted",
    ),
)

PULL_UP = Exercise(
    name="Pull-up",
    tracking_key="pullup",
    description="A fundamental upper body pulling exercise that builds back and arm strength.",
    target_muscles=("Lats", "Biceps", "Shoulders", "Core"),
    instructions=(
        "Hang from bar with hands slightly wider than shoulders",
        "Pull body upward until chin clears the bar",
        "Lower with control to starting position",
    ),
    form_tips=(
        "Engage core throughout movement",
        "Avoid swinging or kipping",
        "Fully extend arms at bottom position",
    ),
)

BURPEE = Exercise(
    name="Burpee",
    tracking_key="burpee",
    description="A full-body exercise that combines a squat, push-up, and jump.",
    target_muscles=("Quadriceps", "Chest", "Shoulders", "Core", "Cardiovascular system"),
    instructions=(
        "Start standing, then squat down and place hands on floor",
        "Jump feet back into plank position",
        "Perform a push-up",
        "Jump feet forward to hands",
        "Explosively jump up with arms overhead",
    ),
    form_tips=(
        "Keep core engaged throughout movement",
        "Maintain proper push-up form",
        "Land softly from jump with bent knees",
    ),
)

MOUNTAIN_CLIMBER = Exercise(
    name="Mountain Climber",
    tracking_key="mountainclimber",
    description="A dynamic core exercise that also elevates heart rate.",
    target_muscles=("Core", "Hip flexors", "Shoulders", "Cardiovascular system"),
    instructions=(
        "Start in plank position with arms extended",
        "Drive right knee toward chest",
        "Quickly switch legs, driving left knee forward",
        "Continue alternating at a rapid pace",
    ),
    form_tips=(
        "Keep hips level throughout movement",
        "Maintain rigid plank position",
        "Move legs as quickly as possible while maintaining form",
    ),
)


# ----------------- Workout plans -----------------

BEGINNER_WORKOUTS: List[Workout] = [
    Workout(
        id="beginner-1",
        name="Foundational Strength Circuit",
        type="beginner",
        description="A full-body workout focusing on fundamental movement patterns to build a strong foundation.",
        duration=30,
        exercises=(
            WorkoutExercise(BODYWEIGHT_SQUAT, sets=3, reps=12, rest_between_sets=60),
            WorkoutExercise(MODIFIED_PUSHUP, sets=3, reps=8, rest_between_sets=60),
            WorkoutExercise(JUMPING_JACKS, sets=3, reps=20, rest_between_sets=45),
        ),
    ),
    Workout(
        id="beginner-2",
        name="Cardio Starter",
        type="beginner",
        description="A beginner-friendly cardio workout to improve endurance and heart health.",
        duration=25,
        exercises=(
            WorkoutExercise(MARCHING, sets=3, reps=30, rest_between_sets=30),
            WorkoutExercise(ARM_CIRCLES, sets=2, reps=15, rest_between_sets=30),
        ),
    ),
    Workout(
        id="beginner-3",
        name="Core Fundamentals",
        type="beginner",
        description="Focus on building core strength with beginner-friendly exercises.",
        duration=20,
        exercises=(
            # reps are seconds held
            WorkoutExercise(MODIFIED_PLANK, sets=3, reps=20, rest_between_sets=45),
            WorkoutExercise(BIRD_DOG, sets=3, reps=10, rest_between_sets=45),
        ),
    ),
    Workout(
        id="beginner-4",
        name="Upper Body Primer",
        type="beginner",
        description="A beginner-friendly workout focusing on upper body strength.",
        duration=25,
        exercises=(
            WorkoutExercise(WALL_PUSHUP, sets=3, reps=12, rest_between_sets=45),
            WorkoutExercise(SEATED_SHOULDER_PRESS, sets=3, reps=10, rest_between_sets=60),
        ),
    ),
    Workout(
        id="beginner-5",
        name="Mobility & Balance",
        type="beginner",
        description="Improve flexibility, joint mobility, and balance with these beginner exercises.",
        duration=20,
        exercises=(
            WorkoutExercise(STANDING_LEG_RAISES, sets=2, reps=10, rest_between_sets=30),
            WorkoutExercise(SEATED_TORSO_ROTATION, sets=2, reps=10, rest_between_sets=30),
        ),
    ),
]

EXPERT_WORKOUTS: List[Workout] = [
    Workout(
        id="expert-1",
        name="Hypertrophy Split",
        type="expert",
        description="A high-volume workout designed to maximize muscle growth through targeted exercises.",
        duration=45,
        exercises=(
            WorkoutExercise(DEEP_SQUAT, sets=4, reps=12, rest_between_sets=90),
            WorkoutExercise(PERFECT_PUSHUP, sets=4, reps=15, rest_between_sets=60),
            WorkoutExercise(BULGARIAN_SPLIT_SQUAT, sets=3, reps=10, rest_between_sets=60),
        ),
    ),
    Workout(
        id="expert-2",
        name="Power & Explosiveness",
        type="expert",
        description="Develop power, speed, and explosive strength with these advanced movements.",
        duration=40,
        exercises=(
            WorkoutExercise(SQUAT_JUMP, sets=4, reps=10, rest_between_sets=90),
            WorkoutExercise(PLYO_PUSHUP, sets=3, reps=8, rest_between_sets=90),
        ),
    ),
    Workout(
        id="expert-3",
        name="Olympic Lifting Complex",
        type="expert",
        description="A technical workout focusing on Olympic lifting movements and technique.",
        duration=50,
        exercises=(
            WorkoutExercise(DUMBBELL_CLEAN, sets=4, reps=6, rest_between_sets=120),
            WorkoutExercise(DUMBBELL_SNATCH, sets=4, reps=5, rest_between_sets=120),
        ),
    ),
    Workout(
        id="expert-4",
        name="Advanced Calisthenics",
        type="expert",
        description="Master bodyweight movements with these challenging calisthenic exercises.",
        duration=45,
        exercises=(
            WorkoutExercise(PISTOL_SQUAT, sets=3, reps=5, rest_between_sets=90),
            WorkoutExercise(PULL_UP, sets=3, reps=8, rest_between_sets=90),
        ),
    ),
    Workout(
        id="expert-5",
        name="Endurance Challenge",
        type="expert",
        description="Push your cardiovascular and muscular endurance to the limit with this high-intensity workout.",
        duration=40,
        exercises=(
            WorkoutExercise(BURPEE, sets=4, reps=12, rest_between_sets=60),
            WorkoutExercise(MOUNTAIN_CLIMBER, sets=3, reps=30, rest_between_sets=45),
        ),
    ),
]

_WORKOUTS_BY_LEVEL: Dict[str, List[Workout]] = {
    "beginner": BEGINNER_WORKOUTS,
    "expert": EXPERT_WORKOUTS,
}


def get_workouts(level: str) -> List[Workout]:
    if level not in _WORKOUTS_BY_LEVEL:
        raise ValueError(f"Unknown workout level {level!r}, expected one of {WORKOUT_LEVELS}")
    return list(_WORKOUTS_BY_LEVEL[level])


def get_workout(workout_id: str) -> Workout:
    for workout in BEGINNER_WORKOUTS + EXPERT_WORKOUTS:
        if workout.id == workout_id:
            return workout
    raise KeyError(workout_id)


# ----------------- Fitness tests -----------------

FITNESS_TEST_SECONDS = 180


def _fitness_test(key: str, name: str, exercise: Exercise) -> Workout:
    return Workout(
        id=f"fitness-test-{key}",
        name=name,
        type="beginner",
        description=f"As many {exercise.name.lower()}s as you can in {FITNESS_TEST_SECONDS // 60} minutes.",
        duration=FITNESS_TEST_SECONDS // 60,
        # open-ended: one rep counts as a pass, the time limit ends the set
        exercises=(WorkoutExercise(exercise, sets=1, reps=1, rest_between_sets=0),),
    )


FITNESS_TESTS: Dict[str, Workout] = {
    "squat": _fitness_test("squat", "Squat Test", BODYWEIGHT_SQUAT),
    "pushup": _fitness_test("pushup", "Push-up Test", MODIFIED_PUSHUP),
}


def get_fitness_test(key: str) -> Workout:
    if key not in FITNESS_TESTS:
        raise KeyError(key)
    return FITNESS_TESTS[key]
