# rep_coach/client/rep_demo.py

import logging
import time
from queue import Queue
from threading import Thread

import cv2
import mediapipe as mp
import requests

from rep_coach import config
from rep_coach.client.pose_estimator import PoseEstimator
from rep_coach.client.session import Stage, WorkoutResult, WorkoutSession
from rep_coach.client.voice import FeedbackVoice
from rep_coach.client.workouts import FITNESS_TEST_SECONDS, FITNESS_TESTS, get_fitness_test, get_workouts

logger = logging.getLogger(__name__)

# MediaPipe drawing helpers
mp_drawing = mp.solutions.drawing_utils
mp_pose = mp.solutions.pose

WINDOW_NAME = "Rep Coach"


# ---------- Queue for finished workouts ----------
result_queue: Queue = Queue()


def choose_fitness_test():
    print("\nFitness tests:")
    keys = list(FITNESS_TESTS)
    for i, key in enumerate(keys, start=1):
        print(f"  {i}. {FITNESS_TESTS[key].name}")
    choice = input(f"Enter 1-{len(keys)}: ").strip()

    try:
        workout = get_fitness_test(keys[int(choice) - 1])
    except (ValueError, IndexError):
        workout = get_fitness_test(keys[0])
    print(f"\nYou selected: {workout.name} ({FITNESS_TEST_SECONDS}s)\n")
    return workout


def choose_workout():
    """Returns (workout, time limit per set or None)."""
    print("Select level:")
    print("  1. Beginner")
    print("  2. Expert")
    print("  3. Fitness test")
    answer = input("Enter 1, 2 or 3: ").strip()
    if answer == "3":
        return choose_fitness_test(), FITNESS_TEST_SECONDS
    level = "expert" if answer == "2" else "beginner"

    workouts = get_workouts(level)
    print(f"\n{level.capitalize()} workouts:")
    for i, workout in enumerate(workouts, start=1):
        names = ", ".join(item.exercise.name for item in workout.exercises)
        print(f"  {i}. {workout.name} ({workout.duration} min): {names}")
    choice = input(f"Enter 1-{len(workouts)}: ").strip()

    try:
        workout = workouts[int(choice) - 1]
    except (ValueError, IndexError):
        workout = workouts[0]
    print(f"\nYou selected: {workout.name}\n")
    return workout, None


# ---------- Background persistence worker ----------

def save_workout(result: WorkoutResult) -> bool:
    try:
        resp = requests.post(
            f"{config.BACKEND_URL}/workouts",
            json=result.to_dict(),
            timeout=config.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("Could not reach backend to save workout: %s", e)
        return False

    if resp.status_code != 200:
        logger.warning("Backend refused workout: %s %s", resp.status_code, resp.text)
        return False

    logger.info("Workout %s saved", result.workout_id)
    return True


def persistence_worker():
    """
    Runs in a background thread.
    Takes finished workouts off result_queue and posts them to the backend,
    so the camera loop keeps showing the summary whatever happens here.
    """
    while True:
        result = result_queue.get()
        try:
            save_workout(result)
        finally:
            result_queue.task_done()


# ---------- Overlay ----------

def put_text(img, text, y, color=(0, 255, 0), scale=0.7):
    cv2.putText(img, text, (20, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2)


def draw_overlay(img, session: WorkoutSession):
    stage = session.stage

    if stage == Stage.READY:
        put_text(img, f"Next: {session.current_exercise.exercise.name}", 40, (200, 255, 200))
        put_text(img, "Press SPACE to start", 80, (0, 255, 255))
        return

    if stage == Stage.COUNTDOWN:
        put_text(img, f"Get ready: {int(session.countdown_remaining + 0.999)}", 100, (0, 255, 255), 1.2)
        return

    if stage == Stage.RESTING:
        put_text(img, f"Rest: {int(session.rest_remaining + 0.999)}s", 100, (0, 255, 255), 1.2)
        put_text(img, f"Next: {session.current_exercise.exercise.name}, set {session.set_index + 1}", 140)
        put_text(img, "Press S to skip rest", 180, (200, 200, 200))
        return

    if stage == Stage.ACTIVE:
        planned = session.current_exercise
        put_text(img, f"Exercise: {planned.exercise.name}", 30, (200, 255, 200))
        put_text(img, f"Set {session.set_index + 1}/{planned.sets}", 60)
        if session.time_remaining is not None:
            remaining = int(session.time_remaining + 0.999)
            put_text(img, f"Reps: {session.rep_count}", 90, scale=0.9)
            color = (0, 0, 255) if remaining < 30 else (255, 200, 0)
            put_text(img, f"Time: {remaining // 60}:{remaining % 60:02d}", 185, color, 1.0)
        else:
            put_text(img, f"Reps: {session.rep_count}/{session.target_count}", 90, scale=0.9)
        put_text(img, f"Form: {session.form_score}", 120, (0, 255, 255))
        put_text(img, session.status, 150, (200, 200, 200), 0.6)

        y = img.shape[0] - 30
        for item in session.feedback:
            color = (0, 0, 255) if item.severity == "high" else (0, 200, 255)
            put_text(img, item.message, y, color)
            y -= 30
        return

    if stage == Stage.SUMMARY:
        put_text(img, session.status, 40, (0, 255, 255), 1.0)
        y = 80
        for result in session.results:
            mark = "ok" if result.success else "--"
            put_text(img, f"[{mark}] {result.exercise}: {result.actual_count}/{result.target_count} "
                          f"form {result.form_score}", y, scale=0.6)
            y += 28
        if session.persist_error is not None:
            put_text(img, "Could not save workout", y + 10, (0, 0, 255), 0.6)
        return

    if stage == Stage.ABORTED:
        put_text(img, "Workout stopped", 40, (0, 0, 255), 1.0)


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # 1) Choose workout
    workout, time_limit = choose_workout()

    # 2) Start camera
    cap = cv2.VideoCapture(config.CAMERA_INDEX)
    if not cap.isOpened():
        logger.error("Could not open camera %s", config.CAMERA_INDEX)
        return

    # 3) Init pose estimator & session
    pose_estimator = PoseEstimator()
    session = WorkoutSession(
        workout,
        on_complete=result_queue.put,
        countdown_seconds=config.COUNTDOWN_SECONDS,
        exercise_rest_seconds=config.EXERCISE_REST_SECONDS,
        time_limit_seconds=time_limit,
    )
    session.start_workout()

    # 4) Start background persistence worker
    Thread(target=persistence_worker, daemon=True).start()

    last_tick = time.time()
    voice = FeedbackVoice()

    while True:
        ret, frame = cap.read()
        if not ret:
            break

        now = time.time()
        session.tick(now - last_tick)
        last_tick = now

        display_frame = frame.copy()

        if session.stage == Stage.ACTIVE:
            pose_frame, landmarks = pose_estimator.process(frame)

            if landmarks:
                mp_drawing.draw_landmarks(
                    display_frame,
                    landmarks,
                    mp_pose.POSE_CONNECTIONS,
                    landmark_drawing_spec=mp_drawing.DrawingSpec(
                        color=(0, 255, 0), thickness=2, circle_radius=2
                    ),
                    connection_drawing_spec=mp_drawing.DrawingSpec(
                        color=(255, 0, 0), thickness=2
                    ),
                )

            update = session.process_frame(pose_frame)

            if update is not None:
                voice.announce(update.feedback, now)

        draw_overlay(display_frame, session)
        cv2.imshow(WINDOW_NAME, display_frame)

        key = cv2.waitKey(1) & 0xFF
        if key == ord('q'):
            if session.stage not in (Stage.SUMMARY, Stage.ABORTED):
                session.abort()
            break
        elif key == ord(' '):
            session.start_exercise()
        elif key == ord('r'):
            session.add_manual_rep()
        elif key == ord('s'):
            session.skip_rest()
        elif key == ord('x'):
            session.reset_set()

    cap.release()
    pose_estimator.close()
    cv2.destroyAllWindows()

    # Let a pending save finish before the daemon thread dies
    result_queue.join()

    if session.workout_result is not None:
        for result in session.workout_result.exercises:
            print(f"{result.exercise}: {result.actual_count}/{result.target_count} reps, form {result.form_score}")


if __name__ == "__main__":
    main()
