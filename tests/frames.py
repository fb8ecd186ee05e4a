"""Synthetic pose frames with known joint angles and distances."""
import math

from rep_coach.client.pose_utils import POSE_LANDMARK_COUNT, Landmark, PoseLandmark

VISIBLE = 0.9
SEGMENT = 0.2


def blank_frame(visibility=VISIBLE):
    return [Landmark(0.5, 0.5, 0.0, visibility) for _ in range(POSE_LANDMARK_COUNT)]


def _joint(vertex, toward, angle_deg, length=SEGMENT, visibility=VISIBLE):
    """Point at `angle_deg` from the ray vertex->toward, measured around vertex."""
    base = math.atan2(toward.y - vertex.y, toward.x - vertex.x)
    theta = base + math.radians(angle_deg)
    return Landmark(
        vertex.x + length * math.cos(theta),
        vertex.y + length * math.sin(theta),
        0.0,
        visibility,
    )


def squat_frame(knee_angle, knee_offset=0.0, visibility=VISIBLE):
    """Both legs at `knee_angle`; each ankle sits `knee_offset` right of its knee."""
    frame = blank_frame(visibility)
    for hip_idx, knee_idx, ankle_idx, x in (
        (PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE, 0.4),
        (PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE, 0.6),
    ):
        knee = Landmark(x, 0.6, 0.0, visibility)
        ankle = Landmark(x + knee_offset, 0.6 + 0.3, 0.0, visibility)
        frame[knee_idx] = knee
        frame[ankle_idx] = ankle
        frame[hip_idx] = _joint(knee, ankle, knee_angle, visibility=visibility)
    return frame


def pushup_frame(elbow_angle, upper_arm_tilt=0.0, visibility=VISIBLE):
    """
    Both arms at `elbow_angle`. The upper arm hangs from the shoulder
    `upper_arm_tilt` degrees away from vertical.
    """
    frame = blank_frame(visibility)
    tilt = math.radians(upper_arm_tilt)
    for shoulder_idx, elbow_idx, wrist_idx, x in (
        (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_ELBOW, PoseLandmark.LEFT_WRIST, 0.4),
        (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_ELBOW, PoseLandmark.RIGHT_WRIST, 0.6),
    ):
        shoulder = Landmark(x, 0.3, 0.0, visibility)
        elbow = Landmark(x + SEGMENT * math.sin(tilt), 0.3 + SEGMENT * math.cos(tilt), 0.0, visibility)
        frame[shoulder_idx] = shoulder
        frame[elbow_idx] = elbow
        frame[wrist_idx] = _joint(elbow, shoulder, elbow_angle, visibility=visibility)
    return frame


def jack_frame(wrist_gap, ankle_gap, visibility=VISIBLE):
    frame = blank_frame(visibility)
    frame[PoseLandmark.LEFT_SHOULDER] = Landmark(0.4, 0.3, 0.0, visibility)
    frame[PoseLandmark.RIGHT_SHOULDER] = Landmark(0.6, 0.3, 0.0, visibility)
    frame[PoseLandmark.LEFT_WRIST] = Landmark(0.5 - wrist_gap / 2, 0.2, 0.0, visibility)
    frame[PoseLandmark.RIGHT_WRIST] = Landmark(0.5 + wrist_gap / 2, 0.2, 0.0, visibility)
    frame[PoseLandmark.LEFT_ANKLE] = Landmark(0.5 - ankle_gap / 2, 0.9, 0.0, visibility)
    frame[PoseLandmark.RIGHT_ANKLE] = Landmark(0.5 + ankle_gap / 2, 0.9, 0.0, visibility)
    return frame


def hide(frame, idx, visibility=0.3):
    """Copy of `frame` with one landmark below the visibility threshold."""
    frame = list(frame)
    lm = frame[idx]
    frame[idx] = Landmark(lm.x, lm.y, lm.z, visibility)
    return frame


def squat_cycle(reps=1):
    """Full up-down-up cycles, lingering a few frames in each phase."""
    frames = []
    for _ in range(reps):
        frames += [squat_frame(a) for a in (175, 170, 150, 120, 100, 90, 90, 95, 130, 165, 175, 175)]
    return frames


def frame_to_dicts(frame):
    return [{"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility} for lm in frame]
