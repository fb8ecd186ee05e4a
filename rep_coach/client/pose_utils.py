# rep_coach/client/pose_utils.py

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class Landmark:
    """
    One body keypoint in normalized image coordinates.
    visibility is the pose model's confidence (0..1), None if not reported.
    """
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


# A single instant: landmarks indexed by PoseLandmark.
PoseFrame = Sequence[Landmark]


class PoseLandmark(IntEnum):
    """MediaPipe Pose layout. Every counter indexes frames through this."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


POSE_LANDMARK_COUNT = len(PoseLandmark)

# A landmark only counts as seen above this confidence
VISIBILITY_THRESHOLD = 0.5


# ----------------- Geometry -----------------

def angle_between(p1: Landmark, p2: Landmark, p3: Landmark) -> float:
    """
    Returns the angle (in degrees, 0..180) at point p2 formed by p1-p2-p3.
    Only x/y are used. Coincident points give 0.
    """
    radians = (
        np.arctan2(p3.y - p2.y, p3.x - p2.x)
        - np.arctan2(p1.y - p2.y, p1.x - p2.x)
    )
    angle = abs(float(np.degrees(radians)))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def distance(p1: Landmark, p2: Landmark) -> float:
    """3D Euclidean distance between two landmarks."""
    delta = np.array([p2.x - p1.x, p2.y - p1.y, p2.z - p1.z], dtype=float)
    return float(np.linalg.norm(delta))


def angle_from_vertical(top: Landmark, bottom: Landmark) -> float:
    """Deviation (0..90 degrees) of the top->bottom segment from the image vertical."""
    dx = abs(bottom.x - top.x)
    dy = abs(bottom.y - top.y)
    return float(np.degrees(np.arctan2(dx, dy)))


# ----------------- Landmark access -----------------

def is_landmark_visible(landmark: Optional[Landmark]) -> bool:
    return (
        landmark is not None
        and landmark.visibility is not None
        and landmark.visibility > VISIBILITY_THRESHOLD
    )


def is_valid_frame(frame: Optional[PoseFrame]) -> bool:
    return frame is not None and len(frame) == POSE_LANDMARK_COUNT


def get_visible_landmarks(
    frame: Optional[PoseFrame],
    indices: Iterable[PoseLandmark],
) -> Optional[List[Landmark]]:
    """
    Picks the requested landmarks from a frame.
    Returns None if the frame is malformed or any of them is not usable,
    so callers can treat both cases as "no signal".
    """
    if not is_valid_frame(frame):
        return None

    picked = []
    for idx in indices:
        lm = frame[idx]
        if not is_landmark_visible(lm):
            return None
        picked.append(lm)
    return picked


def landmark_from_dict(data: Dict[str, Any]) -> Landmark:
    return Landmark(
        x=float(data["x"]),
        y=float(data["y"]),
        z=float(data.get("z", 0.0) or 0.0),
        visibility=None if data.get("visibility") is None else float(data["visibility"]),
    )


def frame_from_dicts(items: Iterable[Dict[str, Any]]) -> List[Landmark]:
    return [landmark_from_dict(item) for item in items]
