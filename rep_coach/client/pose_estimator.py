# rep_coach/client/pose_estimator.py

import os
os.environ['TF_CPP_MIN_LOG_LEVEL'] = '3'

import cv2
import mediapipe as mp

from rep_coach.client.pose_utils import Landmark

mp_pose = mp.solutions.pose


class PoseEstimator:
    def __init__(self, min_detection_confidence=0.5, min_tracking_confidence=0.5):
        self.pose = mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def process(self, frame_bgr):
        """
        Input: BGR frame from OpenCV.
        Output:
          - frame: list of 33 Landmark in normalized coordinates, or None if no pose
          - landmarks: pose_landmarks (for drawing), or None if not detected
        """
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)

        if not results.pose_landmarks:
            return None, None

        frame = [
            Landmark(x=p.x, y=p.y, z=p.z, visibility=p.visibility)
            for p in results.pose_landmarks.landmark
        ]
        return frame, results.pose_landmarks

    def close(self):
        self.pose.close()
