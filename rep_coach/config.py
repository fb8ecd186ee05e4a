# rep_coach/config.py

import os
import dotenv
dotenv.load_dotenv()

BACKEND_URL = os.getenv("REP_COACH_BACKEND_URL", "http://127.0.0.1:8000")
REQUEST_TIMEOUT = float(os.getenv("REP_COACH_REQUEST_TIMEOUT", "2.0"))

BACKEND_HOST = os.getenv("REP_COACH_BACKEND_HOST", "127.0.0.1")
BACKEND_PORT = int(os.getenv("REP_COACH_BACKEND_PORT", "8000"))

CAMERA_INDEX = int(os.getenv("REP_COACH_CAMERA_INDEX", "0"))

# Seconds
COUNTDOWN_SECONDS = int(os.getenv("REP_COACH_COUNTDOWN_SECONDS", "3"))
EXERCISE_REST_SECONDS = int(os.getenv("REP_COACH_EXERCISE_REST_SECONDS", "60"))

LOG_LEVEL = os.getenv("REP_COACH_LOG_LEVEL", "INFO").upper()
