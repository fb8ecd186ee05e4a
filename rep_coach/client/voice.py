# rep_coach/client/voice.py

import logging
from threading import Thread
from typing import Dict, Iterable, Optional

import pyttsx3

from rep_coach.client.rep_logic import FormFeedback

logger = logging.getLogger(__name__)

# Same feedback is not spoken again within this many seconds
SPEAK_COOLDOWN_S = 4.0


class FeedbackVoice:
    """
    Speaks form feedback, at most one message per frame, and never repeats
    the same message within `cooldown` seconds.
    Each message gets its own pyttsx3 engine on a daemon thread.
    """

    def __init__(self, cooldown: float = SPEAK_COOLDOWN_S, rate: int = 165):
        self.cooldown = cooldown
        self.rate = rate
        self._last_spoken: Dict[str, float] = {}

    def announce(self, feedback: Iterable[FormFeedback], now: float) -> Optional[str]:
        """Starts speaking the first message not heard recently; returns it, or None."""
        for item in feedback:
            if now - self._last_spoken.get(item.message, float("-inf")) < self.cooldown:
                continue
            self._last_spoken[item.message] = now
            Thread(target=self._speak, args=(item.message,), daemon=True).start()
            return item.message
        return None

    def _speak(self, text: str):
        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", self.rate)
            engine.say(text)
            engine.runAndWait()
            engine.stop()
        except Exception as e:
            logger.warning("TTS failed for %r: %s", text, e)
