"""
Realtime Coach - Fast, Rule-Based Feedback During a Set

Turns the stream of FrameEvaluationResults into short cues a client can show
or speak:
1. Rep announcements ("Rep 3")
2. Form warnings taken from the first failed check, held for a few frames
   so the text does not flicker at 30fps
3. A camera/lighting prompt when the body has not been detected for a while

No network calls, so it is safe to run on every frame.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .results import FrameEvaluationResult

PRIORITY_SUCCESS = 1
PRIORITY_WARNING = 2
PRIORITY_ERROR = 3


@dataclass
class RealtimeFeedback:
    type: str  # success | warning | error
    message: str
    priority: int
    check_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "message": self.message,
            "priority": self.priority,
            "check_name": self.check_name,
        }


class RealtimeCoach:
    """
    Usage:
        coach = RealtimeCoach()

        # During the frame loop:
        result = evaluator.process_frame(landmarks)
        cue = coach.update(result)
        if cue:
            send(cue.to_dict())
    """

    UNDETECTED_PROMPT_FRAMES = 30  # ~1s at 30fps
    STICKY_DURATION = 15  # Frames to hold a warning (~0.5s at 30fps)

    CAMERA_PROMPT = "Can't see you clearly. Improve the lighting or step fully into the frame."

    def __init__(self):
        self.last_rep_count = 0
        self.undetected_streak = 0
        self.camera_prompted = False

        # Hysteresis state
        self.sticky_check: Optional[str] = None
        self.sticky_message: Optional[str] = None
        self.sticky_timer = 0

    @property
    def current_message(self) -> Optional[str]:
        """Warning currently on screen, if any."""
        return self.sticky_message

    def update(self, result: FrameEvaluationResult) -> Optional[RealtimeFeedback]:
        """Consume one frame result; return a new cue or None."""
        if not result.has_required_landmarks:
            self.undetected_streak += 1
            if self.undetected_streak >= self.UNDETECTED_PROMPT_FRAMES and not self.camera_prompted:
                self.camera_prompted = True
                return RealtimeFeedback("error", self.CAMERA_PROMPT, PRIORITY_ERROR)
            return None

        self.undetected_streak = 0
        self.camera_prompted = False

        candidates: List[RealtimeFeedback] = []

        if result.rep_count > self.last_rep_count:
            candidates.append(
                RealtimeFeedback("success", f"Rep {result.rep_count}", PRIORITY_SUCCESS)
            )
        self.last_rep_count = result.rep_count

        warning = self._update_sticky_warning(result)
        if warning:
            candidates.append(warning)

        if not candidates:
            return None
        return max(candidates, key=lambda f: f.priority)

    def _update_sticky_warning(self, result: FrameEvaluationResult) -> Optional[RealtimeFeedback]:
        failed = next((c for c in result.failed_checks if c.feedback), None)

        if failed:
            is_new = failed.name != self.sticky_check
            self.sticky_check = failed.name
            self.sticky_message = failed.feedback
            self.sticky_timer = self.STICKY_DURATION
            if is_new:
                return RealtimeFeedback("warning", failed.feedback, PRIORITY_WARNING, failed.name)
            return None

        # Hold the previous warning for a little while
        if self.sticky_timer > 0:
            self.sticky_timer -= 1
        else:
            self.sticky_check = None
            self.sticky_message = None
        return None

    @staticmethod
    def score_message(score: int) -> str:
        """End-of-set cue for the final score."""
        if score >= 90:
            return f"Score {score}. Excellent!"
        if score >= 80:
            return f"Score {score}. Good form."
        if score >= 60:
            return f"Score {score}. There is room for improvement."
        return f"Score {score}. Let's check your form."

    def reset(self):
        """Reset counters and hysteresis, e.g. when a new set starts."""
        self.last_rep_count = 0
        self.undetected_streak = 0
        self.camera_prompted = False
        self.sticky_check = None
        self.sticky_message = None
        self.sticky_timer = 0
