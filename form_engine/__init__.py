"""
Form Evaluation Engine

Scores exercise form from 33-point pose landmarks, frame by frame:
1. ExerciseEvaluator - per-exercise phase machine, rep counting and form checks
2. Scoring - frame/rep/session scores, grades, consistency, trend, form issues
3. EvaluationSession - one training session, summarized for saving
4. RealtimeCoach - short on-screen/voice cues during a set
"""

from .factory import create_evaluator, get_available_exercises
from .feedback import RealtimeCoach, RealtimeFeedback
from .landmarks import Landmark, PoseLandmark, frame_from_dicts
from .results import FormCheckResult, FrameEvaluationResult, SessionEvaluationResult
from .session import EvaluationSession
from .state_machine import ExerciseEvaluator

__all__ = [
    "create_evaluator",
    "get_available_exercises",
    "ExerciseEvaluator",
    "EvaluationSession",
    "RealtimeCoach",
    "RealtimeFeedback",
    "Landmark",
    "PoseLandmark",
    "frame_from_dicts",
    "FormCheckResult",
    "FrameEvaluationResult",
    "SessionEvaluationResult",
]
