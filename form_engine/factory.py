"""Evaluator factory.

Maps user-facing exercise names ("Arm Curl", "arm_curl", "arm-curl") onto the
rules registry and wires a fresh ExerciseEvaluator for each call, so callers
never share state between sessions.
"""

from typing import List, Optional

from .exercises import EXERCISE_RULES
from .state_machine import ExerciseEvaluator


def normalize_exercise_type(exercise_type: str) -> str:
    normalized = exercise_type.strip().lower()
    for sep in ("_", "-", " "):
        normalized = normalized.replace(sep, "")
    return normalized


def get_available_exercises() -> List[str]:
    """Return the list of registered exercise types."""
    return list(EXERCISE_RULES.keys())


def is_supported_exercise(exercise_type: str) -> bool:
    return normalize_exercise_type(exercise_type) in EXERCISE_RULES


def create_evaluator(exercise_type: str) -> Optional[ExerciseEvaluator]:
    """Instantiate an evaluator by exercise name. Unknown names give None."""
    rules_cls = EXERCISE_RULES.get(normalize_exercise_type(exercise_type))
    if rules_cls is None:
        return None
    return ExerciseEvaluator(rules_cls())
