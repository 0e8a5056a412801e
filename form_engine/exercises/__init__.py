"""
Exercise rules

Five supported exercises, each a rules object plugged into ExerciseEvaluator:
1. SquatRules - hip-knee-ankle angle, side view
2. PushupRules - shoulder-elbow-wrist angle, side view
3. ArmCurlRules - shoulder-elbow-wrist angle with an anti-momentum check
4. SideRaiseRules - elbow height relative to the shoulders, front view
5. ShoulderPressRules - shoulder-elbow-wrist angle with an overhead check
"""

from .arm_curl import ArmCurlEvaluator, ArmCurlRules
from .pushup import PushupEvaluator, PushupRules
from .shoulder_press import ShoulderPressEvaluator, ShoulderPressRules
from .side_raise import SideRaiseEvaluator, SideRaiseRules
from .squat import SquatEvaluator, SquatRules

# Registry of available rules, keyed by normalized exercise type
EXERCISE_RULES = {
    "squat": SquatRules,
    "pushup": PushupRules,
    "armcurl": ArmCurlRules,
    "sideraise": SideRaiseRules,
    "shoulderpress": ShoulderPressRules,
}

__all__ = [
    "EXERCISE_RULES",
    "SquatRules",
    "PushupRules",
    "ArmCurlRules",
    "SideRaiseRules",
    "ShoulderPressRules",
    "SquatEvaluator",
    "PushupEvaluator",
    "ArmCurlEvaluator",
    "SideRaiseEvaluator",
    "ShoulderPressEvaluator",
]
