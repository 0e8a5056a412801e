"""
Side (lateral) raise rules.

Phase driven by arm elevation, the shoulder.y - elbow.y difference averaged
over both arms. Positive means the elbows are above the shoulders; arms hanging
at the sides give roughly -0.2.
    DOWN -> RAISING -> TOP -> LOWERING -> DOWN (+1 rep)
"""

from typing import List

from ..kinematics import check_arm_elevation, check_symmetry
from ..landmarks import Frame, PoseLandmark
from ..phases import SideRaisePhase
from ..results import FormCheckResult, TransitionData
from ..state_machine import EvaluatorState, ExerciseEvaluator, PhaseStep
from ..thresholds_config import ANGLE_THRESHOLDS, FORM_TOLERANCES, PHASE_THRESHOLDS

PHASES = PHASE_THRESHOLDS["sideraise"]
TOP_Y = PHASES["top_y"]
DOWN_Y = PHASES["down_y"]


class SideRaiseRules:
    exercise_type = "sideraise"
    initial_phase = SideRaisePhase.DOWN
    required_landmarks = [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
    ]
    check_weights = None

    def measure(self, landmarks: Frame) -> TransitionData:
        left = landmarks[PoseLandmark.LEFT_SHOULDER].y - landmarks[PoseLandmark.LEFT_ELBOW].y
        right = landmarks[PoseLandmark.RIGHT_SHOULDER].y - landmarks[PoseLandmark.RIGHT_ELBOW].y
        return TransitionData(
            landmarks=list(landmarks),
            distances={
                "left_elevation": left,
                "right_elevation": right,
                "elevation": (left + right) / 2,
            },
        )

    def next_phase(self, phase: SideRaisePhase, measurements: TransitionData) -> PhaseStep:
        elevation = measurements.distances["elevation"]

        if phase == SideRaisePhase.DOWN:
            if elevation > -DOWN_Y:
                return PhaseStep(SideRaisePhase.RAISING)
        elif phase == SideRaisePhase.RAISING:
            if abs(elevation) <= TOP_Y:
                return PhaseStep(SideRaisePhase.TOP)
            if elevation < -DOWN_Y:
                return PhaseStep(SideRaisePhase.DOWN)
        elif phase == SideRaisePhase.TOP:
            if elevation < -TOP_Y:
                return PhaseStep(SideRaisePhase.LOWERING)
        elif phase == SideRaisePhase.LOWERING:
            if elevation < -DOWN_Y:
                return PhaseStep(SideRaisePhase.DOWN, rep_completed=True)
            if abs(elevation) <= TOP_Y:
                return PhaseStep(SideRaisePhase.TOP)
        else:
            raise ValueError(f"Unknown side raise phase: {phase}")
        return PhaseStep(phase)

    def evaluate_form(
        self, state: EvaluatorState, landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        left_shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        left_elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        right_elbow = landmarks[PoseLandmark.RIGHT_ELBOW]

        height = check_arm_elevation(left_shoulder, left_elbow, FORM_TOLERANCES["arm_elevation"])
        # Height only judged at the top of the raise
        height_ok = height.passed if state.phase == SideRaisePhase.TOP else True

        symmetry = check_symmetry(
            left_elbow, right_elbow, ANGLE_THRESHOLDS["sideraise"]["symmetry_tolerance"]
        )

        return [
            FormCheckResult(
                name="arm_elevation",
                passed=height_ok,
                value=height.diff,
                description="Arm height (shoulder level)",
                feedback=None if height_ok else "Raise your elbows to shoulder height",
            ),
            FormCheckResult(
                name="symmetry",
                passed=symmetry.passed,
                value=symmetry.diff,
                description="Left-right symmetry",
                feedback=None if symmetry.passed else "Raise both arms evenly",
            ),
        ]


def SideRaiseEvaluator() -> ExerciseEvaluator:
    return ExerciseEvaluator(SideRaiseRules())
