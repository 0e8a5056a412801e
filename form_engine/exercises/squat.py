"""
Squat rules.

Phase driven by the left hip-knee-ankle angle:
    STANDING -> DESCENDING -> BOTTOM -> ASCENDING -> STANDING (+1 rep)

Checks:
- knee angle 90-110 deg (only judged at the bottom)
- knee not past the toe
- back straight (shoulder-hip-knee)
"""

from typing import List

from ..kinematics import (
    calculate_angle,
    check_back_straight,
    check_knee_over_toe,
    is_angle_in_range,
)
from ..landmarks import Frame, PoseLandmark
from ..phases import SquatPhase
from ..results import FormCheckResult, TransitionData
from ..state_machine import EvaluatorState, ExerciseEvaluator, PhaseStep
from ..thresholds_config import ANGLE_THRESHOLDS, FORM_TOLERANCES, PHASE_THRESHOLDS

ANGLES = ANGLE_THRESHOLDS["squat"]
PHASES = PHASE_THRESHOLDS["squat"]


class SquatRules:
    exercise_type = "squat"
    initial_phase = SquatPhase.STANDING
    required_landmarks = [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.LEFT_KNEE,
        PoseLandmark.LEFT_ANKLE,
        PoseLandmark.LEFT_FOOT_INDEX,
    ]
    check_weights = None

    def measure(self, landmarks: Frame) -> TransitionData:
        hip = landmarks[PoseLandmark.LEFT_HIP]
        knee = landmarks[PoseLandmark.LEFT_KNEE]
        ankle = landmarks[PoseLandmark.LEFT_ANKLE]
        return TransitionData(
            landmarks=list(landmarks),
            angles={"knee": calculate_angle(hip, knee, ankle)},
        )

    def next_phase(self, phase: SquatPhase, measurements: TransitionData) -> PhaseStep:
        knee = measurements.angles["knee"]

        if phase == SquatPhase.STANDING:
            if knee < PHASES["start_descending"]:
                return PhaseStep(SquatPhase.DESCENDING)
        elif phase == SquatPhase.DESCENDING:
            if knee <= PHASES["reach_bottom"]:
                return PhaseStep(SquatPhase.BOTTOM)
            if knee >= PHASES["reach_standing"]:
                # aborted descent
                return PhaseStep(SquatPhase.STANDING)
        elif phase == SquatPhase.BOTTOM:
            if knee > PHASES["start_ascending"]:
                return PhaseStep(SquatPhase.ASCENDING)
        elif phase == SquatPhase.ASCENDING:
            if knee >= PHASES["reach_standing"]:
                return PhaseStep(SquatPhase.STANDING, rep_completed=True)
            if knee <= PHASES["reach_bottom"]:
                return PhaseStep(SquatPhase.BOTTOM)
        else:
            raise ValueError(f"Unknown squat phase: {phase}")
        return PhaseStep(phase)

    def evaluate_form(
        self, state: EvaluatorState, landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        hip = landmarks[PoseLandmark.LEFT_HIP]
        knee = landmarks[PoseLandmark.LEFT_KNEE]
        foot = landmarks[PoseLandmark.LEFT_FOOT_INDEX]
        knee_angle = measurements.angles["knee"]

        checks = []

        # Depth only matters at the bottom
        if state.phase == SquatPhase.BOTTOM:
            window = ANGLES["knee_angle"]
            depth_ok = is_angle_in_range(knee_angle, window["min"], window["max"])
        else:
            depth_ok = True
        checks.append(
            FormCheckResult(
                name="knee_angle",
                passed=depth_ok,
                value=knee_angle,
                description="Knee angle (90-110 deg)",
                feedback=None if depth_ok else "Squat to about a 90-110 degree knee bend",
            )
        )

        toe_ok = check_knee_over_toe(knee, foot, FORM_TOLERANCES["knee_over_toe"])
        checks.append(
            FormCheckResult(
                name="knee_over_toe",
                passed=toe_ok,
                value=knee.x - foot.x,
                description="Knee position (behind toes)",
                feedback=None if toe_ok else "Keep your knees behind your toes",
            )
        )

        back = check_back_straight(shoulder, hip, knee, ANGLES["back_straight"]["min"])
        checks.append(
            FormCheckResult(
                name="back_straight",
                passed=back.passed,
                value=back.angle,
                description="Back angle (upright)",
                feedback=None if back.passed else "Keep your back straight",
            )
        )

        return checks


def SquatEvaluator() -> ExerciseEvaluator:
    return ExerciseEvaluator(SquatRules())
