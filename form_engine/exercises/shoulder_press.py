"""
Shoulder press rules.

Phase driven by the left shoulder-elbow-wrist angle (larger = more extended):
    DOWN -> PRESSING -> TOP -> LOWERING -> DOWN (+1 rep)
"""

from typing import List

from ..kinematics import calculate_angle, check_wrist_above_head, is_angle_in_range
from ..landmarks import Frame, PoseLandmark
from ..phases import ShoulderPressPhase
from ..results import FormCheckResult, TransitionData
from ..state_machine import EvaluatorState, ExerciseEvaluator, PhaseStep
from ..thresholds_config import ANGLE_THRESHOLDS, PHASE_THRESHOLDS

ANGLES = ANGLE_THRESHOLDS["shoulderpress"]
PHASES = PHASE_THRESHOLDS["shoulderpress"]


class ShoulderPressRules:
    exercise_type = "shoulderpress"
    initial_phase = ShoulderPressPhase.DOWN
    required_landmarks = [
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.LEFT_WRIST,
    ]
    check_weights = None

    def measure(self, landmarks: Frame) -> TransitionData:
        shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        wrist = landmarks[PoseLandmark.LEFT_WRIST]
        return TransitionData(
            landmarks=list(landmarks),
            angles={"elbow": calculate_angle(shoulder, elbow, wrist)},
        )

    def next_phase(self, phase: ShoulderPressPhase, measurements: TransitionData) -> PhaseStep:
        elbow = measurements.angles["elbow"]

        if phase == ShoulderPressPhase.DOWN:
            if elbow > PHASES["start_pressing"]:
                return PhaseStep(ShoulderPressPhase.PRESSING)
        elif phase == ShoulderPressPhase.PRESSING:
            if elbow >= PHASES["reach_top"]:
                return PhaseStep(ShoulderPressPhase.TOP)
            if elbow <= PHASES["reach_bottom"]:
                return PhaseStep(ShoulderPressPhase.DOWN)
        elif phase == ShoulderPressPhase.TOP:
            if elbow < PHASES["start_lowering"]:
                return PhaseStep(ShoulderPressPhase.LOWERING)
        elif phase == ShoulderPressPhase.LOWERING:
            if elbow <= PHASES["reach_bottom"]:
                return PhaseStep(ShoulderPressPhase.DOWN, rep_completed=True)
            if elbow >= PHASES["reach_top"]:
                return PhaseStep(ShoulderPressPhase.TOP)
        else:
            raise ValueError(f"Unknown shoulder press phase: {phase}")
        return PhaseStep(phase)

    def evaluate_form(
        self, state: EvaluatorState, landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        nose = landmarks[PoseLandmark.NOSE]
        wrist = landmarks[PoseLandmark.LEFT_WRIST]
        elbow_angle = measurements.angles["elbow"]
        at_top = state.phase == ShoulderPressPhase.TOP

        if at_top:
            window = ANGLES["elbow_top"]
            extension_ok = is_angle_in_range(elbow_angle, window["min"], window["max"])
            overhead_ok = check_wrist_above_head(nose, wrist)
        else:
            extension_ok = True
            overhead_ok = True

        return [
            FormCheckResult(
                name="elbow_extension",
                passed=extension_ok,
                value=elbow_angle,
                description="Elbow angle at top (160-180 deg)",
                feedback=None if extension_ok else "Fully extend your arms overhead",
            ),
            FormCheckResult(
                name="wrist_above_head",
                passed=overhead_ok,
                value=nose.y - wrist.y,
                description="Wrist height (above head)",
                feedback=None if overhead_ok else "Press your hands above your head",
            ),
        ]


def ShoulderPressEvaluator() -> ExerciseEvaluator:
    return ExerciseEvaluator(ShoulderPressRules())
