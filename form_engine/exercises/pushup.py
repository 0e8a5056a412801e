"""
Push-up rules.

Phase driven by the left shoulder-elbow-wrist angle:
    UP -> DESCENDING -> BOTTOM -> ASCENDING -> UP (+1 rep)
"""

from typing import List

from ..kinematics import calculate_angle, check_body_line, is_angle_in_range
from ..landmarks import Frame, PoseLandmark
from ..phases import PushupPhase
from ..results import FormCheckResult, TransitionData
from ..state_machine import EvaluatorState, ExerciseEvaluator, PhaseStep
from ..thresholds_config import ANGLE_THRESHOLDS, PHASE_THRESHOLDS

ANGLES = ANGLE_THRESHOLDS["pushup"]
PHASES = PHASE_THRESHOLDS["pushup"]


class PushupRules:
    exercise_type = "pushup"
    initial_phase = PushupPhase.UP
    required_landmarks = [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.LEFT_ANKLE,
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

    def next_phase(self, phase: PushupPhase, measurements: TransitionData) -> PhaseStep:
        elbow = measurements.angles["elbow"]

        if phase == PushupPhase.UP:
            if elbow < PHASES["start_descending"]:
                return PhaseStep(PushupPhase.DESCENDING)
        elif phase == PushupPhase.DESCENDING:
            if elbow <= PHASES["reach_bottom"]:
                return PhaseStep(PushupPhase.BOTTOM)
            if elbow >= PHASES["reach_up"]:
                return PhaseStep(PushupPhase.UP)
        elif phase == PushupPhase.BOTTOM:
            if elbow > PHASES["start_ascending"]:
                return PhaseStep(PushupPhase.ASCENDING)
        elif phase == PushupPhase.ASCENDING:
            if elbow >= PHASES["reach_up"]:
                return PhaseStep(PushupPhase.UP, rep_completed=True)
            if elbow <= PHASES["reach_bottom"]:
                return PhaseStep(PushupPhase.BOTTOM)
        else:
            raise ValueError(f"Unknown push-up phase: {phase}")
        return PhaseStep(phase)

    def evaluate_form(
        self, state: EvaluatorState, landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        hip = landmarks[PoseLandmark.LEFT_HIP]
        ankle = landmarks[PoseLandmark.LEFT_ANKLE]
        elbow_angle = measurements.angles["elbow"]

        if state.phase == PushupPhase.BOTTOM:
            window = ANGLES["elbow_angle"]
            depth_ok = is_angle_in_range(elbow_angle, window["min"], window["max"])
        else:
            depth_ok = True

        line = check_body_line(shoulder, hip, ankle, ANGLES["body_line"]["min"])

        return [
            FormCheckResult(
                name="elbow_angle",
                passed=depth_ok,
                value=elbow_angle,
                description="Elbow angle (80-100 deg)",
                feedback=None if depth_ok else "Lower until your elbows reach about 90 degrees",
            ),
            FormCheckResult(
                name="body_line",
                passed=line.passed,
                value=line.angle,
                description="Body line (straight)",
                feedback=None if line.passed else "Keep your body in one straight line",
            ),
        ]


def PushupEvaluator() -> ExerciseEvaluator:
    return ExerciseEvaluator(PushupRules())
