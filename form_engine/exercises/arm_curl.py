"""
Arm curl rules.

Phase driven by the left shoulder-elbow-wrist angle (smaller = more curled):
    DOWN -> CURLING -> TOP -> LOWERING -> DOWN (+1 rep)

The elbow-fixed check is the anti-momentum rule: the elbow has to stay at the
side of the torso and must not drift vertically from where it was when the
rep started.
"""

from typing import List

from ..kinematics import calculate_angle, check_elbow_fixed, is_angle_in_range
from ..landmarks import Frame, PoseLandmark
from ..phases import ArmCurlPhase
from ..results import FormCheckResult, TransitionData
from ..state_machine import EvaluatorState, ExerciseEvaluator, PhaseStep
from ..thresholds_config import ANGLE_THRESHOLDS, FORM_TOLERANCES, PHASE_THRESHOLDS

ANGLES = ANGLE_THRESHOLDS["armcurl"]
PHASES = PHASE_THRESHOLDS["armcurl"]


class ArmCurlRules:
    exercise_type = "armcurl"
    initial_phase = ArmCurlPhase.DOWN
    required_landmarks = [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.LEFT_HIP,
    ]
    check_weights = None

    def measure(self, landmarks: Frame) -> TransitionData:
        shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        wrist = landmarks[PoseLandmark.LEFT_WRIST]
        return TransitionData(
            landmarks=list(landmarks),
            angles={
                "elbow": calculate_angle(shoulder, elbow, wrist),
                "elbow_y": elbow.y,
            },
        )

    def next_phase(self, phase: ArmCurlPhase, measurements: TransitionData) -> PhaseStep:
        elbow = measurements.angles["elbow"]

        if phase == ArmCurlPhase.DOWN:
            if elbow < PHASES["start_curling"]:
                return PhaseStep(ArmCurlPhase.CURLING)
        elif phase == ArmCurlPhase.CURLING:
            if elbow <= PHASES["reach_top"]:
                return PhaseStep(ArmCurlPhase.TOP)
            if elbow >= PHASES["reach_bottom"]:
                return PhaseStep(ArmCurlPhase.DOWN)
        elif phase == ArmCurlPhase.TOP:
            if elbow > PHASES["start_lowering"]:
                return PhaseStep(ArmCurlPhase.LOWERING)
        elif phase == ArmCurlPhase.LOWERING:
            if elbow >= PHASES["reach_bottom"]:
                return PhaseStep(ArmCurlPhase.DOWN, rep_completed=True)
            if elbow <= PHASES["reach_top"]:
                return PhaseStep(ArmCurlPhase.TOP)
        else:
            raise ValueError(f"Unknown arm curl phase: {phase}")
        return PhaseStep(phase)

    def evaluate_form(
        self, state: EvaluatorState, landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        shoulder = landmarks[PoseLandmark.LEFT_SHOULDER]
        elbow = landmarks[PoseLandmark.LEFT_ELBOW]
        hip = landmarks[PoseLandmark.LEFT_HIP]
        elbow_angle = measurements.angles["elbow"]
        tolerance = FORM_TOLERANCES["elbow_movement"]

        if state.phase == ArmCurlPhase.TOP:
            window = ANGLES["elbow_top"]
            curl_ok = is_angle_in_range(elbow_angle, window["min"], window["max"])
        else:
            curl_ok = True

        # Drift is measured against the rep's starting elbow height when known
        if state.rep_start is not None:
            movement = abs(elbow.y - state.rep_start.angles["elbow_y"])
        else:
            movement = 0.0
        fixed_ok = check_elbow_fixed(elbow, shoulder, hip, tolerance) and movement <= tolerance

        return [
            FormCheckResult(
                name="elbow_angle",
                passed=curl_ok,
                value=elbow_angle,
                description="Elbow angle at top (30-50 deg)",
                feedback=None if curl_ok else "Curl the weight all the way up",
            ),
            FormCheckResult(
                name="elbow_fixed",
                passed=fixed_ok,
                value=movement,
                description="Elbow fixed (no swinging)",
                feedback=None if fixed_ok else "Keep your elbow pinned to your side",
            ),
        ]


def ArmCurlEvaluator() -> ExerciseEvaluator:
    return ExerciseEvaluator(ArmCurlRules())
