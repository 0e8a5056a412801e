"""
Exercise state machine driver.

An ExerciseEvaluator owns one EvaluatorState and one exercise rules object.
The rules decide *what* an exercise measures, how its phases advance and which
form checks apply; the evaluator decides *when* things happen: visibility
gating, rep bookkeeping, scoring and event emission.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Protocol, Sequence

from . import scoring
from .landmarks import Frame, Landmark, are_all_landmarks_visible
from .results import (
    FormCheckResult,
    FrameEvaluationResult,
    StateMachineEvent,
    TransitionData,
)

logger = logging.getLogger(__name__)

DEFAULT_VISIBILITY_THRESHOLD = 0.5

StateMachineListener = Callable[[StateMachineEvent], None]


class PhaseStep(NamedTuple):
    phase: Enum
    rep_completed: bool = False


class ExerciseRules(Protocol):
    exercise_type: str
    initial_phase: Enum
    required_landmarks: Sequence[int]
    check_weights: Optional[Sequence[float]]

    def measure(self, landmarks: Frame) -> TransitionData:
        ...

    def next_phase(self, phase: Enum, measurements: TransitionData) -> PhaseStep:
        ...

    def evaluate_form(
        self, state: "EvaluatorState", landmarks: Frame, measurements: TransitionData
    ) -> List[FormCheckResult]:
        ...


@dataclass
class EvaluatorState:
    phase: Enum
    rep_count: int = 0
    frame_scores: List[int] = field(default_factory=list)
    current_rep_scores: List[int] = field(default_factory=list)
    rep_scores: List[int] = field(default_factory=list)
    previous_frame: Optional[TransitionData] = None
    # Measurements from the first detected frame of the current rep
    rep_start: Optional[TransitionData] = None
    session_start: float = field(default_factory=time.time)
    last_phase_change: float = field(default_factory=time.time)


class ExerciseEvaluator:
    """
    Frame-by-frame evaluator for a single exercise.

    Frames must be fed in capture order. One instance per training session;
    instances are not shared between sessions or threads.
    """

    def __init__(self, rules: ExerciseRules):
        self.rules = rules
        self.state = EvaluatorState(phase=rules.initial_phase)
        self._listeners: List[StateMachineListener] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def exercise_type(self) -> str:
        return self.rules.exercise_type

    @property
    def current_phase(self) -> Enum:
        return self.state.phase

    @property
    def rep_count(self) -> int:
        return self.state.rep_count

    def get_rep_scores(self) -> List[int]:
        return list(self.state.rep_scores)

    def get_frame_scores(self) -> List[int]:
        return list(self.state.frame_scores)

    def get_session_duration(self) -> float:
        return time.time() - self.state.session_start

    def get_time_since_phase_change(self) -> float:
        return time.time() - self.state.last_phase_change

    def is_in_active_rep(self) -> bool:
        return self.state.phase != self.rules.initial_phase

    def get_state_summary(self) -> Dict[str, Any]:
        return {
            "exercise_type": self.exercise_type,
            "phase": self.state.phase.value,
            "rep_count": self.state.rep_count,
            "rep_scores": self.get_rep_scores(),
            "overall_score": scoring.calculate_overall_score(self.state.frame_scores),
            "in_active_rep": self.is_in_active_rep(),
        }

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StateMachineListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateMachineListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: StateMachineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("State machine listener failed on %s event", event.type)

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------

    def has_required_landmarks(
        self, landmarks: Frame, threshold: float = DEFAULT_VISIBILITY_THRESHOLD
    ) -> bool:
        return are_all_landmarks_visible(landmarks, self.rules.required_landmarks, threshold)

    def process_frame(
        self, landmarks: Sequence[Landmark], timestamp: Optional[float] = None
    ) -> FrameEvaluationResult:
        """
        Evaluate one frame.

        Frames missing a required landmark score 0 and leave phase, rep count
        and score history untouched.
        """
        if timestamp is None:
            timestamp = time.time()
        landmarks = list(landmarks)

        if not self.has_required_landmarks(landmarks):
            return FrameEvaluationResult(
                timestamp=timestamp,
                score=0,
                checks=[],
                phase=self.state.phase,
                rep_count=self.state.rep_count,
                landmarks=landmarks,
                has_required_landmarks=False,
            )

        measurements = self.rules.measure(landmarks)
        measurements.previous_frame = self.state.previous_frame

        if self.state.phase == self.rules.initial_phase and self.state.rep_start is None:
            self.state.rep_start = replace(measurements, previous_frame=None)

        step = self.rules.next_phase(self.state.phase, measurements)
        if step.rep_completed:
            self.increment_rep()
        self.transition_to(step.phase)

        checks = self.rules.evaluate_form(self.state, landmarks, measurements)
        score = self.calculate_score(checks)
        self.add_frame_score(score)

        self.state.previous_frame = replace(measurements, previous_frame=None)

        return FrameEvaluationResult(
            timestamp=timestamp,
            score=score,
            checks=checks,
            phase=self.state.phase,
            rep_count=self.state.rep_count,
            landmarks=landmarks,
            has_required_landmarks=True,
        )

    def transition_to(self, new_phase: Enum) -> None:
        if new_phase == self.state.phase:
            return

        previous = self.state.phase
        self.state.phase = new_phase
        self.state.last_phase_change = time.time()
        if new_phase == self.rules.initial_phase:
            self.state.rep_start = None

        logger.debug("%s: %s -> %s", self.exercise_type, previous.value, new_phase.value)
        self._emit(
            StateMachineEvent(
                type="phase_change",
                timestamp=self.state.last_phase_change,
                previous_phase=previous,
                current_phase=new_phase,
                rep_count=self.state.rep_count,
            )
        )

    def increment_rep(self) -> None:
        self.state.rep_count += 1

        if self.state.current_rep_scores:
            rep_score = scoring.calculate_rep_score(self.state.current_rep_scores)
            self.state.rep_scores.append(rep_score)
            self.state.current_rep_scores = []

        self._emit(
            StateMachineEvent(
                type="rep_complete",
                timestamp=time.time(),
                current_phase=self.state.phase,
                rep_count=self.state.rep_count,
            )
        )

    def add_frame_score(self, score: int) -> None:
        self.state.frame_scores.append(score)
        self.state.current_rep_scores.append(score)

    def calculate_score(self, checks: Sequence[FormCheckResult]) -> int:
        return scoring.calculate_frame_score_from_results(checks, self.rules.check_weights)

    def reset(self) -> None:
        self.state = EvaluatorState(phase=self.rules.initial_phase)
