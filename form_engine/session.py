"""
Evaluation session management for the form engine.

One EvaluationSession per training session: it feeds frames to a single
ExerciseEvaluator, remembers per-frame checks for issue analysis, and turns
everything into a SessionEvaluationResult when the user stops.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from . import scoring
from .factory import create_evaluator
from .landmarks import Landmark
from .results import FormCheckResult, FrameEvaluationResult, SessionEvaluationResult
from .state_machine import ExerciseEvaluator

logger = logging.getLogger(__name__)


@dataclass
class EvaluationSession:
    """
    Usage:
        session = EvaluationSession.for_exercise("squat")
        session.start()

        for landmarks in frames:
            result = session.process_frame(landmarks)

        summary = session.finish().to_dict()
    """

    evaluator: ExerciseEvaluator
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    keep_frame_results: bool = False
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    first_timestamp: Optional[float] = None
    frames_processed: int = 0
    frames_undetected: int = 0
    frame_checks: List[List[FormCheckResult]] = field(default_factory=list)
    frame_results: List[FrameEvaluationResult] = field(default_factory=list)

    @classmethod
    def for_exercise(
        cls, exercise_type: str, keep_frame_results: bool = False
    ) -> Optional["EvaluationSession"]:
        """Create a session for a named exercise, or None if it is not supported."""
        evaluator = create_evaluator(exercise_type)
        if evaluator is None:
            logger.warning("Unknown exercise type '%s'", exercise_type)
            return None
        return cls(evaluator=evaluator, keep_frame_results=keep_frame_results)

    @property
    def exercise_type(self) -> str:
        return self.evaluator.exercise_type

    @property
    def is_active(self) -> bool:
        return self.started_at is not None and self.finished_at is None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at:
            end = self.finished_at or time.time()
            return end - self.started_at
        return None

    def start(self, timestamp: Optional[float] = None):
        """Start (or restart) the session with a fresh evaluator."""
        self.evaluator.reset()
        self.started_at = timestamp if timestamp is not None else time.time()
        self.first_timestamp = timestamp
        self.finished_at = None
        self.frames_processed = 0
        self.frames_undetected = 0
        self.frame_checks = []
        self.frame_results = []
        logger.info("Session %s started (%s)", self.id, self.exercise_type)

    def process_frame(
        self, landmarks: Sequence[Landmark], timestamp: Optional[float] = None
    ) -> FrameEvaluationResult:
        if self.started_at is None:
            self.start(timestamp)
        if self.first_timestamp is None and timestamp is not None:
            self.first_timestamp = timestamp

        result = self.evaluator.process_frame(landmarks, timestamp)
        self.frames_processed += 1
        if result.has_required_landmarks:
            self.frame_checks.append(result.checks)
        else:
            self.frames_undetected += 1
        if self.keep_frame_results:
            self.frame_results.append(result)
        return result

    def finish(self, timestamp: Optional[float] = None) -> SessionEvaluationResult:
        """End the session and build the summary for the session-save API."""
        if timestamp is not None:
            # Caller clock: both ends must come from it, not from time.time()
            if self.first_timestamp is not None:
                self.started_at = self.first_timestamp
            else:
                self.started_at = timestamp
            self.finished_at = timestamp
        else:
            if self.started_at is None:
                self.started_at = time.time()
            self.finished_at = time.time()

        frame_scores = self.evaluator.get_frame_scores()
        rep_scores = self.evaluator.get_rep_scores()
        average = float(np.mean(frame_scores)) if frame_scores else 0.0

        result = SessionEvaluationResult(
            exercise_type=self.exercise_type,
            start_time=self.started_at,
            end_time=self.finished_at,
            total_reps=self.evaluator.rep_count,
            overall_score=scoring.calculate_overall_score(frame_scores),
            average_frame_score=average,
            rep_scores=rep_scores,
            stats=scoring.generate_session_stats(rep_scores),
            form_issues=scoring.analyze_form_issues(self.frame_checks),
            frames_processed=self.frames_processed,
            frames_undetected=self.frames_undetected,
            frame_results=list(self.frame_results) if self.keep_frame_results else None,
        )
        logger.info(
            "Session %s finished: %s reps, score %s (%s)",
            self.id,
            result.total_reps,
            result.overall_score,
            result.stats.grade,
        )
        return result

    def get_progress(self) -> Dict[str, Any]:
        """Get current session progress for UI display."""
        return {
            "session_id": self.id,
            "exercise_type": self.exercise_type,
            "is_active": self.is_active,
            "phase": self.evaluator.current_phase.value,
            "rep_count": self.evaluator.rep_count,
            "rep_scores": self.evaluator.get_rep_scores(),
            "current_score": scoring.calculate_overall_score(self.evaluator.get_frame_scores()),
            "frames_processed": self.frames_processed,
            "frames_undetected": self.frames_undetected,
            "duration_seconds": self.duration_seconds,
        }
