"""
Result types produced by the form evaluation engine.

FormCheckResult and FrameEvaluationResult are emitted per frame;
SessionStats, FormIssue and SessionEvaluationResult summarize a session and
are what the hosting app forwards to its session-save API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .landmarks import Landmark


def _phase_value(phase: Any) -> Any:
    return phase.value if isinstance(phase, Enum) else phase


@dataclass
class FormCheckResult:
    """Outcome of one form rule on one frame. ``feedback`` is only set on failure."""
    passed: bool
    value: float
    description: str
    feedback: Optional[str] = None
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "value": self.value,
            "description": self.description,
            "feedback": self.feedback,
        }


@dataclass
class FrameEvaluationResult:
    timestamp: float
    score: int
    checks: List[FormCheckResult]
    phase: Enum
    rep_count: int
    landmarks: List[Landmark]
    has_required_landmarks: bool

    @property
    def failed_checks(self) -> List[FormCheckResult]:
        return [c for c in self.checks if not c.passed]

    def to_dict(self, include_landmarks: bool = False) -> Dict[str, Any]:
        data = {
            "timestamp": self.timestamp,
            "score": self.score,
            "checks": [c.to_dict() for c in self.checks],
            "phase": _phase_value(self.phase),
            "rep_count": self.rep_count,
            "has_required_landmarks": self.has_required_landmarks,
        }
        if include_landmarks:
            data["landmarks"] = [lm.to_dict() for lm in self.landmarks]
        return data


@dataclass
class TransitionData:
    """
    Measurements kept from a processed frame so the next frame can compare
    against it (velocity, drift). ``previous_frame`` is never chained deeper
    than one level.
    """
    landmarks: List[Landmark]
    angles: Dict[str, float] = field(default_factory=dict)
    distances: Dict[str, float] = field(default_factory=dict)
    previous_frame: Optional["TransitionData"] = None


@dataclass
class StateMachineEvent:
    type: str  # "phase_change" | "rep_complete"
    timestamp: float
    previous_phase: Optional[Enum] = None
    current_phase: Optional[Enum] = None
    rep_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "timestamp": self.timestamp,
            "previous_phase": _phase_value(self.previous_phase),
            "current_phase": _phase_value(self.current_phase),
            "rep_count": self.rep_count,
        }


@dataclass
class FormIssue:
    """A recurring check failure across a session."""
    id: str
    description: str
    occurrences: int
    severity: str  # low | medium | high
    advice: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "occurrences": self.occurrences,
            "severity": self.severity,
            "advice": self.advice,
        }


@dataclass
class SessionStats:
    total_reps: int = 0
    average_score: int = 0
    best_score: int = 0
    worst_score: int = 0
    consistency: int = 0
    trend: str = "stable"
    grade: str = "F"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_reps": self.total_reps,
            "average_score": self.average_score,
            "best_score": self.best_score,
            "worst_score": self.worst_score,
            "consistency": self.consistency,
            "trend": self.trend,
            "grade": self.grade,
        }


@dataclass
class SessionEvaluationResult:
    exercise_type: str
    start_time: float
    end_time: float
    total_reps: int
    overall_score: int
    average_frame_score: float
    rep_scores: List[int] = field(default_factory=list)
    stats: SessionStats = field(default_factory=SessionStats)
    form_issues: List[FormIssue] = field(default_factory=list)
    frames_processed: int = 0
    frames_undetected: int = 0
    frame_results: Optional[List[FrameEvaluationResult]] = None

    @property
    def duration_seconds(self) -> float:
        return max(0.0, self.end_time - self.start_time)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "exercise_type": self.exercise_type,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "total_reps": self.total_reps,
            "overall_score": self.overall_score,
            "average_frame_score": self.average_frame_score,
            "rep_scores": list(self.rep_scores),
            "stats": self.stats.to_dict(),
            "form_issues": [issue.to_dict() for issue in self.form_issues],
            "frames_processed": self.frames_processed,
            "frames_undetected": self.frames_undetected,
        }
        if self.frame_results is not None:
            data["frame_results"] = [r.to_dict() for r in self.frame_results]
        return data
