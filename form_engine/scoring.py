"""
Scoring for the form evaluation engine.

Frame score  - percentage of passed form checks (optionally weighted).
Rep score    - mean of the frame scores recorded during one repetition.
Session      - mean frame score, letter grade, consistency across reps,
               performance trend and recurring form issues.

Every function here is pure. Rounded values use round-half-up so that a
66.5 average reads as 67 rather than banker's-rounding to 66.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

import numpy as np

from .results import FormCheckResult, FormIssue, SessionStats

# Standard deviation at which consistency bottoms out (scores span 0-100).
MAX_STD_DEV = 50.0
TREND_THRESHOLD = 5.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_frame_score(checks: Sequence[bool]) -> int:
    """Equal-weighted percentage of passed checks. Empty input scores 0."""
    if not checks:
        return 0
    passed = sum(1 for c in checks if c)
    return round_half_up(passed / len(checks) * 100)


def calculate_frame_score_from_results(
    results: Sequence[FormCheckResult], weights: Optional[Sequence[float]] = None
) -> int:
    """
    Weighted percentage of passed checks.

    Args:
        results: Form check results for one frame.
        weights: Optional per-check weights, parallel to ``results``.

    Raises:
        ValueError: if ``weights`` does not have one entry per result
            or holds a negative weight.
    """
    if not results:
        return 0

    effective_weights = list(weights) if weights is not None else [1.0] * len(results)
    if len(effective_weights) != len(results):
        raise ValueError(
            f"Weights array must match results array length "
            f"({len(effective_weights)} weights for {len(results)} results)"
        )
    if any(w < 0 for w in effective_weights):
        raise ValueError("Weights must be non-negative")

    total_weight = float(sum(effective_weights))
    if total_weight == 0:
        return 0
    weighted_sum = sum(w for r, w in zip(results, effective_weights) if r.passed)
    return round_half_up(weighted_sum / total_weight * 100)


def calculate_overall_score(frame_scores: Sequence[float]) -> int:
    if len(frame_scores) == 0:
        return 0
    return round_half_up(float(np.mean(frame_scores)))


def calculate_rep_score(rep_frame_scores: Sequence[float]) -> int:
    return calculate_overall_score(rep_frame_scores)


def calculate_weighted_overall_score(rep_scores: Sequence[float]) -> int:
    # every rep counts equally
    return calculate_overall_score(rep_scores)


def get_letter_grade(score: float) -> str:
    if score >= 95:
        return "S"
    if score >= 85:
        return "A"
    if score >= 70:
        return "B"
    if score >= 55:
        return "C"
    if score >= 40:
        return "D"
    return "F"


def get_score_description(score: float) -> str:
    if score >= 95:
        return "Outstanding form!"
    if score >= 85:
        return "Very good form"
    if score >= 70:
        return "Good form"
    if score >= 55:
        return "Room for improvement"
    if score >= 40:
        return "Check your form"
    return "Your form needs work"


def calculate_consistency_score(rep_scores: Sequence[float]) -> int:
    """100 = every rep scored the same. Fewer than two reps are trivially consistent."""
    if len(rep_scores) < 2:
        return 100
    std_dev = float(np.std(rep_scores))
    normalized = min(std_dev / MAX_STD_DEV, 1.0)
    return round_half_up((1 - normalized) * 100)


def get_performance_trend(rep_scores: Sequence[float]) -> str:
    """Compare the first half of the reps against the second half."""
    if len(rep_scores) < 3:
        return "stable"

    midpoint = len(rep_scores) // 2
    first_avg = float(np.mean(rep_scores[:midpoint]))
    second_avg = float(np.mean(rep_scores[midpoint:]))
    diff = second_avg - first_avg

    if diff > TREND_THRESHOLD:
        return "improving"
    if diff < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def generate_session_stats(rep_scores: Sequence[int]) -> SessionStats:
    if len(rep_scores) == 0:
        return SessionStats()

    average = calculate_overall_score(rep_scores)
    return SessionStats(
        total_reps=len(rep_scores),
        average_score=average,
        best_score=int(max(rep_scores)),
        worst_score=int(min(rep_scores)),
        consistency=calculate_consistency_score(rep_scores),
        trend=get_performance_trend(rep_scores),
        grade=get_letter_grade(average),
    )


# ---------------------------------------------------------------------------
# Form issues
# ---------------------------------------------------------------------------

ISSUE_ADVICE: Dict[str, str] = {
    # Squat
    "Knee angle": "Adjust your squat depth. Aim for a 90-110 degree knee angle.",
    "Knee position": "Keep your knees behind your toes by sitting your hips back.",
    "Back angle": "Keep your back straight and your chest up.",
    # Push-up
    "Elbow angle": "Adjust how far you bend your elbows for this movement.",
    "Body line": "Keep your hips from sagging or piking; hold a straight line.",
    # Arm curl
    "Elbow fixed": "Pin your elbows to your sides and avoid swinging the weight.",
    # Side raise
    "Arm height": "Raise your arms until your elbows reach shoulder height.",
    "Left-right symmetry": "Raise both arms to the same height.",
    # Shoulder press
    "Wrist height": "Press your wrists all the way above your head.",
}

DEFAULT_ADVICE = "Check your form and move slowly and under control."


def _severity(occurrences: int, total_frames: int) -> str:
    rate = occurrences / total_frames if total_frames else 0.0
    if rate >= 0.5:
        return "high"
    if rate >= 0.25:
        return "medium"
    return "low"


def get_advice_for_issue(description: str) -> str:
    for key, advice in ISSUE_ADVICE.items():
        if key in description:
            return advice
    return DEFAULT_ADVICE


def analyze_form_issues(
    frame_checks: Sequence[Sequence[FormCheckResult]], min_occurrences: int = 3
) -> List[FormIssue]:
    """
    Find checks that failed repeatedly across a session.

    Args:
        frame_checks: Check results, one list per evaluated frame.
        min_occurrences: Failures needed before a check counts as an issue.

    Returns:
        Issues sorted by occurrence count, most frequent first.
    """
    counts: Dict[str, int] = {}
    names: Dict[str, str] = {}

    for checks in frame_checks:
        for check in checks:
            if check.passed:
                continue
            counts[check.description] = counts.get(check.description, 0) + 1
            if check.name:
                names.setdefault(check.description, check.name)

    issues = []
    for description, count in counts.items():
        if count < min_occurrences:
            continue
        issue_id = names.get(description) or "_".join(description.lower().split())
        issues.append(
            FormIssue(
                id=issue_id,
                description=description,
                occurrences=count,
                severity=_severity(count, len(frame_checks)),
                advice=get_advice_for_issue(description),
            )
        )

    return sorted(issues, key=lambda i: i.occurrences, reverse=True)
