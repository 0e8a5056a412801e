"""
Kinematic helpers for form evaluation.

Implements:
- Planar joint angles (atan2) and 3D angles (dot product)
- Distances, midpoints and axis-aligned deltas
- Form primitives shared by the exercise evaluators (symmetry, elevation,
  body line, knee over toe, fixed elbow, wrist above head)

All functions are pure and exercise-agnostic. Points are anything exposing
``.x`` and ``.y`` (``.z`` for the 3D variants) in normalized image
coordinates, where y grows downward.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .landmarks import Point2D


class LineCheck(NamedTuple):
    passed: bool
    angle: float


class DeltaCheck(NamedTuple):
    passed: bool
    diff: float


def calculate_angle(a, b, c) -> float:
    """Calculate the planar angle at point b formed by points a-b-c in degrees (0-180)."""
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    angle = np.abs(radians * 180.0 / np.pi)
    if angle > 180.0:
        angle = 360.0 - angle
    return float(angle)


def calculate_angle_3d(a, b, c) -> float:
    """Compute 3D angle at joint b. Degenerate (zero-length) limbs give 0."""
    ba = np.array([a.x - b.x, a.y - b.y, a.z - b.z])
    bc = np.array([c.x - b.x, c.y - b.y, c.z - b.z])
    norm_ba = np.linalg.norm(ba)
    norm_bc = np.linalg.norm(bc)
    if norm_ba == 0 or norm_bc == 0:
        return 0.0
    cosine = np.dot(ba, bc) / (norm_ba * norm_bc)
    return float(np.degrees(np.arccos(np.clip(cosine, -1.0, 1.0))))


def calculate_distance(a, b) -> float:
    return float(np.hypot(b.x - a.x, b.y - a.y))


def calculate_distance_3d(a, b) -> float:
    return float(np.linalg.norm(np.array([b.x - a.x, b.y - a.y, b.z - a.z])))


def calculate_midpoint(a, b) -> Point2D:
    return Point2D((a.x + b.x) / 2, (a.y + b.y) / 2)


def calculate_vertical_distance(a, b) -> float:
    return abs(b.y - a.y)


def calculate_horizontal_distance(a, b) -> float:
    return abs(b.x - a.x)


def is_angle_in_range(value: float, min_value: float, max_value: float) -> bool:
    """Inclusive range check."""
    return min_value <= value <= max_value


def check_knee_over_toe(knee, foot_index, tolerance: float = 0.05) -> bool:
    """Knee must not travel past the toe (plus tolerance) along x."""
    return knee.x <= foot_index.x + tolerance


def check_elbow_fixed(elbow, shoulder, hip, tolerance: float = 0.05) -> bool:
    """Elbow should stay pinned at the side of the torso (shoulder/hip midpoint height)."""
    midpoint_y = (shoulder.y + hip.y) / 2
    return abs(elbow.y - midpoint_y) <= tolerance


def check_symmetry(left, right, tolerance: float = 0.1) -> DeltaCheck:
    diff = abs(left.y - right.y)
    return DeltaCheck(passed=diff <= tolerance, diff=diff)


def check_body_line(shoulder, hip, ankle, min_angle: float = 170.0) -> LineCheck:
    """Shoulder-hip-ankle should be close to a straight line (push-up plank)."""
    angle = calculate_angle(shoulder, hip, ankle)
    return LineCheck(passed=angle >= min_angle, angle=angle)


def check_back_straight(shoulder, hip, knee, min_angle: float = 150.0) -> LineCheck:
    """Shoulder-hip-knee angle; a collapsing torso drops below min_angle."""
    angle = calculate_angle(shoulder, hip, knee)
    return LineCheck(passed=angle >= min_angle, angle=angle)


def check_arm_elevation(shoulder, elbow, tolerance: float = 0.05) -> DeltaCheck:
    """Elbow at about shoulder height (side raise top)."""
    diff = abs(shoulder.y - elbow.y)
    return DeltaCheck(passed=diff <= tolerance, diff=diff)


def check_wrist_above_head(nose, wrist) -> bool:
    # smaller y is higher on screen
    return wrist.y < nose.y
