"""
Landmark model for the form evaluation engine.

A frame is an ordered list of 33 body landmarks produced by an on-device pose
model (MediaPipe Pose topology). Landmarks are read-only inputs: nothing in
the engine mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

import numpy as np


NUM_LANDMARKS = 33


class PoseLandmark(IntEnum):
    """Anatomical landmark indices (MediaPipe Pose ordering)."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


# Name -> index lookup, same shape as the landmark dicts pose backends expose.
DEFAULT_LANDMARK_DICT: Dict[str, int] = {lm.name: lm.value for lm in PoseLandmark}

VISIBILITY_THRESHOLDS = {
    "recommended": 0.7,
    "minimum": 0.5,
    "low": 0.3,
}


class Point2D(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Landmark:
    """A single detected body point with normalized coordinates and visibility."""
    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Landmark":
        return cls(
            x=float(d["x"]),
            y=float(d["y"]),
            z=float(d.get("z", 0.0)),
            visibility=float(d.get("visibility", 0.0)),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z, "visibility": self.visibility}

    def to_point2d(self) -> Point2D:
        return Point2D(self.x, self.y)

    def to_numpy(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


Frame = Sequence[Landmark]


def frame_from_dicts(items: Iterable[Dict[str, Any]]) -> List[Landmark]:
    """Convert the list-of-dicts wire format ``[{"x":..., "y":...}, ...]`` into a frame."""
    return [Landmark.from_dict(item) for item in items]


LANDMARK_GROUPS: Dict[str, List[PoseLandmark]] = {
    "FACE": [
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_EYE_INNER,
        PoseLandmark.LEFT_EYE,
        PoseLandmark.LEFT_EYE_OUTER,
        PoseLandmark.RIGHT_EYE_INNER,
        PoseLandmark.RIGHT_EYE,
        PoseLandmark.RIGHT_EYE_OUTER,
        PoseLandmark.LEFT_EAR,
        PoseLandmark.RIGHT_EAR,
        PoseLandmark.MOUTH_LEFT,
        PoseLandmark.MOUTH_RIGHT,
    ],
    "UPPER_BODY": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
    ],
    "LOWER_BODY": [
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
        PoseLandmark.LEFT_KNEE,
        PoseLandmark.RIGHT_KNEE,
        PoseLandmark.LEFT_ANKLE,
        PoseLandmark.RIGHT_ANKLE,
    ],
    "LEFT_SIDE": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.LEFT_KNEE,
        PoseLandmark.LEFT_ANKLE,
    ],
    "RIGHT_SIDE": [
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.RIGHT_WRIST,
        PoseLandmark.RIGHT_HIP,
        PoseLandmark.RIGHT_KNEE,
        PoseLandmark.RIGHT_ANKLE,
    ],
}

# Landmarks each exercise needs in view (both sides). Evaluators gate on a
# narrower, single-side subset of these.
EXERCISE_LANDMARK_GROUPS: Dict[str, List[PoseLandmark]] = {
    "squat": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
        PoseLandmark.LEFT_KNEE,
        PoseLandmark.RIGHT_KNEE,
        PoseLandmark.LEFT_ANKLE,
        PoseLandmark.RIGHT_ANKLE,
    ],
    "pushup": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
        PoseLandmark.LEFT_ANKLE,
        PoseLandmark.RIGHT_ANKLE,
    ],
    "armcurl": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
        PoseLandmark.LEFT_HIP,
        PoseLandmark.RIGHT_HIP,
    ],
    "sideraise": [
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
    ],
    "shoulderpress": [
        PoseLandmark.NOSE,
        PoseLandmark.LEFT_SHOULDER,
        PoseLandmark.RIGHT_SHOULDER,
        PoseLandmark.LEFT_ELBOW,
        PoseLandmark.RIGHT_ELBOW,
        PoseLandmark.LEFT_WRIST,
        PoseLandmark.RIGHT_WRIST,
    ],
}


def get_required_landmarks(exercise_type: str) -> List[PoseLandmark]:
    return list(EXERCISE_LANDMARK_GROUPS.get(exercise_type, []))


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------

def _landmark_at(landmarks: Frame, index: int) -> Optional[Landmark]:
    if 0 <= index < len(landmarks):
        return landmarks[index]
    return None


def is_landmark_visible(
    landmark: Optional[Landmark], threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> bool:
    if landmark is None:
        return False
    return landmark.visibility >= threshold


def get_visible_landmark(
    landmarks: Frame, index: int, threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> Optional[Landmark]:
    """Return the landmark at ``index`` if it is confident enough, else None."""
    landmark = _landmark_at(landmarks, index)
    if is_landmark_visible(landmark, threshold):
        return landmark
    return None


def are_all_landmarks_visible(
    landmarks: Frame,
    required_indices: Iterable[int],
    threshold: float = VISIBILITY_THRESHOLDS["minimum"],
) -> bool:
    return all(
        is_landmark_visible(_landmark_at(landmarks, idx), threshold)
        for idx in required_indices
    )


def filter_by_visibility(
    landmarks: Frame, threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> List[Landmark]:
    return [lm for lm in landmarks if lm.visibility >= threshold]


def get_visible_landmark_indices(
    landmarks: Frame, threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> List[int]:
    return [idx for idx, lm in enumerate(landmarks) if lm.visibility >= threshold]


def count_visible_landmarks(
    landmarks: Frame, threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> int:
    return len(filter_by_visibility(landmarks, threshold))


def calculate_average_visibility(landmarks: Frame) -> float:
    if not landmarks:
        return 0.0
    return float(np.mean([lm.visibility for lm in landmarks]))


def calculate_group_visibility(landmarks: Frame, group: Sequence[int]) -> float:
    """Mean visibility over a landmark group; absent landmarks count as 0."""
    if not group:
        return 0.0
    total = 0.0
    for idx in group:
        landmark = _landmark_at(landmarks, idx)
        total += landmark.visibility if landmark is not None else 0.0
    return total / len(group)


@dataclass
class VisibilityStats:
    total_landmarks: int
    visible_count: int
    visible_percentage: float
    average_visibility: float
    min_visibility: float
    max_visibility: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_landmarks": self.total_landmarks,
            "visible_count": self.visible_count,
            "visible_percentage": self.visible_percentage,
            "average_visibility": self.average_visibility,
            "min_visibility": self.min_visibility,
            "max_visibility": self.max_visibility,
        }


def get_visibility_stats(
    landmarks: Frame, threshold: float = VISIBILITY_THRESHOLDS["minimum"]
) -> VisibilityStats:
    if not landmarks:
        return VisibilityStats(0, 0, 0.0, 0.0, 0.0, 0.0)

    visibilities = [lm.visibility for lm in landmarks]
    visible_count = count_visible_landmarks(landmarks, threshold)
    return VisibilityStats(
        total_landmarks=len(landmarks),
        visible_count=visible_count,
        visible_percentage=visible_count / len(landmarks) * 100,
        average_visibility=calculate_average_visibility(landmarks),
        min_visibility=min(visibilities),
        max_visibility=max(visibilities),
    )
