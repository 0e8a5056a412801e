"""Synthetic pose frames for the form engine tests.

Every builder returns a full 33-landmark frame (visibility 0.9 unless told
otherwise) with the joints an exercise cares about placed so that the
measured angles come out exactly as requested.
"""

import math

import pytest

from form_engine.landmarks import NUM_LANDMARKS, Landmark, PoseLandmark as P


def place(vertex, toward, angle, length):
    """Point C such that the angle toward-vertex-C equals ``angle`` degrees."""
    theta = math.atan2(toward[1] - vertex[1], toward[0] - vertex[0]) + math.radians(angle)
    return (vertex[0] + length * math.cos(theta), vertex[1] + length * math.sin(theta))


def build_frame(points=None, visibility=0.9, hidden=()):
    points = points or {}
    frame = []
    for idx in range(NUM_LANDMARKS):
        x, y = points.get(idx, (0.5, 0.5))
        vis = 0.1 if idx in hidden else visibility
        frame.append(Landmark(x=x, y=y, z=0.0, visibility=vis))
    return frame


def squat_frame(knee_angle, back_angle=170.0, toe_offset=0.05, **kwargs):
    """toe_offset is foot.x - knee.x; negative puts the knee past the toe."""
    hip = (0.5, 0.5)
    knee = (0.5, 0.7)
    ankle = place(knee, hip, knee_angle, 0.2)
    shoulder = place(hip, knee, back_angle, 0.3)
    foot = (knee[0] + toe_offset, ankle[1])
    return build_frame(
        {
            P.LEFT_SHOULDER: shoulder,
            P.LEFT_HIP: hip,
            P.LEFT_KNEE: knee,
            P.LEFT_ANKLE: ankle,
            P.LEFT_FOOT_INDEX: foot,
        },
        **kwargs,
    )


def pushup_frame(elbow_angle, body_angle=180.0, **kwargs):
    shoulder = (0.3, 0.4)
    elbow = (0.3, 0.55)
    wrist = place(elbow, shoulder, elbow_angle, 0.15)
    hip = (0.55, 0.4)
    ankle = place(hip, shoulder, body_angle, 0.3)
    return build_frame(
        {
            P.LEFT_SHOULDER: shoulder,
            P.LEFT_ELBOW: elbow,
            P.LEFT_WRIST: wrist,
            P.LEFT_HIP: hip,
            P.LEFT_ANKLE: ankle,
        },
        **kwargs,
    )


def armcurl_frame(elbow_angle, elbow_y=0.5, **kwargs):
    shoulder = (0.5, 0.3)
    hip = (0.5, 0.7)
    elbow = (0.5, elbow_y)
    wrist = place(elbow, shoulder, elbow_angle, 0.15)
    return build_frame(
        {
            P.LEFT_SHOULDER: shoulder,
            P.LEFT_ELBOW: elbow,
            P.LEFT_WRIST: wrist,
            P.LEFT_HIP: hip,
        },
        **kwargs,
    )


def sideraise_frame(left_elevation, right_elevation=None, **kwargs):
    """Elevation is shoulder.y - elbow.y; -0.2 is arms hanging down."""
    if right_elevation is None:
        right_elevation = left_elevation
    shoulder_y = 0.3
    left_elbow = (0.3, shoulder_y - left_elevation)
    right_elbow = (0.7, shoulder_y - right_elevation)
    return build_frame(
        {
            P.LEFT_SHOULDER: (0.4, shoulder_y),
            P.RIGHT_SHOULDER: (0.6, shoulder_y),
            P.LEFT_ELBOW: left_elbow,
            P.RIGHT_ELBOW: right_elbow,
            P.LEFT_WRIST: (left_elbow[0] - 0.1, left_elbow[1]),
            P.RIGHT_WRIST: (right_elbow[0] + 0.1, right_elbow[1]),
        },
        **kwargs,
    )


def shoulderpress_frame(elbow_angle, nose_y=0.2, **kwargs):
    # Upper arm points up from the shoulder; wider angles lift the wrist overhead
    shoulder = (0.4, 0.35)
    elbow = (0.4, 0.25)
    wrist = place(elbow, shoulder, elbow_angle, 0.15)
    return build_frame(
        {
            P.NOSE: (0.5, nose_y),
            P.LEFT_SHOULDER: shoulder,
            P.LEFT_ELBOW: elbow,
            P.LEFT_WRIST: wrist,
        },
        **kwargs,
    )


def run(evaluator, frames, start=0.0, step=1 / 30):
    """Feed frames in order with increasing timestamps; return the results."""
    return [
        evaluator.process_frame(frame, start + i * step) for i, frame in enumerate(frames)
    ]


@pytest.fixture
def frames():
    """Namespace of the frame builders above."""

    class Builders:
        place = staticmethod(place)
        build = staticmethod(build_frame)
        squat = staticmethod(squat_frame)
        pushup = staticmethod(pushup_frame)
        armcurl = staticmethod(armcurl_frame)
        sideraise = staticmethod(sideraise_frame)
        shoulderpress = staticmethod(shoulderpress_frame)
        run = staticmethod(run)

    return Builders
