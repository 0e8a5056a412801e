import pytest

from form_engine.kinematics import (
    calculate_angle,
    calculate_angle_3d,
    calculate_distance,
    calculate_distance_3d,
    calculate_horizontal_distance,
    calculate_midpoint,
    calculate_vertical_distance,
    check_arm_elevation,
    check_back_straight,
    check_body_line,
    check_elbow_fixed,
    check_knee_over_toe,
    check_symmetry,
    check_wrist_above_head,
    is_angle_in_range,
)
from form_engine.landmarks import Landmark, Point2D


def lm(x, y, z=0.0):
    return Landmark(x=x, y=y, z=z, visibility=1.0)


def test_straight_line_is_180():
    assert calculate_angle(lm(0, 0), lm(1, 0), lm(2, 0)) == pytest.approx(180.0)


def test_right_angle_is_90():
    assert calculate_angle(lm(0, 0), lm(1, 0), lm(1, 1)) == pytest.approx(90.0)


def test_angle_is_symmetric():
    a, b, c = lm(0.2, 0.3), lm(0.5, 0.5), lm(0.9, 0.4)
    assert calculate_angle(a, b, c) == pytest.approx(calculate_angle(c, b, a))


def test_reflex_angle_is_folded_below_180():
    # Raw atan2 difference is 270 deg here
    angle = calculate_angle(lm(0, -1), lm(0, 0), lm(-1, 0))
    assert 0.0 <= angle <= 180.0
    assert angle == pytest.approx(90.0)


def test_angle_accepts_plain_points():
    assert calculate_angle(Point2D(0, 1), Point2D(0, 0), Point2D(1, 0)) == pytest.approx(90.0)


def test_angle_3d():
    assert calculate_angle_3d(lm(1, 0, 0), lm(0, 0, 0), lm(0, 0, 1)) == pytest.approx(90.0)
    assert calculate_angle_3d(lm(0, 0, 0), lm(0, 0, 0), lm(0, 0, 1)) == 0.0


def test_distances_and_midpoint():
    assert calculate_distance(lm(0, 0), lm(0.3, 0.4)) == pytest.approx(0.5)
    assert calculate_distance_3d(lm(0, 0, 0), lm(1, 2, 2)) == pytest.approx(3.0)
    assert calculate_vertical_distance(lm(0, 0.7), lm(0, 0.2)) == pytest.approx(0.5)
    assert calculate_horizontal_distance(lm(0.7, 0), lm(0.2, 0)) == pytest.approx(0.5)
    mid = calculate_midpoint(lm(0, 0), lm(1, 0.5))
    assert mid == Point2D(0.5, 0.25)


def test_is_angle_in_range_is_inclusive():
    assert is_angle_in_range(90, 90, 110)
    assert is_angle_in_range(110, 90, 110)
    assert not is_angle_in_range(89.9, 90, 110)


def test_knee_over_toe():
    assert check_knee_over_toe(lm(0.50, 0.7), lm(0.50, 0.9))
    assert check_knee_over_toe(lm(0.54, 0.7), lm(0.50, 0.9))
    assert not check_knee_over_toe(lm(0.60, 0.7), lm(0.50, 0.9))


def test_elbow_fixed_uses_torso_midpoint():
    shoulder, hip = lm(0.5, 0.3), lm(0.5, 0.7)
    assert check_elbow_fixed(lm(0.5, 0.52), shoulder, hip)
    assert not check_elbow_fixed(lm(0.5, 0.40), shoulder, hip)


def test_symmetry():
    ok = check_symmetry(lm(0.3, 0.30), lm(0.7, 0.35))
    assert ok.passed
    assert ok.diff == pytest.approx(0.05)
    assert not check_symmetry(lm(0.3, 0.30), lm(0.7, 0.50)).passed


def test_body_line_and_back():
    straight = check_body_line(lm(0.2, 0.4), lm(0.5, 0.4), lm(0.8, 0.4))
    assert straight.passed
    assert straight.angle == pytest.approx(180.0)
    sagging = check_body_line(lm(0.2, 0.4), lm(0.5, 0.55), lm(0.8, 0.4))
    assert not sagging.passed

    assert check_back_straight(lm(0.5, 0.2), lm(0.5, 0.5), lm(0.5, 0.7)).passed
    assert not check_back_straight(lm(0.8, 0.4), lm(0.5, 0.5), lm(0.5, 0.7)).passed


def test_arm_elevation():
    assert check_arm_elevation(lm(0.4, 0.3), lm(0.2, 0.32)).passed
    low = check_arm_elevation(lm(0.4, 0.3), lm(0.35, 0.5))
    assert not low.passed
    assert low.diff == pytest.approx(0.2)


def test_wrist_above_head():
    assert check_wrist_above_head(lm(0.5, 0.2), lm(0.4, 0.1))
    assert not check_wrist_above_head(lm(0.5, 0.2), lm(0.4, 0.3))
