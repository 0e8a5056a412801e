import pytest

from form_engine.factory import (
    create_evaluator,
    get_available_exercises,
    is_supported_exercise,
    normalize_exercise_type,
)
from form_engine.phases import ArmCurlPhase, SquatPhase
from form_engine.state_machine import ExerciseEvaluator


def test_available_exercises():
    assert get_available_exercises() == ["squat", "pushup", "armcurl", "sideraise", "shoulderpress"]


@pytest.mark.parametrize("name", ["armcurl", "Arm_Curl", "arm-curl", "ARM CURL", " armcurl "])
def test_name_normalization(name):
    assert normalize_exercise_type(name) == "armcurl"
    evaluator = create_evaluator(name)
    assert isinstance(evaluator, ExerciseEvaluator)
    assert evaluator.exercise_type == "armcurl"
    assert evaluator.current_phase == ArmCurlPhase.DOWN


@pytest.mark.parametrize("name", ["yoga", "", "squats!"])
def test_unknown_exercise_returns_none(name):
    assert create_evaluator(name) is None
    assert not is_supported_exercise(name)


def test_each_call_returns_a_fresh_evaluator(frames):
    first = create_evaluator("squat")
    second = create_evaluator("squat")
    assert first is not second

    frames.run(first, [frames.squat(a) for a in (170, 100, 95, 140, 170)])
    assert first.rep_count == 1
    assert second.rep_count == 0
    assert second.current_phase == SquatPhase.STANDING
