"""ExerciseEvaluator driven by a minimal two-phase rules object."""

from enum import Enum

import pytest

from form_engine.landmarks import Landmark
from form_engine.results import FormCheckResult, TransitionData
from form_engine.state_machine import ExerciseEvaluator, PhaseStep


class TogglePhase(str, Enum):
    REST = "rest"
    ACTIVE = "active"


class ToggleRules:
    """Nose x > 0.5 starts a rep, back below 0.5 completes it; nose y < 0.5 is good form."""

    exercise_type = "toggle"
    initial_phase = TogglePhase.REST
    required_landmarks = [0]
    check_weights = None

    def measure(self, landmarks):
        return TransitionData(landmarks=list(landmarks), distances={"x": landmarks[0].x})

    def next_phase(self, phase, measurements):
        x = measurements.distances["x"]
        if phase == TogglePhase.REST:
            if x > 0.5:
                return PhaseStep(TogglePhase.ACTIVE)
        elif phase == TogglePhase.ACTIVE:
            if x < 0.5:
                return PhaseStep(TogglePhase.REST, rep_completed=True)
        else:
            raise ValueError(phase)
        return PhaseStep(phase)

    def evaluate_form(self, state, landmarks, measurements):
        nose = landmarks[0]
        return [
            FormCheckResult(passed=nose.y < 0.5, value=nose.y, description="Nose height", name="nose"),
            FormCheckResult(passed=True, value=0.0, description="Always", name="always"),
        ]


def frame(x, y=0.2, visibility=0.9):
    return [Landmark(x=x, y=y, visibility=visibility)]


@pytest.fixture
def evaluator():
    return ExerciseEvaluator(ToggleRules())


def test_initial_state(evaluator):
    assert evaluator.current_phase == TogglePhase.REST
    assert evaluator.rep_count == 0
    assert evaluator.exercise_type == "toggle"
    assert not evaluator.is_in_active_rep()


def test_full_cycle_counts_one_rep(evaluator):
    evaluator.process_frame(frame(0.2), 0.0)
    result = evaluator.process_frame(frame(0.8), 0.1)
    assert result.phase == TogglePhase.ACTIVE
    assert evaluator.is_in_active_rep()

    result = evaluator.process_frame(frame(0.2), 0.2)
    assert result.rep_count == 1
    assert result.phase == TogglePhase.REST


def test_undetected_frame_leaves_state_untouched(evaluator):
    evaluator.process_frame(frame(0.8), 0.0)
    before = evaluator.get_state_summary()

    result = evaluator.process_frame(frame(0.2, visibility=0.2), 0.1)

    assert result.has_required_landmarks is False
    assert result.score == 0
    assert result.checks == []
    assert result.phase == TogglePhase.ACTIVE
    assert evaluator.get_state_summary() == before
    assert evaluator.get_frame_scores() == [100]


def test_empty_frame_is_undetected(evaluator):
    result = evaluator.process_frame([], 0.0)
    assert not result.has_required_landmarks


def test_rep_score_closes_before_completing_frame(evaluator):
    evaluator.process_frame(frame(0.2, y=0.2), 0.0)  # 100
    evaluator.process_frame(frame(0.8, y=0.8), 0.1)  # 50
    evaluator.process_frame(frame(0.2, y=0.8), 0.2)  # completes rep, scores 50

    # completing frame counts toward the next rep
    assert evaluator.get_rep_scores() == [75]
    assert evaluator.get_frame_scores() == [100, 50, 50]
    assert evaluator.state.current_rep_scores == [50]


def test_rep_start_captured_at_rest_and_cleared_on_return(evaluator):
    evaluator.process_frame(frame(0.3), 0.0)
    assert evaluator.state.rep_start.distances["x"] == pytest.approx(0.3)

    evaluator.process_frame(frame(0.4), 0.1)
    # first resting frame wins
    assert evaluator.state.rep_start.distances["x"] == pytest.approx(0.3)

    evaluator.process_frame(frame(0.8), 0.2)
    evaluator.process_frame(frame(0.1), 0.3)
    assert evaluator.state.rep_start is None


def test_previous_frame_is_kept_one_level_deep(evaluator):
    evaluator.process_frame(frame(0.2), 0.0)
    evaluator.process_frame(frame(0.3), 0.1)
    previous = evaluator.state.previous_frame
    assert previous.distances["x"] == pytest.approx(0.3)
    assert previous.previous_frame is None


def test_transition_to_same_phase_is_noop(evaluator):
    events = []
    evaluator.add_listener(events.append)
    evaluator.transition_to(TogglePhase.REST)
    assert events == []

    evaluator.transition_to(TogglePhase.ACTIVE)
    assert [e.type for e in events] == ["phase_change"]
    assert events[0].previous_phase == TogglePhase.REST
    assert events[0].current_phase == TogglePhase.ACTIVE


def test_listener_receives_rep_events(evaluator):
    events = []
    evaluator.add_listener(events.append)
    for x in (0.2, 0.8, 0.2):
        evaluator.process_frame(frame(x))

    assert [e.type for e in events] == ["phase_change", "rep_complete", "phase_change"]
    assert events[1].rep_count == 1
    assert events[1].to_dict()["type"] == "rep_complete"

    evaluator.remove_listener(events.append)
    evaluator.process_frame(frame(0.8))
    assert len(events) == 3


def test_failing_listener_does_not_break_processing(evaluator, caplog):
    def broken(event):
        raise RuntimeError("boom")

    evaluator.add_listener(broken)
    evaluator.process_frame(frame(0.2))
    evaluator.process_frame(frame(0.8))
    result = evaluator.process_frame(frame(0.2))

    assert result.rep_count == 1
    assert "listener failed" in caplog.text


def test_increment_rep_without_scores(evaluator):
    evaluator.increment_rep()
    assert evaluator.rep_count == 1
    assert evaluator.get_rep_scores() == []


def test_check_weights_are_applied():
    rules = ToggleRules()
    rules.check_weights = [3, 1]
    evaluator = ExerciseEvaluator(rules)
    result = evaluator.process_frame(frame(0.2, y=0.2))
    assert result.score == 100
    result = evaluator.process_frame(frame(0.2, y=0.9))
    assert result.score == 25


def test_reset(evaluator):
    for x in (0.2, 0.8, 0.2, 0.8):
        evaluator.process_frame(frame(x))
    evaluator.reset()

    assert evaluator.current_phase == TogglePhase.REST
    assert evaluator.rep_count == 0
    assert evaluator.get_frame_scores() == []
    assert evaluator.get_rep_scores() == []
    assert evaluator.state.previous_frame is None
    assert evaluator.state.rep_start is None


def test_state_summary(evaluator):
    evaluator.process_frame(frame(0.2), 0.0)
    summary = evaluator.get_state_summary()
    assert summary["phase"] == "rest"
    assert summary["overall_score"] == 100
    assert evaluator.get_session_duration() >= 0
    assert evaluator.get_time_since_phase_change() >= 0
