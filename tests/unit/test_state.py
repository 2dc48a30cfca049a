#
# tests/unit/test_state.py
#
"""Tests for the run state machine."""

import pytest

from fwharness.state import RunState, TestRunState


def test_happy_path_transitions() -> None:
    state = TestRunState(test_name="values")

    for status in (RunState.BUILT, RunState.RAN, RunState.PASSED):
        state.transition(status)

    assert state.status is RunState.PASSED
    assert state.is_finished
    assert state.last_transition is not None


@pytest.mark.parametrize(
    "path",
    [
        [RunState.RAN],
        [RunState.BUILT, RunState.PASSED],
        [RunState.BUILT, RunState.RAN, RunState.FAILED, RunState.PASSED],
    ],
)
def test_invalid_transitions_are_rejected(path: list[RunState]) -> None:
    state = TestRunState(test_name="values")

    with pytest.raises(ValueError, match="Invalid run state transition"):
        for status in path:
            state.transition(status)


def test_failure_message_is_kept() -> None:
    state = TestRunState(test_name="values")
    state.transition(RunState.BUILT)
    state.transition(RunState.RAN)
    state.transition(RunState.FAILED, "exit code 1")

    assert state.error_message == "exit code 1"
    assert state.emoji == "❌"
