#
# src/fwharness/state.py
#
"""
Defines the run state model tracked by the test execution driver.
"""

from datetime import UTC, datetime
from enum import Enum, auto

import structlog
from attrs import field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class RunState(Enum):
    """Lifecycle of a single framework test run."""

    NOT_BUILT = auto()  # Nothing has been built yet.
    BUILT = auto()  # Test executable exists.
    RAN = auto()  # Executable exited, outcome not yet decided.
    PASSED = auto()
    FAILED = auto()


# Allowed transitions; PASSED and FAILED are terminal.
TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.NOT_BUILT: frozenset({RunState.BUILT}),
    RunState.BUILT: frozenset({RunState.RAN}),
    RunState.RAN: frozenset({RunState.PASSED, RunState.FAILED}),
    RunState.PASSED: frozenset(),
    RunState.FAILED: frozenset(),
}

STATE_EMOJI_MAP = {
    RunState.NOT_BUILT: "⏳",
    RunState.BUILT: "📦",
    RunState.RAN: "🏃",
    RunState.PASSED: "✅",
    RunState.FAILED: "❌",
}


@mutable(slots=True)
class TestRunState:
    """
    Holds the mutable progress of one test run.

    Only the driver mutates it; invalid transitions raise ValueError.
    """

    __test__ = False

    test_name: str = field()
    status: RunState = field(default=RunState.NOT_BUILT)
    last_transition: datetime | None = field(default=None)
    error_message: str | None = field(default=None)

    def __attrs_post_init__(self):
        log.debug("Initialized run state", test_name=self.test_name, status=self.status.name)

    def transition(self, new_status: RunState, error_msg: str | None = None) -> None:
        old_status = self.status
        if new_status not in TRANSITIONS[old_status]:
            raise ValueError(f"Invalid run state transition {old_status.name} -> {new_status.name}")
        self.status = new_status
        self.last_transition = datetime.now(UTC)
        if error_msg:
            self.error_message = error_msg
        log.debug(
            "Run state changed",
            test_name=self.test_name,
            old=old_status.name,
            new=new_status.name,
        )

    @property
    def emoji(self) -> str:
        return STATE_EMOJI_MAP[self.status]

    @property
    def is_finished(self) -> bool:
        return self.status in (RunState.PASSED, RunState.FAILED)

# 🔼⚙️
