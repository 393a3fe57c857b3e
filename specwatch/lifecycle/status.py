"""Per-test status tracking for a single run.

The runner reports each finished test as a human-readable line rather than
a structured event, and its titles do not always match the ones declared
in the spec file (truncated or annotated).  ``StatusReconciler``
maps each such signal onto the best-matching unresolved test case and
moves the running cursor forward, assuming tests execute one at a time in
declaration order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterable


class TestStatus(str, enum.Enum):
    """Lifecycle of a test case within a run.

    Transitions only move forward: queued -> running -> success | error.
    """

    __test__ = False

    QUEUED = "queued"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_resolved(self) -> bool:
        return self in (TestStatus.SUCCESS, TestStatus.ERROR)


# Match scores, highest wins
EXACT_MATCH = 10
PREFIX_MATCH = 5
SUBSTRING_MATCH = 1


@dataclass
class TestCase:
    """A declared test case and its current status."""

    __test__ = False

    title: str
    index: int
    status: TestStatus = TestStatus.QUEUED


def match_score(signal_title: str, case_title: str) -> int:
    """Score how well a signal title identifies a declared case title.

    Returns:
        10 for equality after trimming, 5 when the signal title is a
        prefix of the case title, 1 when either contains the other,
        0 otherwise.
    """
    signal_title = signal_title.strip()
    case_title = case_title.strip()
    if signal_title == case_title:
        return EXACT_MATCH
    if not signal_title or not case_title:
        return 0
    if case_title.startswith(signal_title):
        return PREFIX_MATCH
    if signal_title in case_title or case_title in signal_title:
        return SUBSTRING_MATCH
    return 0


class StatusReconciler:
    """Ordered queue of expected test cases with a running cursor.

    Args:
        titles: Declared test titles in source order.
        on_change: Called with the case after every status transition.
    """

    def __init__(
        self,
        titles: Iterable[str] = (),
        on_change: Callable[[TestCase], None] | None = None,
    ) -> None:
        self.cases: list[TestCase] = [
            TestCase(title=title.strip(), index=i)
            for i, title in enumerate(titles)
        ]
        # Later duplicates shadow earlier ones
        self._by_title: dict[str, TestCase] = {c.title: c for c in self.cases}
        self.running_cursor = -1
        self._on_change = on_change

    def lookup(self, title: str) -> TestCase | None:
        """Return the last-registered case with exactly this title."""
        return self._by_title.get(title.strip())

    @property
    def running(self) -> TestCase | None:
        """The case currently marked running, if any."""
        for case in self.cases:
            if case.status is TestStatus.RUNNING:
                return case
        return None

    @property
    def unresolved(self) -> list[TestCase]:
        return [c for c in self.cases if not c.status.is_resolved]

    def set_running(self, index: int) -> bool:
        """Mark the case at *index* as running.

        A no-op unless the case exists and is still queued, or while a
        different case is running.

        Returns:
            True if the case transitioned to running.
        """
        if index < 0 or index >= len(self.cases):
            return False
        self.running_cursor = index
        case = self.cases[index]
        if case.status is not TestStatus.QUEUED:
            return False
        if self.running is not None:
            return False
        case.status = TestStatus.RUNNING
        self._notify(case)
        return True

    def find_best_match(self, title: str) -> int | None:
        """Index of the unresolved case that best matches *title*.

        Ties keep the lowest index.  Returns ``None`` when nothing scores.
        """
        best_index: int | None = None
        best_score = 0
        for case in self.cases:
            if case.status.is_resolved:
                continue
            score = match_score(title, case.title)
            if score > best_score:
                best_score = score
                best_index = case.index
        return best_index

    def on_signal(self, title: str, status: TestStatus) -> TestCase | None:
        """Resolve the best-matching case with *status* and advance.

        Args:
            title: Test title reported by the runner.
            status: ``TestStatus.SUCCESS`` or ``TestStatus.ERROR``.

        Returns:
            The resolved case, or ``None`` if the signal matched nothing.
        """
        if not status.is_resolved:
            raise ValueError(f"Signal status must be resolved, got: {status.value}")

        index = self.find_best_match(title)
        if index is None:
            return None

        case = self.cases[index]
        case.status = status
        self._notify(case)
        self.set_running(index + 1)
        return case

    def counts(self) -> dict[str, int]:
        """Number of cases per status value."""
        result = {s.value: 0 for s in TestStatus}
        for case in self.cases:
            result[case.status.value] += 1
        return result

    def _notify(self, case: TestCase) -> None:
        if self._on_change is not None:
            self._on_change(case)
