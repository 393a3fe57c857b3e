"""Unit tests for test status reconciliation."""

from __future__ import annotations

import pytest

from specwatch.lifecycle.status import (
    EXACT_MATCH,
    PREFIX_MATCH,
    SUBSTRING_MATCH,
    StatusReconciler,
    TestCase,
    TestStatus,
    match_score,
)


def _statuses(reconciler: StatusReconciler) -> list[str]:
    return [c.status.value for c in reconciler.cases]


class TestMatchScore:
    """Tests for match_score."""

    def test_exact(self):
        assert match_score("logs in", "logs in") == EXACT_MATCH

    def test_exact_after_trimming(self):
        assert match_score("  logs in ", "logs in") == EXACT_MATCH

    def test_signal_is_prefix_of_case(self):
        """A truncated runner title still identifies the case."""
        assert match_score("logs in with valid", "logs in with valid credentials") == PREFIX_MATCH

    def test_substring(self):
        assert match_score("Login Page logs in", "logs in") == SUBSTRING_MATCH
        assert match_score("valid", "logs in with valid credentials") == SUBSTRING_MATCH

    def test_no_match(self):
        assert match_score("logs out", "logs in") == 0

    def test_empty_signal(self):
        assert match_score("", "logs in") == 0


class TestSetRunning:
    """Tests for StatusReconciler.set_running."""

    def test_marks_queued_case(self):
        reconciler = StatusReconciler(["a", "b"])
        assert reconciler.set_running(0)
        assert _statuses(reconciler) == ["running", "queued"]
        assert reconciler.running_cursor == 0

    def test_out_of_range_is_noop(self):
        reconciler = StatusReconciler(["a"])
        assert not reconciler.set_running(1)
        assert not reconciler.set_running(-1)
        assert _statuses(reconciler) == ["queued"]

    def test_non_queued_is_noop(self):
        reconciler = StatusReconciler(["a"])
        reconciler.set_running(0)
        reconciler.on_signal("a", TestStatus.SUCCESS)
        assert not reconciler.set_running(0)
        assert _statuses(reconciler) == ["success"]

    def test_only_one_case_running(self):
        reconciler = StatusReconciler(["a", "b"])
        reconciler.set_running(0)
        assert not reconciler.set_running(1)
        assert _statuses(reconciler) == ["running", "queued"]

    def test_empty_queue(self):
        reconciler = StatusReconciler([])
        assert not reconciler.set_running(0)
        assert reconciler.running is None


class TestOnSignal:
    """Tests for StatusReconciler.on_signal."""

    def test_duration_annotated_title_advances_cursor(self):
        reconciler = StatusReconciler(["logs in", "logs out"])
        reconciler.set_running(0)

        case = reconciler.on_signal("logs in (42ms)", TestStatus.SUCCESS)

        assert case is reconciler.cases[0]
        assert _statuses(reconciler) == ["success", "running"]
        assert reconciler.running is reconciler.cases[1]

    def test_exact_match_beats_earlier_substring(self):
        """An exact match on a later case wins over a weak earlier match."""
        reconciler = StatusReconciler(["opens the cart page", "cart"])
        reconciler.set_running(0)

        case = reconciler.on_signal("cart", TestStatus.SUCCESS)

        assert case is reconciler.cases[1]
        assert _statuses(reconciler) == ["running", "success"]

    def test_ties_keep_lowest_index(self):
        reconciler = StatusReconciler(["same", "same"])
        reconciler.set_running(0)
        reconciler.on_signal("same", TestStatus.SUCCESS)
        assert _statuses(reconciler) == ["success", "running"]
        reconciler.on_signal("same", TestStatus.ERROR)
        assert _statuses(reconciler) == ["success", "error"]

    def test_resolved_cases_not_rematched(self):
        reconciler = StatusReconciler(["a"])
        reconciler.set_running(0)
        reconciler.on_signal("a", TestStatus.ERROR)
        assert reconciler.on_signal("a", TestStatus.SUCCESS) is None
        assert _statuses(reconciler) == ["error"]

    def test_unmatched_signal_dropped(self):
        reconciler = StatusReconciler(["logs in"])
        reconciler.set_running(0)
        assert reconciler.on_signal("something else", TestStatus.SUCCESS) is None
        assert _statuses(reconciler) == ["running"]

    def test_queued_case_can_be_resolved_directly(self):
        """A signal may resolve a case that never showed as running."""
        reconciler = StatusReconciler(["a", "b", "c"])
        reconciler.set_running(0)
        reconciler.on_signal("b", TestStatus.SUCCESS)
        assert _statuses(reconciler) == ["running", "success", "queued"]
        reconciler.on_signal("a", TestStatus.SUCCESS)
        assert _statuses(reconciler) == ["success", "success", "queued"]

    def test_last_case_resolved_leaves_nothing_running(self):
        reconciler = StatusReconciler(["a"])
        reconciler.set_running(0)
        reconciler.on_signal("a", TestStatus.SUCCESS)
        assert reconciler.running is None

    def test_unresolved_status_rejected(self):
        reconciler = StatusReconciler(["a"])
        with pytest.raises(ValueError, match="must be resolved"):
            reconciler.on_signal("a", TestStatus.RUNNING)

    def test_change_callback(self):
        changes: list[tuple[str, str]] = []

        def on_change(case: TestCase) -> None:
            changes.append((case.title, case.status.value))

        reconciler = StatusReconciler(["a", "b"], on_change=on_change)
        reconciler.set_running(0)
        reconciler.on_signal("a", TestStatus.ERROR)
        assert changes == [
            ("a", "running"),
            ("a", "error"),
            ("b", "running"),
        ]


class TestStatusTypes:
    """Tests for the status enum and case type."""

    def test_enum_members(self):
        """Only the four lifecycle states are members."""
        assert [s.value for s in TestStatus] == ["queued", "running", "success", "error"]

    def test_not_collected_by_pytest(self):
        assert TestStatus.__test__ is False
        assert TestCase.__test__ is False

    def test_case_fields(self):
        case = TestCase(title="a", index=0)
        assert case.status is TestStatus.QUEUED


class TestLookupAndCounts:
    """Tests for lookup and counts."""

    def test_titles_trimmed(self):
        reconciler = StatusReconciler(["  padded  "])
        assert reconciler.cases[0].title == "padded"
        assert reconciler.lookup("padded") is reconciler.cases[0]

    def test_last_registered_wins(self):
        reconciler = StatusReconciler(["dup", "other", "dup"])
        assert reconciler.lookup("dup") is reconciler.cases[2]

    def test_lookup_missing(self):
        assert StatusReconciler(["a"]).lookup("b") is None

    def test_counts(self):
        reconciler = StatusReconciler(["a", "b", "c"])
        reconciler.set_running(0)
        reconciler.on_signal("a", TestStatus.SUCCESS)
        assert reconciler.counts() == {
            "queued": 1, "running": 1, "success": 1, "error": 0,
        }
        assert [c.title for c in reconciler.unresolved] == ["b", "c"]
