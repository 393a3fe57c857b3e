"""Run session state and the controller that feeds it.

A ``RunSession`` holds everything derived from one run of one spec file:
the test queue, the error feed, the partial-line carry, and the raw
transcript.  ``SessionController`` owns the current session, pushes
output chunks through the line buffer, normalizer, error classifier and
status reconciler, and reports every visible change to an observer.

The controller never raises on runner output: unmatched signals and
unparseable frames are simply dropped or recorded without a location.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from specwatch.analysis.ansi import strip_ansi
from specwatch.analysis.error_classifier import (
    VENDOR_MARKER,
    ErrorClassifier,
    ErrorLogEntry,
)
from specwatch.analysis.line_buffer import LineBuffer
from specwatch.analysis.signals import parse_signal_line
from specwatch.discovery.titles import DEFAULT_SUITE_TITLE
from specwatch.lifecycle.status import StatusReconciler, TestCase, TestStatus

# Transcript line kinds
TRANSCRIPT_KINDS = frozenset({"default", "info", "success", "error"})


@dataclass
class TranscriptLine:
    """A line shown in the terminal view."""

    text: str
    kind: str = "default"


class SessionObserver(Protocol):
    """Receives state changes of the current run session."""

    def on_transcript(self, line: TranscriptLine) -> None: ...

    def on_status_change(self, case: TestCase) -> None: ...

    def on_error_entry(self, entry: ErrorLogEntry) -> None: ...

    def on_reveal_errors(self) -> None: ...

    def on_busy_change(self, busy: bool) -> None: ...

    def on_complete(self, session: RunSession) -> None: ...


class NullObserver:
    """Observer that ignores every notification."""

    def on_transcript(self, line: TranscriptLine) -> None:
        pass

    def on_status_change(self, case: TestCase) -> None:
        pass

    def on_error_entry(self, entry: ErrorLogEntry) -> None:
        pass

    def on_reveal_errors(self) -> None:
        pass

    def on_busy_change(self, busy: bool) -> None:
        pass

    def on_complete(self, session: RunSession) -> None:
        pass


@dataclass
class RunSession:
    """State of a single run.  Never reused across runs."""

    suite_title: str
    reconciler: StatusReconciler
    classifier: ErrorClassifier
    spec_path: str | None = None
    line_buffer: LineBuffer = field(default_factory=LineBuffer)
    transcript: list[TranscriptLine] = field(default_factory=list)
    busy: bool = False
    error_panel_visible: bool = False
    closed: bool = False
    exit_code: int | None = None

    @property
    def cases(self) -> list[TestCase]:
        return self.reconciler.cases

    @property
    def errors(self) -> list[ErrorLogEntry]:
        return self.classifier.entries

    @property
    def past_summary(self) -> bool:
        return self.classifier.past_summary


class SessionController:
    """Drives one run session at a time.

    Args:
        observer: Receives notifications; defaults to a no-op observer.
        vendor_marker: Path fragment identifying vendored dependency files.
        fallback_suite_title: Suite title used when neither a title nor a
            spec path is supplied to :meth:`start_run`.
    """

    def __init__(
        self,
        observer: SessionObserver | None = None,
        vendor_marker: str = VENDOR_MARKER,
        fallback_suite_title: str = DEFAULT_SUITE_TITLE,
    ) -> None:
        self.observer: SessionObserver = observer or NullObserver()
        self.vendor_marker = vendor_marker
        self.fallback_suite_title = fallback_suite_title
        self.session: RunSession | None = None

    def start_run(
        self,
        titles: Iterable[str],
        suite_title: str | None = None,
        spec_path: str | None = None,
    ) -> RunSession:
        """Discard the previous session and start a new one.

        All cases start queued; the first one is marked running right
        away since execution begins with it.
        """
        if not suite_title:
            suite_title = self.fallback_suite_title
        self.session = RunSession(
            suite_title=suite_title,
            spec_path=spec_path,
            reconciler=StatusReconciler(titles, on_change=self._on_case_change),
            classifier=ErrorClassifier(self.vendor_marker),
        )
        self.session.reconciler.set_running(0)
        return self.session

    def feed(self, chunk: str) -> list[str]:
        """Process a raw output chunk.

        Returns:
            The complete lines the chunk produced.  Chunks arriving with no
            open session are ignored.
        """
        session = self.session
        if session is None or session.closed:
            return []
        lines = session.line_buffer.feed(chunk)
        for line in lines:
            self._process_line(session, line)
        return lines

    def complete(self, exit_code: int | None) -> None:
        """Close the current session.

        Cases still queued or running are left exactly as they are.  An
        ``exit_code`` of ``None`` means the run was stopped rather than
        exiting on its own.
        """
        session = self.session
        if session is None or session.closed:
            return
        session.closed = True
        session.exit_code = exit_code
        self._set_busy(session, False)
        self.observer.on_complete(session)

    def log(self, message: str, kind: str = "info") -> None:
        """Append a controller message to the transcript.

        Unknown kinds are shown as plain output.
        """
        if kind not in TRANSCRIPT_KINDS:
            kind = "default"
        session = self.session
        if session is None or not message or not message.strip():
            return
        self._append_transcript(session, TranscriptLine(text=message, kind=kind))

    def fail(self, message: str) -> None:
        """Record an execution error and close the session."""
        self.log(f"Execution Error: {message}", "error")
        self.complete(None)

    def reveal_error_panel(self) -> None:
        """Make the error panel visible; repeated calls have no effect."""
        session = self.session
        if session is None or session.error_panel_visible:
            return
        session.error_panel_visible = True
        self.observer.on_reveal_errors()

    def _process_line(self, session: RunSession, line: str) -> None:
        self._append_transcript(session, TranscriptLine(text=line))
        clean = strip_ansi(line)

        result = session.classifier.classify(clean)
        if result.is_error:
            self.reveal_error_panel()
        if result.entry is not None:
            self.observer.on_error_entry(result.entry)

        signal = parse_signal_line(clean)
        if signal is not None:
            status = TestStatus.SUCCESS if signal.passed else TestStatus.ERROR
            session.reconciler.on_signal(signal.title, status)

    def _append_transcript(self, session: RunSession, line: TranscriptLine) -> None:
        session.transcript.append(line)
        self.observer.on_transcript(line)

    def _on_case_change(self, case: TestCase) -> None:
        session = self.session
        if session is None:
            return
        self.observer.on_status_change(case)
        if case.status is TestStatus.RUNNING:
            self._set_busy(session, True)
        elif case.status is TestStatus.ERROR:
            self.reveal_error_panel()

    def _set_busy(self, session: RunSession, busy: bool) -> None:
        if session.busy == busy:
            return
        session.busy = busy
        self.observer.on_busy_change(busy)
