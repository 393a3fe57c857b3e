"""Error feed extraction from normalized runner output.

Detects error-looking lines, stops collecting once the runner prints its
failure summary, collapses consecutive repeats, and finds source locations
inside each entry so the display can link them to an editor.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Dependency directory whose files are never linked interactively
VENDOR_MARKER = "node_modules"

# "3 failing" opens the summary section; nothing after it is collected
SUMMARY_PATTERN = re.compile(r"\d+\s+failing")

ERROR_MARKERS = (
    "Error:",
    "failed",
    "AssertionError",
    "Expected:",
    "Received:",
    "TypeError:",
)

STACK_FRAME_PATTERN = re.compile(r"at .*[ (](.*):(\d+):(\d+)\)?")

# Absolute paths only; the lookbehind rejects a "/" inside a relative path
SOURCE_PATH_PATTERN = re.compile(
    r"(?<![\w.\-/\\])((?:[a-zA-Z]:\\|/)[a-zA-Z0-9_\-\\/.]+\.(?:js|ts|jsx|tsx):\d+:\d+)"
)


@dataclass
class SourceLink:
    """A ``path:line:col`` reference embedded in an error entry.

    ``start``/``end`` delimit the reference inside the entry text.
    Vendored paths are kept but marked non-clickable so the display can
    render them dimmed.
    """

    start: int
    end: int
    path: str
    line: int
    column: int
    clickable: bool = True

    @property
    def location(self) -> str:
        """The reference as it appeared in the text."""
        return f"{self.path}:{self.line}:{self.column}"


@dataclass
class ErrorLogEntry:
    """One line of the error feed."""

    text: str
    line_number: str | None = None
    links: list[SourceLink] = field(default_factory=list)

    @property
    def clickable_links(self) -> list[SourceLink]:
        return [link for link in self.links if link.clickable]


@dataclass
class Classification:
    """Outcome of classifying a single line.

    ``is_error`` is true for any error line seen before the summary
    boundary, including duplicates that did not produce a new entry.
    """

    is_error: bool = False
    is_summary: bool = False
    entry: ErrorLogEntry | None = None


def is_summary_line(line: str) -> bool:
    """True if *line* reports the runner's failure count."""
    return SUMMARY_PATTERN.search(line) is not None


def is_error_line(line: str) -> bool:
    """True if *line* carries one of the error markers."""
    if any(marker in line for marker in ERROR_MARKERS):
        return True
    return line.strip().startswith("at ")


def extract_line_number(
    line: str, vendor_marker: str = VENDOR_MARKER,
) -> str | None:
    """Extract the line number of the first stack frame in *line*.

    Frames pointing into the vendoring directory yield ``None``, as do
    lines without a recognisable ``at ...(path:line:col)`` frame.
    """
    match = STACK_FRAME_PATTERN.search(line)
    if match is None:
        return None
    if vendor_marker and vendor_marker in match.group(1):
        return None
    return match.group(2)


def find_source_links(
    line: str, vendor_marker: str = VENDOR_MARKER,
) -> list[SourceLink]:
    """Find absolute ``path:line:col`` references to source files in *line*."""
    links: list[SourceLink] = []
    for match in SOURCE_PATH_PATTERN.finditer(line):
        path, line_no, column = match.group(1).rsplit(":", 2)
        links.append(SourceLink(
            start=match.start(1),
            end=match.end(1),
            path=path,
            line=int(line_no),
            column=int(column),
            clickable=not (vendor_marker and vendor_marker in path),
        ))
    return links


class ErrorClassifier:
    """Accumulates the error feed for one run.

    The summary latch is one-way: once the runner prints its failure
    count, every later line is ignored for the rest of the run, however
    error-like it looks.  The summary repeats failures already reported
    as they happened.
    """

    def __init__(self, vendor_marker: str = VENDOR_MARKER) -> None:
        self.vendor_marker = vendor_marker
        self.past_summary = False
        self.entries: list[ErrorLogEntry] = []

    def classify(self, line: str) -> Classification:
        """Classify one normalized line, appending to the feed as needed.

        Args:
            line: A complete output line with escape codes removed.

        Returns:
            A :class:`Classification`; ``entry`` is set only when a new
            entry was appended.
        """
        if is_summary_line(line):
            self.past_summary = True
            return Classification(is_summary=True)

        if self.past_summary or not is_error_line(line):
            return Classification()

        if self.entries and self.entries[-1].text == line:
            return Classification(is_error=True)

        entry = ErrorLogEntry(
            text=line,
            line_number=extract_line_number(line, self.vendor_marker),
            links=find_source_links(line, self.vendor_marker),
        )
        self.entries.append(entry)
        return Classification(is_error=True, entry=entry)

    def reset(self) -> None:
        """Clear the feed and re-open error detection."""
        self.past_summary = False
        self.entries = []
