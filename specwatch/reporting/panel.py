"""Plain-text rendering of a run session for terminal display."""

from __future__ import annotations

from specwatch.analysis.error_classifier import ErrorLogEntry
from specwatch.lifecycle.session import RunSession, TranscriptLine
from specwatch.lifecycle.status import TestCase, TestStatus

STATUS_ICONS = {
    TestStatus.QUEUED: " ",
    TestStatus.RUNNING: "~",
    TestStatus.SUCCESS: "✓",
    TestStatus.ERROR: "✗",
}

# ANSI styles used when colour output is enabled
_STYLES = {
    "dim": "\x1b[2m",
    "link": "\x1b[4;34m",
    "info": "\x1b[36m",
    "success": "\x1b[1;32m",
    "error": "\x1b[1;31m",
    "reset": "\x1b[0m",
}


def _style(text: str, style: str, color: bool) -> str:
    if not color:
        return text
    return f"{_STYLES[style]}{text}{_STYLES['reset']}"


def render_case(case: TestCase) -> str:
    return f"  [{STATUS_ICONS[case.status]}] {case.title}"


def render_transcript_line(line: TranscriptLine, color: bool = False) -> str | None:
    """Render one transcript line, or ``None`` for blank output."""
    if not line.text.strip():
        return None
    text = f"> {line.text}"
    if line.kind == "default":
        return text
    return _style(text, line.kind, color)


def render_error_entry(entry: ErrorLogEntry, color: bool = False) -> str:
    """Render an error entry with its source links highlighted.

    Clickable links are underlined; vendored ones are dimmed.
    """
    if not color or not entry.links:
        return entry.text
    parts: list[str] = []
    cursor = 0
    for link in entry.links:
        parts.append(entry.text[cursor:link.start])
        parts.append(_style(
            entry.text[link.start:link.end],
            "link" if link.clickable else "dim",
            color,
        ))
        cursor = link.end
    parts.append(entry.text[cursor:])
    return "".join(parts)


def render_panel(session: RunSession, color: bool = False) -> str:
    """Render the suite header, test list and error panel of *session*."""
    lines = [session.suite_title]
    if session.spec_path:
        lines.append(_style(session.spec_path, "dim", color))
    lines.append("")

    if not session.cases:
        lines.append("  No test cases found (or the spec file declares them dynamically).")
    for case in session.cases:
        lines.append(render_case(case))

    if session.error_panel_visible:
        lines.append("")
        lines.append(_style("Errors", "error", color))
        for entry in session.errors:
            lines.append(f"  {render_error_entry(entry, color)}")
        links = [link for entry in session.errors for link in entry.clickable_links]
        if links:
            lines.append("")
            lines.append("Source locations:")
            for link in links:
                lines.append(f"  {link.location}")

    if session.closed:
        lines.append("")
        if session.exit_code is None:
            lines.append(_style("Stopped", "error", color))
        else:
            kind = "success" if session.exit_code == 0 else "error"
            lines.append(_style(f"Finished with code {session.exit_code}", kind, color))
    return "\n".join(lines)
