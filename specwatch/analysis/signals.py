"""Per-test outcome lines in runner output.

Spec reporters print one line per finished test: a check mark or a cross
followed by the test title, sometimes with a duration such as ``(123ms)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

SUCCESS_PATTERN = re.compile(r"[✓✔]\s+(.+)")
FAILURE_PATTERN = re.compile(r"[✖✗✘]\s+(.+)")

# " (123ms)" and anything printed after it
DURATION_SUFFIX = re.compile(r"\s+\(\d+ms\).*$")


@dataclass
class Signal:
    """A test outcome reported by the runner."""

    title: str
    passed: bool


def clean_signal_title(raw: str) -> str:
    """Strip the duration annotation and surrounding whitespace."""
    return DURATION_SUFFIX.sub("", raw).strip()


def parse_signal_line(line: str) -> Signal | None:
    """Parse a normalized output line into a :class:`Signal`.

    Success markers are checked first.  Returns ``None`` for lines that
    report no test outcome.
    """
    for pattern, passed in ((SUCCESS_PATTERN, True), (FAILURE_PATTERN, False)):
        match = pattern.search(line)
        if match:
            title = clean_signal_title(match.group(1))
            return Signal(title=title, passed=passed) if title else None
    return None
