"""Static extraction of suite and test titles from spec source.

This is pattern matching, not parsing: ``describe(...)`` and ``it(...)``
calls with a quoted first argument are picked up wherever they appear,
nested blocks included, in textual order.  Unrecognised syntax simply
yields nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

SUITE_PATTERN = re.compile(r"\bdescribe\s*\(\s*['\"`](.+?)['\"`]")
CASE_PATTERN = re.compile(r"\bit\s*\(\s*['\"`](.+?)['\"`]")

DEFAULT_SUITE_TITLE = "Test Suite Execution"


@dataclass
class SpecOutline:
    """Titles declared in one spec file."""

    suite_title: str | None = None
    test_titles: list[str] = field(default_factory=list)

    def title_or(self, fallback: str) -> str:
        """The suite title, or *fallback* when none was declared."""
        return self.suite_title if self.suite_title else fallback


def extract_suite_title(source: str) -> str | None:
    """Return the title of the first suite declaration, if any."""
    match = SUITE_PATTERN.search(source)
    return match.group(1) if match else None


def extract_test_titles(source: str) -> list[str]:
    """Return every test case title in source order, duplicates kept."""
    return [m.group(1) for m in CASE_PATTERN.finditer(source)]


def extract_outline(source: str) -> SpecOutline:
    """Extract the suite title and test titles from spec source text."""
    if not source:
        return SpecOutline()
    return SpecOutline(
        suite_title=extract_suite_title(source),
        test_titles=extract_test_titles(source),
    )
