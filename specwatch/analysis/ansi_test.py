"""Tests for ANSI escape removal."""

from __future__ import annotations

from specwatch.analysis.ansi import strip_ansi


class TestStripAnsi:
    """Tests for strip_ansi."""

    def test_plain_line_unchanged(self):
        assert strip_ansi("  ✓ logs in") == "  ✓ logs in"

    def test_single_code(self):
        assert strip_ansi("\x1b[32m✓\x1b[0m logs in") == "✓ logs in"

    def test_mocha_style_line(self):
        """Reporter output with several colour switches is fully cleaned."""
        line = "  \x1b[32m  ✓\x1b[0m\x1b[90m logs in\x1b[0m\x1b[31m (42ms)\x1b[0m"
        assert strip_ansi(line) == "    ✓ logs in (42ms)"

    def test_compound_code(self):
        assert strip_ansi("\x1b[1;31mError:\x1b[0m boom") == "Error: boom"

    def test_empty_line(self):
        assert strip_ansi("") == ""
