"""Tests for per-test outcome line parsing."""

from __future__ import annotations

from specwatch.analysis.signals import clean_signal_title, parse_signal_line


class TestParseSignalLine:
    """Tests for parse_signal_line."""

    def test_success_line(self):
        signal = parse_signal_line("  ✓ logs in")
        assert signal is not None
        assert signal.title == "logs in"
        assert signal.passed is True

    def test_failure_line(self):
        signal = parse_signal_line("  ✖ logs out")
        assert signal is not None
        assert signal.title == "logs out"
        assert signal.passed is False

    def test_duration_stripped(self):
        """The duration annotation and anything after it is dropped."""
        signal = parse_signal_line("✓ logs in (42ms) [retry 1]")
        assert signal is not None
        assert signal.title == "logs in"

    def test_alternative_glyphs(self):
        assert parse_signal_line("✔ a").passed is True
        assert parse_signal_line("✗ b").passed is False
        assert parse_signal_line("✘ c").passed is False

    def test_plain_line(self):
        assert parse_signal_line("Login Page") is None

    def test_glyph_without_title(self):
        """A bare glyph is not a signal."""
        assert parse_signal_line("✓") is None
        assert parse_signal_line("✓   ") is None

    def test_non_duration_parentheses_kept(self):
        assert parse_signal_line("✓ handles (empty) input").title == "handles (empty) input"


class TestCleanSignalTitle:
    """Tests for clean_signal_title."""

    def test_trims_whitespace(self):
        assert clean_signal_title("  logs in  ") == "logs in"

    def test_strips_duration(self):
        assert clean_signal_title("logs in (1234ms)") == "logs in"
