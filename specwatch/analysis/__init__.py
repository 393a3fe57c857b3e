"""Runner output analysis: line reassembly, normalization, errors, and signals."""

from specwatch.analysis.ansi import strip_ansi
from specwatch.analysis.error_classifier import (
    Classification,
    ErrorClassifier,
    ErrorLogEntry,
    SourceLink,
    extract_line_number,
    find_source_links,
    is_error_line,
    is_summary_line,
)
from specwatch.analysis.line_buffer import LineBuffer
from specwatch.analysis.signals import Signal, parse_signal_line

__all__ = [
    "Classification",
    "ErrorClassifier",
    "ErrorLogEntry",
    "LineBuffer",
    "Signal",
    "SourceLink",
    "extract_line_number",
    "find_source_links",
    "is_error_line",
    "is_summary_line",
    "parse_signal_line",
    "strip_ansi",
]
