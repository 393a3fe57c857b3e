"""Spec discovery: filesystem scan and static title extraction."""

from specwatch.discovery.scanner import SpecFile, group_by_folder, read_spec_source, scan_for_specs
from specwatch.discovery.titles import SpecOutline, extract_outline, extract_suite_title, extract_test_titles

__all__ = [
    "SpecFile",
    "SpecOutline",
    "extract_outline",
    "extract_suite_title",
    "extract_test_titles",
    "group_by_folder",
    "read_spec_source",
    "scan_for_specs",
]
