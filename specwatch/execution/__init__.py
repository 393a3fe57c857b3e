"""Spec execution: runner process streaming and editor launch."""

from specwatch.execution.editor import EditorLauncher, parse_location
from specwatch.execution.process_stream import ProcessStream, build_command

__all__ = [
    "EditorLauncher",
    "ProcessStream",
    "build_command",
    "parse_location",
]
