"""Run reporting: terminal panel rendering and JSON/YAML reports."""

from specwatch.reporting.panel import render_panel
from specwatch.reporting.reporter import Reporter

__all__ = [
    "Reporter",
    "render_panel",
]
