"""Report generation for a finished run session.

Generates JSON or YAML reports with the final status of every declared
test case, the collected error feed, and per-status counts.
"""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any

import yaml

from specwatch.lifecycle.session import RunSession
from specwatch.lifecycle.status import TestStatus

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class Reporter:
    """Collects a run session and generates report files."""

    def __init__(self, session: RunSession) -> None:
        self.session = session

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary representing the full report, suitable for
            JSON or YAML serialization.
        """
        session = self.session
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()

        counts = session.reconciler.counts()
        summary: dict[str, Any] = {"total": len(session.cases), **counts}
        summary["errors_logged"] = len(session.errors)

        tests = [
            {"index": case.index, "title": case.title, "status": case.status.value}
            for case in session.cases
        ]

        errors: list[dict[str, Any]] = []
        for entry in session.errors:
            item: dict[str, Any] = {"text": entry.text}
            if entry.line_number is not None:
                item["line_number"] = entry.line_number
            if entry.links:
                item["links"] = [
                    {
                        "path": link.path,
                        "line": link.line,
                        "column": link.column,
                        "clickable": link.clickable,
                    }
                    for link in entry.links
                ]
            errors.append(item)

        report: dict[str, Any] = {
            "generated_at": now,
            "suite": session.suite_title,
            "spec_path": session.spec_path,
            "completed": session.closed,
            "exit_code": session.exit_code,
            "summary": summary,
            "tests": tests,
            "errors": errors,
        }
        return {"report": report}

    @property
    def has_failures(self) -> bool:
        return any(c.status is TestStatus.ERROR for c in self.session.cases)

    def write_report(self, path: Path) -> None:
        """Write the report as a JSON file.

        Args:
            path: File path to write the JSON report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file.

        Args:
            path: File path to write the YAML report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def write(self, path: Path) -> None:
        """Write YAML for ``.yaml``/``.yml`` paths and JSON otherwise."""
        if path.suffix.lower() in YAML_SUFFIXES:
            self.write_yaml(path)
        else:
            self.write_report(path)
