"""Project configuration file management.

Reads and writes the .specwatch.json file that controls where spec files
are searched, how the runner is launched, and which editor opens source
links.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONFIG_FILE_NAME = ".specwatch.json"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "test_dirs": ["test", "tests", "webapp/test", "specs"],
    "ignored_dirs": ["node_modules", ".git"],
    "spec_pattern": r"\.(spec|test)\.(js|ts)$",
    "vendor_marker": "node_modules",
    "runner_config": "wdio.conf.js",
    "runner_command": None,
    "editor_command": "code",
    "fallback_suite_title": "Test Suite Execution",
    "mock_delay": 2.0,
}


class SpecwatchConfig:
    """Manages the .specwatch.json configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    @classmethod
    def for_project(cls, project_root: Path) -> SpecwatchConfig:
        """Load the config file located in *project_root*, if present."""
        return cls(project_root / CONFIG_FILE_NAME)

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def test_dirs(self) -> list[str]:
        """Directories searched for spec files, relative to the project."""
        return list(self._data.get("test_dirs", DEFAULT_CONFIG["test_dirs"]))

    @property
    def ignored_dirs(self) -> list[str]:
        """Directory names never descended into while scanning."""
        return list(
            self._data.get("ignored_dirs", DEFAULT_CONFIG["ignored_dirs"])
        )

    @property
    def spec_pattern(self) -> str:
        """Regex a file name must match to count as a spec file."""
        return str(
            self._data.get("spec_pattern", DEFAULT_CONFIG["spec_pattern"])
        )

    @property
    def vendor_marker(self) -> str:
        """Path fragment marking vendored dependency files."""
        return str(
            self._data.get("vendor_marker", DEFAULT_CONFIG["vendor_marker"])
        )

    @property
    def runner_config(self) -> str:
        """Runner config file whose presence enables real runs."""
        return str(
            self._data.get("runner_config", DEFAULT_CONFIG["runner_config"])
        )

    @property
    def runner_command(self) -> list[str] | None:
        """Explicit runner command with a ``{spec}`` placeholder (None = auto)."""
        val = self._data.get("runner_command", DEFAULT_CONFIG["runner_command"])
        if val is None:
            return None
        if isinstance(val, str):
            return val.split()
        return [str(part) for part in val]

    @property
    def editor_command(self) -> str:
        """Executable used to open source links."""
        return str(
            self._data.get("editor_command", DEFAULT_CONFIG["editor_command"])
        )

    @property
    def fallback_suite_title(self) -> str:
        """Suite title shown when neither the spec file nor its name provides one."""
        return str(
            self._data.get(
                "fallback_suite_title",
                DEFAULT_CONFIG["fallback_suite_title"],
            )
        )

    @property
    def mock_delay(self) -> float:
        """Seconds the simulated run waits between its output lines."""
        return float(self._data.get("mock_delay", DEFAULT_CONFIG["mock_delay"]))

    def set_config(
        self,
        runner_command: list[str] | None = None,
        editor_command: str | None = None,
        vendor_marker: str | None = None,
    ) -> None:
        """Update configuration values."""
        if runner_command is not None:
            self._data["runner_command"] = list(runner_command)
        if editor_command is not None:
            self._data["editor_command"] = editor_command
        if vendor_marker is not None:
            self._data["vendor_marker"] = vendor_marker
