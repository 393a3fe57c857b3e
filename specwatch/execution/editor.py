"""Opening source locations in an external editor."""

from __future__ import annotations

import re
import shutil
import subprocess
import sys

# path:line:col, path may start with a Windows drive letter
LOCATION_PATTERN = re.compile(r"^(?P<path>.+?):(?P<line>\d+):(?P<col>\d+)$")


def parse_location(location: str) -> tuple[str, int, int]:
    """Split ``path:line:col`` into its parts.

    Raises:
        ValueError: If *location* is not of that form.
    """
    match = LOCATION_PATTERN.match(location.replace('"', "").strip())
    if match is None:
        raise ValueError(f"Not a path:line:col location: {location}")
    return match.group("path"), int(match.group("line")), int(match.group("col"))


class EditorLauncher:
    """Launches the editor at a file position without waiting for it."""

    def __init__(self, command: str = "code") -> None:
        self.command = command

    def build_command(self, path: str, line: int, col: int) -> list[str]:
        safe_path = path.replace('"', "")
        return [self.command, "--goto", f"{safe_path}:{line}:{col}"]

    def open_at(self, path: str, line: int, col: int) -> bool:
        """Open *path* at *line*/*col*.

        Returns:
            True if the editor process was started.
        """
        command = self.build_command(path, line, col)
        executable = shutil.which(command[0]) or command[0]
        print(f"editor: opening {command[-1]}", file=sys.stderr)
        try:
            subprocess.Popen(
                [executable, *command[1:]],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            print(f"editor: failed to launch {self.command}: {exc}", file=sys.stderr)
            return False
        return True

    def open_location(self, location: str) -> bool:
        """Open a ``path:line:col`` string such as a clickable error link."""
        path, line, col = parse_location(location)
        return self.open_at(path, line, col)
