"""Discovery of spec files in a project tree.

Walks the conventional test directories of a JavaScript/TypeScript project
and returns every ``*.spec.js`` / ``*.test.ts`` style file together with
the title of the suite it declares.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from specwatch.discovery.titles import extract_suite_title

DEFAULT_TEST_DIRS = ("test", "tests", "webapp/test", "specs")
DEFAULT_IGNORED_DIRS = ("node_modules", ".git")
DEFAULT_SPEC_PATTERN = r"\.(spec|test)\.(js|ts)$"

# Folder label for spec files at the project root
ROOT_FOLDER = "(root)"


@dataclass
class SpecFile:
    """A discovered spec file."""

    name: str
    relative_path: str
    absolute_path: str
    title: str


def read_spec_source(path: str | Path) -> str:
    """Read a spec file as UTF-8 text.

    Raises:
        OSError: If the file cannot be read.
    """
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _suite_title_or_name(path: Path) -> str:
    try:
        source = read_spec_source(path)
    except OSError as exc:
        print(f"scan: could not read {path}: {exc}", file=sys.stderr)
        return path.name
    return extract_suite_title(source) or path.name


def _walk(
    directory: Path,
    project_root: Path,
    ignored: frozenset[str],
    pattern: re.Pattern[str],
    found: list[SpecFile],
) -> None:
    try:
        entries = sorted(os.listdir(directory))
    except OSError as exc:
        print(f"scan: skipping {directory}: {exc}", file=sys.stderr)
        return

    for entry in entries:
        path = directory / entry
        if path.is_dir():
            if entry not in ignored:
                _walk(path, project_root, ignored, pattern, found)
        elif pattern.search(entry):
            found.append(SpecFile(
                name=entry,
                relative_path=os.path.relpath(path, project_root),
                absolute_path=str(path.resolve()),
                title=_suite_title_or_name(path),
            ))


def scan_for_specs(
    project_root: str | Path,
    test_dirs: Iterable[str] = DEFAULT_TEST_DIRS,
    ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
    spec_pattern: str = DEFAULT_SPEC_PATTERN,
) -> list[SpecFile]:
    """Find spec files under the test directories of *project_root*.

    Missing test directories are skipped.  A file reachable from more
    than one configured test directory is reported once.

    Args:
        project_root: Project directory the test directories are relative to.
        test_dirs: Directories to search, relative to *project_root*.
        ignored_dirs: Directory names never descended into.
        spec_pattern: Regex matched against file names.

    Returns:
        Spec files in walk order.
    """
    root = Path(project_root)
    pattern = re.compile(spec_pattern)
    ignored = frozenset(ignored_dirs)

    found: list[SpecFile] = []
    for test_dir in test_dirs:
        directory = root / test_dir
        if directory.is_dir():
            _walk(directory, root, ignored, pattern, found)

    seen: set[str] = set()
    unique: list[SpecFile] = []
    for spec in found:
        if spec.absolute_path not in seen:
            seen.add(spec.absolute_path)
            unique.append(spec)
    return unique


def group_by_folder(files: Iterable[SpecFile]) -> dict[str, list[SpecFile]]:
    """Group spec files by their parent folder, folders sorted by name."""
    groups: dict[str, list[SpecFile]] = {}
    for spec in files:
        parts = re.split(r"[/\\]", spec.relative_path)[:-1]
        folder = "/".join(parts) if parts else ROOT_FOLDER
        groups.setdefault(folder, []).append(spec)
    return {folder: groups[folder] for folder in sorted(groups)}
