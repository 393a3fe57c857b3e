"""Entry point for specwatch.

Discovers spec files in a project, prints their declared tests, and runs a
spec while streaming the runner output into a live status panel.
"""

from __future__ import annotations

import argparse
import json
import sys
import threading
from pathlib import Path

from specwatch.discovery.scanner import group_by_folder, read_spec_source, scan_for_specs
from specwatch.discovery.titles import extract_outline
from specwatch.execution.editor import EditorLauncher
from specwatch.execution.process_stream import ProcessStream, build_command
from specwatch.lifecycle.config import CONFIG_FILE_NAME, SpecwatchConfig
from specwatch.lifecycle.session import NullObserver, SessionController, TranscriptLine
from specwatch.reporting.panel import render_panel, render_transcript_line
from specwatch.reporting.reporter import Reporter

# Seconds between checks for Ctrl-C while a run is in progress
POLL_INTERVAL = 0.2

# Seconds to wait for a killed runner to release its pipes
STOP_GRACE = 5.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Discover, run and watch JavaScript spec files"
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help=f"Path to the JSON config file (default: <project-root>/{CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable coloured output",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("scan", help="List spec files grouped by folder")

    outline_parser = subparsers.add_parser(
        "outline", help="Show the suite and test titles declared in a spec",
    )
    outline_parser.add_argument("spec", type=Path, help="Spec file")

    run_parser = subparsers.add_parser(
        "run", help="Run a spec and watch its tests",
    )
    run_parser.add_argument("spec", type=Path, help="Spec file")
    run_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a run report (YAML for .yaml/.yml, JSON otherwise)",
    )

    open_parser = subparsers.add_parser(
        "open", help="Open a path:line:col location in the editor",
    )
    open_parser.add_argument("location", help="Location such as /src/app.js:12:5")

    config_parser = subparsers.add_parser(
        "config", help="Show or update the project configuration",
    )
    config_parser.add_argument(
        "--runner-command",
        default=None,
        help="Runner command line; {spec} is replaced by the spec path",
    )
    config_parser.add_argument(
        "--editor-command",
        default=None,
        help="Executable used to open source locations",
    )
    config_parser.add_argument(
        "--vendor-marker",
        default=None,
        help="Path fragment marking vendored dependency files",
    )

    return parser.parse_args(argv)


class TerminalObserver(NullObserver):
    """Prints transcript lines as they arrive."""

    def __init__(self, color: bool = False) -> None:
        self.color = color

    def on_transcript(self, line: TranscriptLine) -> None:
        text = render_transcript_line(line, self.color)
        if text is not None:
            print(text, flush=True)


def _load_config(args: argparse.Namespace) -> SpecwatchConfig:
    if args.config_file is not None:
        return SpecwatchConfig(args.config_file)
    return SpecwatchConfig.for_project(args.project_root)


def cmd_scan(args: argparse.Namespace, config: SpecwatchConfig) -> int:
    """List discovered spec files."""
    print("Searching for specs...")
    files = scan_for_specs(
        args.project_root,
        test_dirs=config.test_dirs,
        ignored_dirs=config.ignored_dirs,
        spec_pattern=config.spec_pattern,
    )
    print(f"Found {len(files)} files.")
    for folder, specs in group_by_folder(files).items():
        print()
        print(f"{folder}/")
        for spec in specs:
            print(f"  {spec.title}")
            print(f"    {spec.relative_path}")
    return 0


def cmd_outline(args: argparse.Namespace, config: SpecwatchConfig) -> int:
    """Print the suite title and the declared test titles of a spec."""
    try:
        source = read_spec_source(args.spec)
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    outline = extract_outline(source)
    print(outline.title_or(args.spec.name))
    if not outline.test_titles:
        print("  No test cases found (or the spec file declares them dynamically).")
    for i, title in enumerate(outline.test_titles, start=1):
        print(f"  {i}. {title}")
    return 0


def cmd_run(args: argparse.Namespace, config: SpecwatchConfig) -> int:
    """Run a spec file and watch its output."""
    color = not args.no_color and sys.stdout.isatty()
    spec_path = args.spec.resolve()

    try:
        source = read_spec_source(spec_path)
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    outline = extract_outline(source)
    controller = SessionController(
        observer=TerminalObserver(color),
        vendor_marker=config.vendor_marker,
        fallback_suite_title=config.fallback_suite_title,
    )
    session = controller.start_run(
        outline.test_titles,
        suite_title=outline.title_or(spec_path.name),
        spec_path=str(spec_path),
    )

    project_root = args.project_root
    stream = ProcessStream(
        project_root,
        command_builder=lambda spec: build_command(
            spec,
            project_root,
            runner_command=config.runner_command,
            runner_config=config.runner_config,
            mock_delay=config.mock_delay,
        ),
    )
    stopped = threading.Event()
    guard = threading.Lock()

    def on_chunk(chunk: str) -> None:
        with guard:
            controller.feed(chunk)

    def on_exit(code: int) -> None:
        with guard:
            if stopped.is_set():
                controller.complete(None)
                return
            controller.log(
                f"Finished with code {code}", "success" if code == 0 else "error",
            )
            controller.complete(code)

    controller.log(f"Starting: {spec_path}", "info")
    try:
        stream.start(str(spec_path), on_chunk, on_exit)
    except RuntimeError as e:
        with guard:
            controller.fail(str(e))

    try:
        while not stream.wait(timeout=POLL_INTERVAL):
            pass
    except KeyboardInterrupt:
        stopped.set()
        stream.stop()
        with guard:
            controller.log("Stopped by user", "error")
            controller.complete(None)
        stream.wait(timeout=STOP_GRACE)

    print()
    print(render_panel(session, color))

    reporter = Reporter(session)
    if args.output:
        try:
            reporter.write(args.output)
        except OSError as e:
            print(f"Error: Could not write report: {e}", file=sys.stderr)
            return 1
        print(f"Report written to: {args.output}")

    if session.exit_code != 0 or reporter.has_failures:
        return 1
    return 0


def cmd_open(args: argparse.Namespace, config: SpecwatchConfig) -> int:
    """Open a source location in the configured editor."""
    launcher = EditorLauncher(config.editor_command)
    try:
        opened = launcher.open_location(args.location)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0 if opened else 1


def cmd_config(args: argparse.Namespace, config: SpecwatchConfig) -> int:
    """Print the configuration, saving any values given on the command line."""
    updates = (args.runner_command, args.editor_command, args.vendor_marker)
    if any(value is not None for value in updates):
        config.set_config(
            runner_command=(
                args.runner_command.split() if args.runner_command is not None else None
            ),
            editor_command=args.editor_command,
            vendor_marker=args.vendor_marker,
        )
        try:
            config.save()
        except (ValueError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Config written to: {config.path}")

    print(json.dumps(config.config, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 1

    config = _load_config(args)

    if args.command == "scan":
        return cmd_scan(args, config)
    elif args.command == "outline":
        return cmd_outline(args, config)
    elif args.command == "run":
        return cmd_run(args, config)
    elif args.command == "open":
        return cmd_open(args, config)
    elif args.command == "config":
        return cmd_config(args, config)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
