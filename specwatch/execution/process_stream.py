"""Streaming execution of a spec file in a child process.

Spawns the spec runner, reads stdout and stderr as they are produced, and
hands decoded text chunks to a callback followed by the exit code.  Each
pipe is read on its own thread; callbacks are serialised through a lock so
the consumer sees a single ordered stream.
"""

from __future__ import annotations

import codecs
import os
import shutil
import signal
import subprocess
import sys
import threading
from pathlib import Path
from typing import IO, Callable

# Bytes requested per pipe read
READ_SIZE = 4096

# Prefix marking chunks that came from the runner's stderr
STDERR_PREFIX = "ERROR: "

SPEC_PLACEHOLDER = "{spec}"


def build_command(
    spec_path: str,
    project_root: Path,
    runner_command: list[str] | None = None,
    runner_config: str = "wdio.conf.js",
    mock_delay: float = 2.0,
) -> list[str]:
    """Choose the command line that runs *spec_path*.

    An explicit *runner_command* wins (``{spec}`` is substituted).  Otherwise
    the project's runner is used when its config file exists, and a short
    simulated run is used when it does not.
    """
    if runner_command:
        return [part.replace(SPEC_PLACEHOLDER, spec_path) for part in runner_command]

    if (project_root / runner_config).exists():
        return ["npx", "wdio", "run", runner_config, "--spec", spec_path]

    script = (
        "import sys, time\n"
        "print('[MOCK] No runner config found. Simulating run of: ' + sys.argv[1], flush=True)\n"
        f"time.sleep({float(mock_delay)!r})\n"
        "print('[MOCK] Done.', flush=True)\n"
    )
    return [sys.executable, "-c", script, spec_path]


class ProcessStream:
    """Runs one spec at a time and streams its output.

    Args:
        project_root: Working directory of the child process.
        command_builder: Maps a spec path to a command line.
    """

    def __init__(
        self,
        project_root: Path,
        command_builder: Callable[[str], list[str]] | None = None,
    ) -> None:
        self.project_root = project_root
        self.command_builder = command_builder or (
            lambda spec: build_command(spec, project_root)
        )
        self._proc: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()
        self._dispatch_lock = threading.Lock()
        self._waiter: threading.Thread | None = None
        self._stopped = False

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._proc is not None

    def start(
        self,
        spec_path: str,
        on_chunk: Callable[[str], None],
        on_exit: Callable[[int], None],
    ) -> None:
        """Spawn the runner for *spec_path*.

        A spawn failure is reported through the callbacks (an error chunk
        followed by exit code -1) rather than raised.

        Raises:
            RuntimeError: If a run is already in progress.
        """
        with self._lock:
            if self._proc is not None or (
                self._waiter is not None and self._waiter.is_alive()
            ):
                raise RuntimeError("A test run is already in progress")
            self._stopped = False

            command = self.command_builder(spec_path)
            executable = shutil.which(command[0]) or command[0]
            print(f"process stream: starting {' '.join(command)}", file=sys.stderr)
            spawn_error: OSError | None = None
            try:
                proc = subprocess.Popen(
                    [executable, *command[1:]],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    stdin=subprocess.DEVNULL,
                    cwd=self.project_root,
                    start_new_session=sys.platform != "win32",
                )
            except OSError as exc:
                spawn_error = exc
            else:
                self._proc = proc

        if spawn_error is not None:
            print(f"process stream: spawn failed: {spawn_error}", file=sys.stderr)
            self._dispatch(on_chunk, f"FATAL ERROR (spawn): {spawn_error}\n")
            self._dispatch(on_exit, -1)
            return

        assert proc.stdout is not None and proc.stderr is not None
        readers = [
            threading.Thread(
                target=self._pump, args=(proc.stdout, "", on_chunk), daemon=True,
            ),
            threading.Thread(
                target=self._pump,
                args=(proc.stderr, STDERR_PREFIX, on_chunk),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()

        self._waiter = threading.Thread(
            target=self._wait_for_exit, args=(proc, readers, on_exit), daemon=True,
        )
        self._waiter.start()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the exit callback has run.

        Returns:
            True if the run finished within *timeout*.
        """
        waiter = self._waiter
        if waiter is None:
            return True
        waiter.join(timeout)
        return not waiter.is_alive()

    def stop(self) -> bool:
        """Kill the running process tree.

        Returns:
            True if a process was running and was signalled.
        """
        with self._lock:
            proc = self._proc
            if proc is None:
                return False
            self._stopped = True
        try:
            if sys.platform == "win32":
                subprocess.Popen(
                    ["taskkill", "/pid", str(proc.pid), "/f", "/t"],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            else:
                os.killpg(proc.pid, signal.SIGKILL)
        except OSError as exc:
            print(f"process stream: failed to stop process {proc.pid}: {exc}",
                  file=sys.stderr)
            return False
        return True

    def _pump(
        self, pipe: IO[bytes], prefix: str, on_chunk: Callable[[str], None],
    ) -> None:
        """Read *pipe* until EOF, forwarding decoded chunks."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        read = getattr(pipe, "read1", pipe.read)
        try:
            while True:
                data = read(READ_SIZE)
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    self._dispatch(on_chunk, prefix + text if prefix else text)
            tail = decoder.decode(b"", final=True)
            if tail:
                self._dispatch(on_chunk, prefix + tail if prefix else tail)
        except (OSError, ValueError) as exc:
            print(f"process stream: read failed: {exc}", file=sys.stderr)
        finally:
            pipe.close()

    def _wait_for_exit(
        self,
        proc: subprocess.Popen[bytes],
        readers: list[threading.Thread],
        on_exit: Callable[[int], None],
    ) -> None:
        code = proc.wait()
        for reader in readers:
            reader.join()
        with self._lock:
            self._proc = None
            stopped = self._stopped
        if stopped:
            print(f"process stream: process stopped with code {code}",
                  file=sys.stderr)
        self._dispatch(on_exit, code)

    def _dispatch(self, callback: Callable, value: object) -> None:
        with self._dispatch_lock:
            callback(value)
