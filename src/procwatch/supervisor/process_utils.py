import sys
import psutil
import logging
import threading
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.procwatch.supervisor.errors import LaunchError, WaitError
from src.procwatch.supervisor.outcome import ProcessExit, SupervisedTarget

log = logging.getLogger(__name__)

# Seconds to wait for pipe readers after killing an untracked child.
READER_JOIN_TIMEOUT = 5


#* --- Process Creation ---
def get_executable_path(base_path: Path) -> Path:
    """Returns the platform-specific full path for an executable."""
    if sys.platform == "win32" and not base_path.suffix:
        return base_path.with_suffix(".exe")
    return base_path

def _get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific creation flags for subprocess.Popen."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}

def _describe_child(pid: int, fallback: str) -> str:
    """Best-effort process name for the log line announcing a launch."""
    try:
        return psutil.Process(pid).name()
    except psutil.Error:
        return fallback


#* --- Output Capture ---
class _PipeReader:
    """Drains one pipe of a child process on a dedicated thread."""

    def __init__(self, pipe, process_name: str, stream_name: str) -> None:
        self.pipe = pipe
        self.process_name = process_name
        self.stream_name = stream_name
        self.chunks: List[bytes] = []
        self.failed = False
        self.thread = threading.Thread(
            target=self._drain,
            name=f"{process_name}-{stream_name}-reader",
            daemon=True,
        )

    def start(self) -> "_PipeReader":
        self.thread.start()
        return self

    def _drain(self) -> None:
        try:
            for line_bytes in iter(self.pipe.readline, b""):
                self.chunks.append(line_bytes)
        except (OSError, ValueError) as e:
            self.failed = True
            log.debug(f"Pipe reader for {self.process_name} {self.stream_name} exited: {e}")
        finally:
            self.pipe.close()

    def join(self, timeout: Optional[float] = None) -> None:
        self.thread.join(timeout)

    def text(self) -> str:
        """The captured text, or an empty string if the stream could not be read."""
        if self.failed:
            return ""
        return b"".join(self.chunks).decode("utf-8", errors="replace")


def _abandon_child(pid: int, readers: List[_PipeReader]) -> None:
    """
    Kills a child whose status can no longer be tracked and waits for its pipes to drain.

    The readers close their pipes once the dead child's end reaches EOF, so the
    next attempt never overlaps with this one.
    """
    try:
        psutil.Process(pid).kill()
        log.warning(f"Killed untracked process (PID {pid}) before retrying.")
    except psutil.NoSuchProcess:
        pass
    except psutil.Error as e:
        log.error(f"Failed to kill untracked process (PID {pid}): {e}")

    for reader in readers:
        reader.join(READER_JOIN_TIMEOUT)
        if reader.thread.is_alive():
            log.warning(f"{reader.stream_name} of PID {pid} still open after {READER_JOIN_TIMEOUT}s.")


def run_process(target: SupervisedTarget) -> ProcessExit:
    """
    Runs the target once and blocks until it terminates.

    Both output pipes are drained concurrently by two reader threads started
    right after the spawn, so a child filling one pipe never stalls on it.

    :param target: The executable to run.
    :return: The termination outcome together with the captured stdout and stderr.
    :raises LaunchError: If the process could not be spawned.
    :raises WaitError: If the final status of the process could not be retrieved.
    """
    try:
        process = subprocess.Popen(
            target.command(),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            **_get_popen_creation_flags(),
        )
    except (OSError, ValueError) as e:
        raise LaunchError(f"Failed to start '{target}': {e}") from e

    log.debug(f"{_describe_child(process.pid, target.name)} started with PID: {process.pid}")
    readers = [
        _PipeReader(process.stdout, target.name, "stdout").start(),
        _PipeReader(process.stderr, target.name, "stderr").start(),
    ]

    try:
        returncode = process.wait()
    except OSError as e:
        _abandon_child(process.pid, readers)
        raise WaitError(f"Failed to retrieve exit status of '{target}' (PID {process.pid}): {e}") from e

    for reader in readers:
        reader.join()

    stdout_reader, stderr_reader = readers
    exit_code: Optional[int] = returncode
    signal_number: Optional[int] = None
    if returncode is not None and returncode < 0:
        # POSIX reports death by signal N as -N.
        exit_code, signal_number = None, -returncode

    return ProcessExit(
        exit_code=exit_code,
        stdout=stdout_reader.text(),
        stderr=stderr_reader.text(),
        signal_number=signal_number,
        pid=process.pid,
    )
