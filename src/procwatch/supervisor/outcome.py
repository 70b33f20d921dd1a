"""Value types passed between the process runner, the restart policy and the loop."""

from enum import Enum, auto
from pathlib import Path
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class SupervisedTarget:
    """
    The executable under supervision.

    Attributes:
        path: File system path of the executable
        args: Extra command-line arguments passed on every launch
    """
    path: Path
    args: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.path.name

    def command(self) -> List[str]:
        return [str(self.path), *self.args]

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ProcessExit:
    """
    A supervised process ran and terminated.

    `exit_code` is None when the process was killed by a signal (then
    `signal_number` is set) or the platform reported no code at all.
    """
    exit_code: Optional[int]
    stdout: str = ""
    stderr: str = ""
    signal_number: Optional[int] = None
    pid: Optional[int] = None

    def describe(self) -> str:
        if self.exit_code is not None:
            return f"exited with status: {self.exit_code}"
        if self.signal_number is not None:
            return f"terminated by signal {self.signal_number}"
        return "terminated abnormally (no exit status)"


@dataclass(frozen=True)
class LaunchFailure:
    """A supervised process could not be started, or its status could not be retrieved."""
    error: str


ProcessOutcome = Union[ProcessExit, LaunchFailure]


class RestartAction(Enum):
    RESTART = auto()  # Sleep for `delay` seconds, then launch again
    STOP = auto()     # End supervision


@dataclass(frozen=True)
class RestartDecision:
    action: RestartAction
    delay: float = 0.0

    @classmethod
    def restart_after(cls, delay: float) -> "RestartDecision":
        return cls(RestartAction.RESTART, delay)

    @classmethod
    def stop(cls) -> "RestartDecision":
        return cls(RestartAction.STOP)

    @property
    def should_stop(self) -> bool:
        return self.action is RestartAction.STOP
