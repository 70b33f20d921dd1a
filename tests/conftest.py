"""Shared fixtures for the supervisor tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import pytest

from src.procwatch.config import effective_settings
from src.procwatch.supervisor import ProcessExit, ShutdownSignal, SupervisedTarget


def python_target(code: str) -> SupervisedTarget:
    """A target that runs `code` with the current interpreter."""
    return SupervisedTarget(path=Path(sys.executable), args=("-c", code))


class ScriptedRunner:
    """
    Stands in for run_process: returns (or raises) the scripted results in order
    and requests shutdown once the script has been used up.
    """

    def __init__(self, shutdown: ShutdownSignal, script: Sequence[Union[ProcessExit, BaseException]]):
        self.shutdown = shutdown
        self.script: List[Union[ProcessExit, BaseException]] = list(script)
        self.calls: List[SupervisedTarget] = []
        self.on_call: Optional[Callable[[], None]] = None

    def __call__(self, target: SupervisedTarget) -> ProcessExit:
        self.calls.append(target)
        if self.on_call is not None:
            self.on_call()
        result = self.script.pop(0)
        if not self.script:
            self.shutdown.request_shutdown()
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingSleeper:
    """Records backoff durations instead of sleeping."""

    def __init__(self, action: Optional[Callable[[], None]] = None):
        self.delays: List[float] = []
        self.action = action

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.action is not None:
            self.action()


@pytest.fixture
def shutdown() -> ShutdownSignal:
    return ShutdownSignal()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def target(tmp_path) -> SupervisedTarget:
    return SupervisedTarget(path=tmp_path / "my_program")


@pytest.fixture(autouse=True)
def reset_settings():
    """Drops any runtime overrides a test applied to the settings singleton."""
    yield
    effective_settings.reset()
