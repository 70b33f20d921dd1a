"""
Restart policy - turns one process outcome into a restart decision.

The policy is pure: it looks only at the outcome it is given and keeps no
history between attempts. Whether a normal exit ends supervision is decided
by a pluggable stop predicate, which by default never matches.
"""

from typing import Callable, Iterable, Optional

from src.procwatch.supervisor.outcome import (
    LaunchFailure,
    ProcessExit,
    ProcessOutcome,
    RestartDecision,
)

StopPredicate = Callable[[ProcessExit], bool]

DEFAULT_RESTART_DELAY = 2.0
DEFAULT_LAUNCH_FAILURE_DELAY = 5.0


def never_stop(outcome: ProcessExit) -> bool:
    return False


def exit_code_in(codes: Iterable[int]) -> StopPredicate:
    """Stops when the process exits with one of `codes`."""
    stop_codes = frozenset(codes)

    def _predicate(outcome: ProcessExit) -> bool:
        return outcome.exit_code is not None and outcome.exit_code in stop_codes
    return _predicate


def output_contains(markers: Iterable[str]) -> StopPredicate:
    """Stops when any marker (e.g. "PERMANENT_SHUTDOWN") appears in stdout or stderr."""
    stop_markers = tuple(m for m in markers if m)

    def _predicate(outcome: ProcessExit) -> bool:
        return any(m in outcome.stdout or m in outcome.stderr for m in stop_markers)
    return _predicate


def any_of(*predicates: StopPredicate) -> StopPredicate:
    def _predicate(outcome: ProcessExit) -> bool:
        return any(p(outcome) for p in predicates)
    return _predicate


class RestartPolicy:
    """
    Decides what happens after each attempt.

    Attributes:
        stop_condition: Predicate over a normal exit; True ends supervision
        restart_delay: Backoff after a normal exit, in seconds
        launch_failure_delay: Backoff after a launch failure, in seconds
    """

    def __init__(
        self,
        stop_condition: Optional[StopPredicate] = None,
        restart_delay: float = DEFAULT_RESTART_DELAY,
        launch_failure_delay: float = DEFAULT_LAUNCH_FAILURE_DELAY,
    ) -> None:
        if restart_delay < 0 or launch_failure_delay < 0:
            raise ValueError("Backoff delays cannot be negative")
        self.stop_condition = stop_condition or never_stop
        self.restart_delay = restart_delay
        self.launch_failure_delay = launch_failure_delay

    def decide(self, outcome: ProcessOutcome) -> RestartDecision:
        if isinstance(outcome, LaunchFailure):
            return RestartDecision.restart_after(self.launch_failure_delay)
        if self.stop_condition(outcome):
            return RestartDecision.stop()
        return RestartDecision.restart_after(self.restart_delay)

    @classmethod
    def from_settings(cls, settings) -> "RestartPolicy":
        """Builds a policy from the restart and stop-condition settings."""
        predicates = []
        if settings.STOP_EXIT_CODES:
            predicates.append(exit_code_in(settings.STOP_EXIT_CODES))
        if settings.STOP_OUTPUT_MARKERS:
            predicates.append(output_contains(settings.STOP_OUTPUT_MARKERS))

        return cls(
            stop_condition=any_of(*predicates) if predicates else never_stop,
            restart_delay=settings.RESTART_DELAY,
            launch_failure_delay=settings.LAUNCH_FAILURE_DELAY,
        )
