import logging
from enum import Enum, auto
from typing import Callable, Optional

from src.procwatch.log import get_process_logger
from src.procwatch.supervisor.errors import LaunchError
from src.procwatch.supervisor.policy import RestartPolicy
from src.procwatch.supervisor.process_utils import run_process
from src.procwatch.supervisor.shutdown import ShutdownSignal
from src.procwatch.supervisor.outcome import (
    LaunchFailure,
    ProcessExit,
    ProcessOutcome,
    RestartDecision,
    SupervisedTarget,
)

log = logging.getLogger(__name__)

Runner = Callable[[SupervisedTarget], ProcessExit]
Sleeper = Callable[[float], object]


class MonitorState(Enum):
    IDLE = auto()
    RUNNING = auto()   # Child process launched, waiting for it to exit
    DECIDING = auto()  # Consulting the restart policy
    SLEEPING = auto()  # Backoff before the next launch
    STOPPED = auto()   # Terminal


class ProcessMonitor:
    """
    Keeps a single executable running.

    Each cycle launches the target, waits for it to exit, hands the outcome to
    the restart policy and then either sleeps for the policy's backoff or stops.
    The shutdown signal is checked before every launch and after every backoff;
    the default backoff sleep wakes early when shutdown is requested. A running
    child is never killed: shutdown takes effect once the current attempt ends.
    """

    def __init__(
        self,
        target: SupervisedTarget,
        shutdown_signal: Optional[ShutdownSignal] = None,
        policy: Optional[RestartPolicy] = None,
        runner: Runner = run_process,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        """
        :param target: The executable to supervise.
        :param shutdown_signal: The flag flipped by the interrupt handler.
        :param policy: Decides between restarting and stopping after each attempt.
        :param runner: Runs the target once; raises LaunchError if it cannot start.
        :param sleep: Backoff sleep, called with a duration in seconds.
        """
        self.target = target
        self.shutdown_signal = shutdown_signal or ShutdownSignal()
        self.policy = policy or RestartPolicy()
        self.runner = runner
        self._sleep = sleep or self.shutdown_signal.wait
        self.state = MonitorState.IDLE
        self.proc_log = get_process_logger(target.name)

    def supervision_loop(self) -> None:
        """Runs launch/wait/decide/sleep cycles until stopped. Returns in the STOPPED state."""
        log.info(f"Starting process monitor for: {self.target}")

        while self.shutdown_signal.should_continue():
            self.state = MonitorState.RUNNING
            outcome = self._run_attempt()

            self.state = MonitorState.DECIDING
            decision = self._decide(outcome)
            if decision.should_stop:
                log.info("Exit condition met. Stopping monitor.")
                break
            if not self.shutdown_signal.should_continue():
                break

            self.state = MonitorState.SLEEPING
            log.info(f"Restarting in {decision.delay:g} seconds...")
            self._sleep(decision.delay)

        if not self.shutdown_signal.should_continue():
            log.warning("Received interrupt signal. Shutting down...")
        self.state = MonitorState.STOPPED
        log.info("Process monitor stopped.")

    def _run_attempt(self) -> ProcessOutcome:
        log.info(f"Starting {self.target}...")
        try:
            result = self.runner(self.target)
        except LaunchError as e:
            log.error(f"Error running process: {e}")
            return LaunchFailure(str(e))
        except Exception as e:
            log.critical(f"Unexpected error while running '{self.target}': {e}", exc_info=True)
            return LaunchFailure(str(e))

        self._report_exit(result)
        return result

    def _report_exit(self, result: ProcessExit) -> None:
        """Echoes the captured output, then the exit status."""
        if result.stdout:
            self.proc_log.info(f"STDOUT:\n{result.stdout}")
        if result.stderr:
            self.proc_log.error(f"STDERR:\n{result.stderr}")
        log.info(f"Process {result.describe()}")

    def _decide(self, outcome: ProcessOutcome) -> RestartDecision:
        try:
            return self.policy.decide(outcome)
        except Exception as e:
            # Stop-condition errors are per-attempt errors too.
            log.error(f"Stop condition failed, restarting anyway: {e}", exc_info=True)
            return RestartDecision.restart_after(self.policy.restart_delay)
