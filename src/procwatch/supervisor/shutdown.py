import signal
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from src.procwatch.supervisor.errors import HandlerRegistrationError

log = logging.getLogger(__name__)

HANDLED_SIGNALS: Tuple[signal.Signals, ...] = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM") if hasattr(signal, name)
)


class ShutdownSignal:
    """
    Process-wide "keep running" flag.

    The interrupt handler is the only writer; the supervision loop is the only
    reader. The flag moves from "continue" to "stop" exactly once.
    """

    def __init__(self) -> None:
        self._stop_requested = threading.Event()

    def request_shutdown(self) -> None:
        """
        Flips the flag to "stop". Safe to call repeatedly.

        Runs inside signal handlers, so it only sets the flag; the supervision
        loop logs the acknowledgment when it observes the request.
        """
        self._stop_requested.set()

    def should_continue(self) -> bool:
        return not self._stop_requested.is_set()

    def wait(self, timeout: Optional[float]) -> bool:
        """
        Sleeps for up to `timeout` seconds, waking early on shutdown.

        :return: True if shutdown was requested before or during the wait.
        """
        return self._stop_requested.wait(timeout)


def install_signal_handlers(
    shutdown_signal: ShutdownSignal,
    signals: Tuple[signal.Signals, ...] = HANDLED_SIGNALS,
) -> Dict[signal.Signals, Callable]:
    """
    Routes the given signals to `shutdown_signal.request_shutdown`.

    Must run on the main thread before the supervision loop starts polling.

    :param shutdown_signal: The flag the handlers will flip.
    :param signals: The signals to handle.
    :return: The previously installed handlers, keyed by signal.
    :raises HandlerRegistrationError: If any handler cannot be installed.
    """
    def _handler(signum, frame) -> None:
        shutdown_signal.request_shutdown()

    previous: Dict[signal.Signals, Callable] = {}
    for sig in signals:
        try:
            previous[sig] = signal.signal(sig, _handler)
        except (ValueError, OSError, RuntimeError) as e:
            restore_signal_handlers(previous)
            raise HandlerRegistrationError(
                f"Could not install handler for {signal.Signals(sig).name}: {e}"
            ) from e
        log.debug(f"Installed shutdown handler for {signal.Signals(sig).name}.")
    return previous


def restore_signal_handlers(previous: Dict[signal.Signals, Callable]) -> None:
    """Reinstates handlers returned by `install_signal_handlers`."""
    for sig, handler in previous.items():
        try:
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        except (ValueError, OSError) as e:
            log.error(f"Failed to restore handler for {signal.Signals(sig).name}: {e}")
