import sys
import logging
from typing import List, Optional, Tuple

import setproctitle

from src.procwatch.log import setup_logging
from src.procwatch.config import effective_settings as config
from src.procwatch.supervisor import (
    ConfigurationError,
    HandlerRegistrationError,
    ProcessMonitor,
    RestartPolicy,
    ShutdownSignal,
    install_signal_handlers,
    restore_signal_handlers,
)
from src.procwatch.supervisor.startup import resolve_target, validate_target

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_HANDLER_REGISTRATION_ERROR = 2

USAGE = "usage: procwatch [--verbose] [EXECUTABLE [ARGS...]]"


def parse_command_line(argv: List[str]) -> Tuple[bool, List[str]]:
    """
    Splits leading supervisor flags from the executable and its arguments.

    Everything from the first non-flag word on belongs to the supervised
    executable, so its own flags are passed through untouched.

    :param argv: The command line without the program name.
    :return tuple: (verbose flag, [executable, *args]) - the list may be empty.
    """
    verbose = False
    remaining = list(argv)
    while remaining and remaining[0].startswith("--"):
        flag = remaining.pop(0)
        if flag == "--":
            break
        if flag == "--verbose":
            verbose = True
        else:
            log.warning(f"Unknown option '{flag}' ignored. {USAGE}")
    return verbose, remaining


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point for the supervisor.

    :param argv: Command-line arguments; defaults to sys.argv[1:].
    :return int: The process exit status.
    """
    verbose, command = parse_command_line(sys.argv[1:] if argv is None else argv)
    console_level = logging.DEBUG if verbose else logging.getLevelName(config.LOG_LEVEL)
    if not isinstance(console_level, int):
        console_level = logging.INFO
    setup_logging(console_level)

    if command:
        # Arguments configured for the default executable never follow a CLI path.
        config.apply_overrides({
            "PROCWATCH_EXECUTABLE": command[0],
            "PROCWATCH_ARGS": tuple(command[1:]),
        })

    target = resolve_target(config)
    try:
        validate_target(target)
    except ConfigurationError as e:
        log.error(f"Error: {e}")
        log.error("Pass the executable path as the first argument or set PROCWATCH_EXECUTABLE.")
        return EXIT_CONFIGURATION_ERROR

    try:
        policy = RestartPolicy.from_settings(config)
    except ValueError as e:
        log.error(f"Error: invalid restart settings: {e}")
        return EXIT_CONFIGURATION_ERROR

    shutdown_signal = ShutdownSignal()
    try:
        previous_handlers = install_signal_handlers(shutdown_signal)
    except HandlerRegistrationError as e:
        log.critical(f"Error setting interrupt handler: {e}")
        return EXIT_HANDLER_REGISTRATION_ERROR

    monitor = ProcessMonitor(target, shutdown_signal=shutdown_signal, policy=policy)
    try:
        monitor.supervision_loop()
    finally:
        restore_signal_handlers(previous_handlers)
    return EXIT_OK


def run() -> None:
    """Console-script entry point: names the process, then runs the supervisor."""
    setproctitle.setproctitle(config.PROCESS_TITLE)
    sys.exit(main())


if __name__ == "__main__":
    run()
