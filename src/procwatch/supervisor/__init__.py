"""
The Supervisor package.
Keeps a single external executable running.

This package contains the ProcessMonitor class and its helper modules, which
together handle launching the executable, capturing its output, deciding
whether to restart it, and shutting down on an interrupt signal.
"""
from .errors import ProcWatchError, ConfigurationError, HandlerRegistrationError, LaunchError, WaitError
from .outcome import SupervisedTarget, ProcessExit, LaunchFailure, ProcessOutcome, RestartAction, RestartDecision
from .policy import RestartPolicy, never_stop, exit_code_in, output_contains, any_of
from .shutdown import ShutdownSignal, install_signal_handlers, restore_signal_handlers
from .process_utils import run_process
from .supervisor import ProcessMonitor, MonitorState

__all__ = [
    # Errors
    'ProcWatchError',
    'ConfigurationError',
    'HandlerRegistrationError',
    'LaunchError',
    'WaitError',
    # Data model
    'SupervisedTarget',
    'ProcessExit',
    'LaunchFailure',
    'ProcessOutcome',
    'RestartAction',
    'RestartDecision',
    # Policy
    'RestartPolicy',
    'never_stop',
    'exit_code_in',
    'output_contains',
    'any_of',
    # Shutdown
    'ShutdownSignal',
    'install_signal_handlers',
    'restore_signal_handlers',
    # Running
    'run_process',
    'ProcessMonitor',
    'MonitorState',
]
