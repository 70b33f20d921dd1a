"""Exceptions raised by the supervisor and its collaborators."""


class ProcWatchError(Exception):
    """Base class for all supervisor errors."""


class ConfigurationError(ProcWatchError):
    """The supervised target is missing or invalid. Fatal at startup."""


class HandlerRegistrationError(ProcWatchError):
    """The interrupt handler could not be installed. Fatal at startup."""


class LaunchError(ProcWatchError):
    """The supervised process could not be spawned for one attempt."""


class WaitError(LaunchError):
    """The final status of a spawned process could not be retrieved."""
