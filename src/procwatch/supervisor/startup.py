import logging
from pathlib import Path
from typing import Optional, Sequence

from src.procwatch.supervisor.errors import ConfigurationError
from src.procwatch.supervisor.outcome import SupervisedTarget
from src.procwatch.supervisor.process_utils import get_executable_path

log = logging.getLogger(__name__)


def resolve_target(settings, path: Optional[str] = None, args: Optional[Sequence[str]] = None) -> SupervisedTarget:
    """
    Builds the supervised target from the CLI values, falling back to settings.

    :param settings: The effective settings object.
    :param path: Executable path given on the command line, if any.
    :param args: Executable arguments given on the command line, if any.
    :return: The target to supervise.
    """
    base_path = Path(path) if path else Path(settings.PROCWATCH_EXECUTABLE)
    target_args = tuple(args) if args else tuple(settings.PROCWATCH_ARGS)
    return SupervisedTarget(path=get_executable_path(base_path), args=target_args)


def validate_target(target: SupervisedTarget) -> None:
    """
    Checks that the supervised executable exists.

    :raises ConfigurationError: If the path does not exist.
    """
    if not target.path.exists():
        raise ConfigurationError(f"Executable not found: {target.path}")
    log.debug(f"Validated supervised executable at '{target.path.resolve()}'.")
