import sys
import logging


SUPERVISOR_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


class MainFormatter(logging.Formatter):
    """Formats supervisor records; captured child output (`proc.*` loggers) is echoed verbatim."""

    def __init__(self, fmt: str = SUPERVISOR_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record):
        if record.name.startswith('proc.'):
            return record.getMessage()
        return super().format(record)


def setup_logging(console_level: int = logging.INFO) -> None:
    """
    Configures the root logger for the supervisor.
    This sets up a single console handler on stdout, clearing any previously
    configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)


def get_process_logger(process_name: str) -> logging.Logger:
    """Returns the logger that echoes a supervised process's captured output."""
    return logging.getLogger(f"proc.{process_name}")
