"""
Logging module for the supervisor.
This module provides the console logging setup and the per-process output loggers.
"""

from .setup import setup_logging, get_process_logger, MainFormatter

__all__ = ["setup_logging", "get_process_logger", "MainFormatter"]
