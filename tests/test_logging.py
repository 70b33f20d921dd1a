"""Tests for the console logging setup."""

from __future__ import annotations

import sys
import logging

import pytest

from src.procwatch.log import MainFormatter, get_process_logger, setup_logging


@pytest.fixture
def preserved_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(name: str, msg: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)


def test_process_output_is_passed_through_raw():
    formatter = MainFormatter()

    assert formatter.format(_record("proc.my_program", "STDOUT:\nhello")) == "STDOUT:\nhello"


def test_regular_records_get_timestamp_level_and_name():
    formatter = MainFormatter()

    line = formatter.format(_record("src.procwatch.supervisor", "Starting /bin/app..."))

    assert " - INFO     - [src.procwatch.supervisor] - Starting /bin/app..." in line


def test_custom_format_applies_to_supervisor_records_only():
    formatter = MainFormatter("%(levelname)s:%(message)s")

    assert formatter.format(_record("src.procwatch.main", "ready")) == "INFO:ready"
    assert formatter.format(_record("proc.my_program", "raw")) == "raw"


def test_process_logger_name():
    assert get_process_logger("my_program").name == "proc.my_program"


def test_setup_logging_installs_single_stdout_handler(preserved_root_logger):
    setup_logging(logging.WARNING)
    setup_logging(logging.DEBUG)

    handlers = preserved_root_logger.handlers
    assert len(handlers) == 1
    assert handlers[0].stream is sys.stdout
    assert handlers[0].level == logging.DEBUG
    assert isinstance(handlers[0].formatter, MainFormatter)
    assert preserved_root_logger.level == logging.DEBUG
