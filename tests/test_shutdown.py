"""Tests for the shutdown flag and interrupt handler registration."""

from __future__ import annotations

import time
import signal
import logging
import threading

import pytest

from src.procwatch.supervisor import (
    HandlerRegistrationError,
    ShutdownSignal,
    install_signal_handlers,
    restore_signal_handlers,
)
from src.procwatch.supervisor.shutdown import HANDLED_SIGNALS


def test_continues_until_shutdown_requested(shutdown):
    assert shutdown.should_continue()

    shutdown.request_shutdown()

    assert not shutdown.should_continue()


def test_request_shutdown_is_idempotent_and_silent(shutdown, caplog):
    caplog.set_level(logging.DEBUG)

    shutdown.request_shutdown()
    shutdown.request_shutdown()

    assert not shutdown.should_continue()
    # Signal handlers must not write to the log streams they may have interrupted.
    assert caplog.records == []


def test_wait_times_out_without_shutdown(shutdown):
    assert shutdown.wait(0.01) is False
    assert shutdown.should_continue()


def test_wait_wakes_early_on_shutdown(shutdown):
    timer = threading.Timer(0.05, shutdown.request_shutdown)
    timer.start()
    try:
        started = time.monotonic()
        woke_for_shutdown = shutdown.wait(30)
        elapsed = time.monotonic() - started
    finally:
        timer.cancel()

    assert woke_for_shutdown is True
    assert elapsed < 10


def test_shutdown_from_another_thread_is_visible(shutdown):
    worker = threading.Thread(target=shutdown.request_shutdown)
    worker.start()
    worker.join()

    assert not shutdown.should_continue()


def test_handled_signals_include_sigint():
    assert signal.SIGINT in HANDLED_SIGNALS


def test_installed_handler_requests_shutdown(shutdown):
    previous = install_signal_handlers(shutdown, (signal.SIGINT,))
    try:
        signal.raise_signal(signal.SIGINT)
        # Python runs the handler on the main thread at the next bytecode boundary.
        for _ in range(100):
            if not shutdown.should_continue():
                break
            time.sleep(0.01)
    finally:
        restore_signal_handlers(previous)

    assert not shutdown.should_continue()


def test_restore_reinstates_previous_handler(shutdown):
    before = signal.getsignal(signal.SIGINT)

    previous = install_signal_handlers(shutdown, (signal.SIGINT,))
    assert signal.getsignal(signal.SIGINT) is not before
    restore_signal_handlers(previous)

    assert signal.getsignal(signal.SIGINT) is before


def test_registration_off_main_thread_fails(shutdown):
    errors = []

    def register():
        try:
            install_signal_handlers(shutdown, (signal.SIGINT,))
        except HandlerRegistrationError as e:
            errors.append(e)

    worker = threading.Thread(target=register)
    worker.start()
    worker.join()

    assert len(errors) == 1
    assert "SIGINT" in str(errors[0])


def test_failed_registration_rolls_back_earlier_handlers(shutdown, monkeypatch):
    before = signal.getsignal(signal.SIGINT)
    real_signal = signal.signal

    def flaky_signal(sig, handler):
        if sig == signal.SIGTERM and handler not in (before, signal.SIG_DFL):
            raise OSError("not allowed")
        return real_signal(sig, handler)

    monkeypatch.setattr(signal, "signal", flaky_signal)

    with pytest.raises(HandlerRegistrationError):
        install_signal_handlers(shutdown, (signal.SIGINT, signal.SIGTERM))

    assert signal.getsignal(signal.SIGINT) is before
