"""procwatch - keeps one external executable running and restarts it when it exits."""

__version__ = "1.0.0"
