"""
This module contains the default configuration settings for procwatch.
It defines the supervised target, restart backoff timings, stop conditions
and logging options. Values can be overridden through environment variables
(or a `.env` file in the working directory).
"""

import os
import shlex
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=False)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent.parent  # Project Root

#* --- Supervised Target ---
# Path of the executable to supervise. The CLI's positional argument wins over this.
PROCWATCH_EXECUTABLE = pathlib.Path(os.getenv("PROCWATCH_EXECUTABLE", str(BASE_DIR / "bin" / "my_program")))
# Extra arguments passed to the executable, split with shell rules.
PROCWATCH_ARGS = tuple(shlex.split(os.getenv("PROCWATCH_ARGS", "")))

#* --- Restart Policy Settings ---
RESTART_DELAY = float(os.getenv("RESTART_DELAY", "2"))                # seconds after a normal exit
LAUNCH_FAILURE_DELAY = float(os.getenv("LAUNCH_FAILURE_DELAY", "5"))  # seconds after a spawn failure

# Exit codes that end supervision instead of restarting, e.g. "99,100".
STOP_EXIT_CODES = frozenset(
    int(code) for code in os.getenv("STOP_EXIT_CODES", "").split(",") if code.strip()
)
# Output markers that end supervision, e.g. "PERMANENT_SHUTDOWN,MONITOR_STOP".
STOP_OUTPUT_MARKERS = tuple(
    marker.strip() for marker in os.getenv("STOP_OUTPUT_MARKERS", "").split(",") if marker.strip()
)

#* --- Process Identity ---
PROCESS_TITLE = "ProcWatch - Supervisor"

#* --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Settings that may be changed at runtime through MergedSettings.apply_overrides
MODIFIABLE_SETTINGS = {
    "PROCWATCH_EXECUTABLE",
    "PROCWATCH_ARGS",
    "RESTART_DELAY",
    "LAUNCH_FAILURE_DELAY",
    "STOP_EXIT_CODES",
    "STOP_OUTPUT_MARKERS",
    "LOG_LEVEL",
}
