"""
This is a minimal entry point script for the supervisor process.

Its sole responsibility is to name the process and start the supervisor, so
`python -m src.procwatch` behaves exactly like the `procwatch` console script.
"""
from src.procwatch.main import run

if __name__ == "__main__":
    run()
