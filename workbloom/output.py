"""Console routing for human-readable and machine-readable output.

All narrative text goes through the shared rich ``console``. When machine
output is enabled the console writes to stderr, leaving stdout for the single
essential values written by :func:`emit`.
"""

import os
import sys

from rich.console import Console


def _color_disabled() -> bool:
    # rich already honours NO_COLOR
    return os.environ.get("CLICOLOR") == "0"


console = Console(no_color=_color_disabled() or None)

_machine_output = False


def set_machine_output(enabled: bool) -> None:
    """Route narrative console output to stderr when enabled."""
    global _machine_output
    _machine_output = enabled
    console.stderr = enabled


def is_machine_output() -> bool:
    return _machine_output


def emit(value) -> None:
    """Write one essential value to stdout, regardless of the output mode."""
    sys.stdout.write(f"{value}\n")
    sys.stdout.flush()
