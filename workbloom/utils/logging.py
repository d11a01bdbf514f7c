"""Logging setup for workbloom.

Log records always go to stderr. stdout is reserved for the paths printed
in machine output mode.
"""
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILE = Path.home() / '.workbloom' / 'workbloom.log'

DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
SHORT_FORMAT = '[%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LEVEL_COLORS = {
    logging.DEBUG: '\033[36m',     # Cyan
    logging.INFO: '\033[32m',      # Green
    logging.WARNING: '\033[33m',   # Yellow
    logging.ERROR: '\033[31m',     # Red
    logging.CRITICAL: '\033[35m',  # Magenta
}
RESET = '\033[0m'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when the stream is a terminal."""

    def __init__(self, fmt=None, datefmt=None, stream=None):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.stream = stream or sys.stderr

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color is None or not self.stream.isatty():
            return super().format(record)

        # Other handlers share the record
        record = copy.copy(record)
        record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='w')  # One run per file
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DEBUG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _stderr_handler(level: int, debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if debug:
        handler.setFormatter(ColoredFormatter(DEBUG_FORMAT, DATE_FORMAT, stream=sys.stderr))
    else:
        handler.setFormatter(ColoredFormatter(SHORT_FORMAT, stream=sys.stderr))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Configure the root logger for a run.

    Args:
        verbose: Show INFO messages
        debug: Show DEBUG messages and also write them to ``log_file``
        log_file: Debug log location, ~/.workbloom/workbloom.log by default
    """
    level = _level_for(verbose, debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if debug:
        root_logger.addHandler(_file_handler(log_file or DEFAULT_LOG_FILE))
    root_logger.addHandler(_stderr_handler(level, debug))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module, named without the package prefix.

    Args:
        name: Module name, usually __name__
    """
    for prefix in ('workbloom.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
