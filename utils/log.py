"""
Color-coded logging utilities for the service.

Provides the logging setup shared by both listeners, a few console helpers
for command-line output, and fatal() for startup errors.
Uses colorama for cross-platform terminal color support.
"""

import datetime
import logging
import os
import sys
from typing import NoReturn, Optional

from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()


# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------

class C:
    """Color shortcuts for console output."""
    OK = Fore.GREEN + Style.BRIGHT
    WARN = Fore.YELLOW + Style.BRIGHT
    ERR = Fore.RED + Style.BRIGHT
    DIM = Style.DIM
    RESET = Style.RESET_ALL


LEVEL_COLORS = {
    logging.DEBUG: C.DIM,
    logging.INFO: "",
    logging.WARNING: C.WARN,
    logging.ERROR: C.ERR,
    logging.CRITICAL: C.ERR,
}

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _ts() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


# ---------------------------------------------------------------------------
# Console helpers
# ---------------------------------------------------------------------------

def ok(msg: str) -> None:
    """Print a success message."""
    print(f"{C.OK}[{_ts()}] OK {msg}{C.RESET}")


def err(msg: str) -> None:
    """Print an error."""
    print(f"{C.ERR}[{_ts()}] ERR {msg}{C.RESET}")


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

class ColorFormatter(logging.Formatter):
    """Formatter that colors the whole line by level."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{line}{C.RESET}" if color else line


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger: colored console output on stderr and,
    optionally, a plain log file.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Prevent duplicate handlers when called more than once
    if logger.handlers:
        return logger

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(ch)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)

    return logger


def fatal(logger: logging.Logger, msg: str, code: int = 1) -> NoReturn:
    """Log a startup error and exit the process."""
    logger.critical(msg)
    sys.exit(code)
