"""
Logging setup for the rawsync CLI.

Console: WARNING by default, INFO with --verbose, level names colored on
a terminal. Log file (--log-file): everything from DEBUG, uncolored.
"""

import logging
import sys
from pathlib import Path

RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[2m",
    logging.INFO: "\033[36m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[91m",
    logging.CRITICAL: "\033[1;37;41m",
}

CONSOLE_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{original:8}{RESET}"
        try:
            return super().format(record)
        finally:
            # Restore for the file handler
            record.levelname = original


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None, use_colors: bool | None = None):
    """
    Configure application-wide logging.

    Args:
        level: Console logging level
        log_file: Optional path to a log file (always DEBUG)
        use_colors: Force colors on/off; default is on for a TTY
    """
    if use_colors is None:
        use_colors = sys.stdout.isatty()

    console_handler = logging.StreamHandler(sys.stdout)
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    console_handler.setFormatter(formatter_cls(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    console_handler.setLevel(level)

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # Reduce noise from libraries
    logging.getLogger("openpyxl").setLevel(logging.WARNING)
