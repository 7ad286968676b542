"""Centralized logging configuration for the take-home service.

One console handler (colored on a terminal) and an optional rotating log
file, shared by the service, the Werkzeug request log and the build tools.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

BASE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColorFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # Other handlers see the same record; color a copy only
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(
    level: str = "INFO", log_file: str | None = None, console: bool = True, colored: bool = True
) -> None:
    """Set up centralized logging configuration.

    `LOG_LEVEL` overrides `level`. A file log is written only when
    `LOG_TO_FILE=true`, to `LOG_FILE` or the given `log_file`.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Default file path for the file log
        console: Whether to log to stdout
        colored: Whether to color console output on a terminal
    """
    level = os.getenv("LOG_LEVEL", level)
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_file = os.getenv("LOG_FILE", log_file) if log_to_file else None

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)

        if colored and sys.stdout.isatty():
            formatter: logging.Formatter = ColorFormatter(BASE_FORMAT, DATE_FORMAT)
        else:
            formatter = logging.Formatter(BASE_FORMAT, DATE_FORMAT)

        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(BASE_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    # Service code and the per-request access log follow the chosen level
    logging.getLogger("src").setLevel(numeric_level)
    logging.getLogger("werkzeug").setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger (typically for `__name__`)."""
    return logging.getLogger(name)
