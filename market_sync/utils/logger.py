"""Logging configuration for the ingestion job and API."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from market_sync.utils.config import Settings

ROOT_LOGGER_NAME = "market_sync"
LOG_FILE_NAME = "market_sync.log"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings) -> None:
    """
    Attach console and file handlers to the package root logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        settings: Service settings (log_level and log_dir are used)
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    # File handler
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(file_handler)

    # Keep uvicorn in step with the service log level
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)


class SyncLogger:
    """Logger with per-cycle metrics tracking."""

    def __init__(self, name: str) -> None:
        """
        Initialize the logger.

        Args:
            name: Logger name (usually module name)
        """
        self.logger = logging.getLogger(name)

        # Cycle metrics
        self.metrics: dict[str, float] = {}

    def debug(self, message: str, *args: object, **kwargs: object) -> None:
        """Log debug message."""
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: object, **kwargs: object) -> None:
        """Log info message."""
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: object, **kwargs: object) -> None:
        """Log warning message."""
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: object, **kwargs: object) -> None:
        """Log error message."""
        self.logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: object, **kwargs: object) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, *args, **kwargs)

    def record_metric(self, name: str, value: float) -> None:
        """
        Record a cycle metric.

        Args:
            name: Metric name (e.g., "fetched", "inserted")
            value: Metric value
        """
        self.metrics[name] = value
        self.debug("Metric %s: %.2f", name, value)

    def log_summary(self) -> None:
        """Log all recorded metrics on one line and reset them."""
        if not self.metrics:
            return

        summary = ", ".join(f"{name}={value:g}" for name, value in self.metrics.items())
        self.info("Cycle summary: %s", summary)
        self.metrics.clear()


def get_logger(name: str) -> SyncLogger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        SyncLogger instance
    """
    return SyncLogger(name)
