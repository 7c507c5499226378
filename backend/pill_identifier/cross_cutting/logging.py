"""
Logging Configuration

Structured logging for the pill identifier.
"""

import logging
import sys
from typing import Optional, Union
from datetime import datetime


ROOT_LOGGER_NAME = "pill_identifier"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional file path for log output
        format_string: Custom format string
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = (
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    formatter = logging.Formatter(format_string)

    # Module loggers are created with __name__, so they all live under the package logger
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Configured logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class FlowLogger:
    """
    Specialized logger for a single identification or translation request.

    Logs stage boundaries with durations, tagged with a short request id.
    """

    def __init__(self, flow_name: str, request_id: str):
        self.flow_name = flow_name
        self.request_id = request_id
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.flow.{flow_name}.{request_id[:8]}")
        self._stage_start_times = {}

    def stage_start(self, stage_name: str) -> None:
        """Log stage start."""
        self._stage_start_times[stage_name] = datetime.now()
        self.logger.info(f"Stage '{stage_name}' started")

    def stage_end(self, stage_name: str, success: bool = True) -> float:
        """Log stage completion and return its duration in milliseconds."""
        duration = 0.0
        if stage_name in self._stage_start_times:
            delta = datetime.now() - self._stage_start_times.pop(stage_name)
            duration = delta.total_seconds() * 1000

        status = "completed" if success else "failed"
        self.logger.info(f"Stage '{stage_name}' {status} in {duration:.2f}ms")
        return duration

    def stage_error(self, stage_name: str, error: Exception) -> None:
        """Log stage error."""
        self.logger.error(f"Stage '{stage_name}' error: {error!r}")
