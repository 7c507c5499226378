"""
Error Handling

Centralized error handling utilities.
"""

from typing import Optional
import logging
import traceback

from ..domain.exceptions import DomainException


class ErrorHandler:
    """
    Context manager for error handling.

    Usage:
        with ErrorHandler(logger, context="speech-engine", suppress=True) as handler:
            # do something risky
        if handler.has_error:
            # handle error
    """

    def __init__(
        self,
        logger: logging.Logger,
        context: str = "",
        suppress: bool = False
    ):
        """
        Initialize error handler.

        Args:
            logger: Logger for error messages
            context: Context string for error messages
            suppress: Whether to suppress exceptions
        """
        self.logger = logger
        self.context = context
        self.suppress = suppress
        self.error: Optional[BaseException] = None
        self.error_message: Optional[str] = None

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None or not isinstance(exc_val, Exception):
            return False

        self.error = exc_val
        self.error_message = str(exc_val)

        if self.context:
            self.logger.error(f"[{self.context}] {exc_val}")
        else:
            self.logger.error(str(exc_val))

        if isinstance(exc_val, DomainException):
            self.logger.debug(f"Details: {exc_val.details}")
        else:
            self.logger.debug("".join(traceback.format_exception(exc_type, exc_val, exc_tb)))

        return self.suppress

    @property
    def has_error(self) -> bool:
        """Check if an error occurred."""
        return self.error is not None

    @property
    def is_recoverable(self) -> bool:
        """Check if the error is recoverable."""
        if self.error is None:
            return True
        if isinstance(self.error, DomainException):
            return self.error.is_recoverable
        return False
