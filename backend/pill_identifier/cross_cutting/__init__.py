"""
Cross-Cutting Concerns

Utilities that span across multiple layers.
"""

from .logging import setup_logging, get_logger, FlowLogger
from .validation import validate_upload, ensure_valid_image, validate_text, ensure_language_tag
from .error_handling import ErrorHandler

__all__ = [
    "setup_logging",
    "get_logger",
    "FlowLogger",
    "validate_upload",
    "ensure_valid_image",
    "validate_text",
    "ensure_language_tag",
    "ErrorHandler",
]
