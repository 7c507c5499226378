"""
Configuration Module

Application settings and configuration management.
"""

from .settings import (
    AppConfig,
    LLMConfig,
    SpeechConfig,
    UploadConfig,
    ServerConfig,
    LoggingConfig,
    MAX_UPLOAD_BYTES,
    ALLOWED_IMAGE_MIME_TYPES,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "LLMConfig",
    "SpeechConfig",
    "UploadConfig",
    "ServerConfig",
    "LoggingConfig",
    "MAX_UPLOAD_BYTES",
    "ALLOWED_IMAGE_MIME_TYPES",
    "get_default_config",
]
