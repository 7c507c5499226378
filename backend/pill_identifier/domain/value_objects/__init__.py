"""
Value Objects

Immutable objects that represent domain concepts with no identity.
"""

from .image_payload import ImagePayload
from .language import (
    Language,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE_CODE,
    get_language,
    supported_language_codes,
    split_language_tag,
    describe_language,
)

__all__ = [
    "ImagePayload",
    "Language",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE_CODE",
    "get_language",
    "supported_language_codes",
    "split_language_tag",
    "describe_language",
]
