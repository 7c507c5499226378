"""
Input Validation

Validation utilities for uploaded images and request fields.
"""

from dataclasses import replace
from typing import Optional, Tuple, Iterable
from io import BytesIO
import logging

from PIL import Image as PILImage, UnidentifiedImageError

from ..config.settings import MAX_UPLOAD_BYTES, ALLOWED_IMAGE_MIME_TYPES
from ..domain.value_objects.image_payload import ImagePayload
from ..domain.exceptions import (
    InvalidImageError,
    ImageTooLargeError,
    UnsupportedImageTypeError,
    InvalidInputError,
)


logger = logging.getLogger(__name__)


# Pillow format names for the allowed MIME types
PIL_FORMAT_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


def validate_upload(
    size: int,
    mime_type: Optional[str],
    max_bytes: int = MAX_UPLOAD_BYTES,
    allowed_mime_types: Iterable[str] = ALLOWED_IMAGE_MIME_TYPES,
) -> Tuple[bool, Optional[str]]:
    """
    Check the upload constraints on size and declared MIME type.

    The file name plays no part: only the declared type counts.

    Args:
        size: Size of the upload in bytes
        mime_type: Declared MIME type
        max_bytes: Maximum accepted size
        allowed_mime_types: Accepted MIME types

    Returns:
        Tuple of (is_valid, error_message)
    """
    if size <= 0:
        return False, "Image is required."

    if size > max_bytes:
        return False, f"Max image size is {max_bytes / 1024 / 1024:.0f}MB."

    normalized = (mime_type or "").split(";")[0].strip().lower()
    if normalized not in set(allowed_mime_types):
        return False, "Only .jpg, .png, .webp formats are supported."

    return True, None


def detect_image_mime_type(image_bytes: bytes) -> Optional[str]:
    """
    Decode the image header with Pillow and return its MIME type.

    Returns:
        MIME type of a supported format, or None if the bytes are not a
        JPEG/PNG/WEBP image
    """
    try:
        with PILImage.open(BytesIO(image_bytes)) as pil_image:
            pil_image.verify()
            return PIL_FORMAT_MIME_TYPES.get(pil_image.format or "")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def ensure_valid_image(
    payload: ImagePayload,
    max_bytes: int = MAX_UPLOAD_BYTES,
    allowed_mime_types: Iterable[str] = ALLOWED_IMAGE_MIME_TYPES,
    verify_content: bool = True,
) -> ImagePayload:
    """
    Validate an image payload, raising on failure.

    Args:
        payload: Image to validate
        max_bytes: Maximum accepted size
        allowed_mime_types: Accepted MIME types
        verify_content: Also require the bytes to decode as an allowed format

    Returns:
        The payload, relabelled with the detected MIME type when the
        declared one does not match the bytes

    Raises:
        ImageTooLargeError: If the payload is larger than `max_bytes`
        UnsupportedImageTypeError: If the declared type is not allowed
        InvalidImageError: If the bytes do not decode as an allowed image
    """
    allowed = set(allowed_mime_types)

    if payload.size > max_bytes:
        raise ImageTooLargeError(size=payload.size, max_size=max_bytes)

    if payload.mime_type not in allowed:
        raise UnsupportedImageTypeError(mime_type=payload.mime_type)

    if verify_content:
        detected = detect_image_mime_type(payload.bytes)
        if detected is None or detected not in allowed:
            raise InvalidImageError(
                "The uploaded file is not a readable JPEG, PNG or WEBP image.",
                details={"declared_mime_type": payload.mime_type, "detected_mime_type": detected},
            )
        if detected != payload.mime_type:
            logger.info(f"Declared {payload.mime_type} but content is {detected}; using {detected}")
            return replace(payload, mime_type=detected)

    return payload


def validate_text(text: str, min_length: int = 1, max_length: int = 5000) -> Tuple[bool, Optional[str]]:
    """
    Validate text input.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not text or not text.strip():
        return False, "Text cannot be empty"

    if len(text) < min_length:
        return False, f"Text too short (minimum {min_length} characters)"

    if len(text) > max_length:
        return False, f"Text too long (maximum {max_length} characters)"

    return True, None


def ensure_language_tag(language: Optional[str]) -> str:
    """Require a non-empty language tag and return it stripped."""
    if language is None or not language.strip():
        raise InvalidInputError("language", "Language is required.")
    return language.strip()
