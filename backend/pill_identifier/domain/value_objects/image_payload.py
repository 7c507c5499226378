"""
Image Payload Value Object

Represents the uploaded image as a self-describing data URI.
"""

from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import base64
import binascii
import mimetypes


# Extensions mapped to MIME types, used when a file is read from disk
EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
}


@dataclass(frozen=True)
class ImagePayload:
    """
    Immutable value object representing an image embedded as a data URI.

    Attributes:
        mime_type: Declared MIME type (e.g., "image/png")
        source: Original source identifier (file name or path)
        _base64: Base64 encoded image data (internal)
    """

    mime_type: str
    _base64: str = field(repr=False)
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.mime_type:
            raise ValueError("ImagePayload requires a MIME type")
        if not self._base64:
            raise ValueError("ImagePayload requires image data")

    @property
    def data_uri(self) -> str:
        """The image as `data:<mime>;base64,<data>`."""
        return f"data:{self.mime_type};base64,{self._base64}"

    @property
    def base64_string(self) -> str:
        return self._base64

    @property
    def bytes(self) -> bytes:
        """Decoded image bytes."""
        return base64.b64decode(self._base64)

    @property
    def size(self) -> int:
        """Decoded size in bytes, computed from the base64 length."""
        padding = self._base64[-2:].count("=")
        return (len(self._base64) * 3) // 4 - padding

    def __len__(self) -> int:
        return self.size

    def __str__(self) -> str:
        return f"ImagePayload({self.mime_type}, {self.size} bytes)"

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_type: str,
        source: Optional[str] = None
    ) -> "ImagePayload":
        """
        Create an ImagePayload from raw bytes.

        Args:
            data: Raw image bytes
            mime_type: Declared MIME type
            source: Optional source identifier

        Returns:
            ImagePayload instance
        """
        return cls(
            mime_type=mime_type,
            _base64=base64.b64encode(data).decode("ascii"),
            source=source,
        )

    @classmethod
    def from_file(cls, file_path: str, mime_type: Optional[str] = None) -> "ImagePayload":
        """
        Create an ImagePayload from a file path.

        Without an explicit `mime_type` the type is derived from the file
        extension.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {file_path}")

        if mime_type is None:
            mime_type = EXTENSION_MIME_TYPES.get(path.suffix.lower())
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        return cls.from_bytes(path.read_bytes(), mime_type=mime_type, source=str(path.absolute()))

    @classmethod
    def from_data_uri(cls, data_uri: str, source: Optional[str] = None) -> "ImagePayload":
        """
        Parse a `data:<mime>;base64,<data>` string.

        Raises:
            ValueError: If the string is not a base64 data URI
        """
        if not data_uri or not data_uri.startswith("data:"):
            raise ValueError("Expected a data URI starting with 'data:'")

        try:
            header, encoded = data_uri[len("data:"):].split(",", 1)
        except ValueError:
            raise ValueError("Data URI is missing the ',' separator")

        parts = header.split(";")
        if "base64" not in parts[1:]:
            raise ValueError("Only base64 encoded data URIs are supported")

        mime_type = parts[0].strip().lower()
        if not mime_type:
            raise ValueError("Data URI does not declare a MIME type")

        encoded = encoded.strip()
        try:
            base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Data URI payload is not valid base64: {e}")

        return cls(mime_type=mime_type, _base64=encoded, source=source)
