"""
Domain Exceptions

Custom exceptions for the pill identifier domain.
Exceptions are organized by the component that raises them.
"""

from typing import Optional, Dict, Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
        is_recoverable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        is_recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_recoverable = is_recoverable

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "is_recoverable": self.is_recoverable,
        }


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainException):
    """Base exception for validation errors."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("is_recoverable", False)
        super().__init__(message, **kwargs)


class InvalidImageError(ValidationError):
    """Input image is missing, corrupted or not decodable."""

    def __init__(self, message: str = "Invalid or corrupted image", **kwargs):
        super().__init__(message, **kwargs)


class ImageTooLargeError(InvalidImageError):
    """Uploaded image exceeds the size limit."""

    def __init__(self, size: int, max_size: int, **kwargs):
        message = f"Max image size is {max_size / 1024 / 1024:.0f}MB."
        super().__init__(message, **kwargs)
        self.details["size"] = size
        self.details["max_size"] = max_size


class UnsupportedImageTypeError(InvalidImageError):
    """Uploaded image type is not one of the supported formats."""

    def __init__(self, mime_type: Optional[str], **kwargs):
        message = "Only .jpg, .png, .webp formats are supported."
        super().__init__(message, **kwargs)
        self.details["mime_type"] = mime_type


class InvalidInputError(ValidationError):
    """Invalid input provided to a function or method."""

    def __init__(self, field: str, reason: str, **kwargs):
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(message, **kwargs)
        self.details["field"] = field
        self.details["reason"] = reason


# =============================================================================
# Generative Model Provider Exceptions
# =============================================================================

class ModelProviderError(DomainException):
    """
    Base exception for failures of the external generative model.

    Provider SDK exceptions are translated into one of the subclasses
    below at the provider boundary and never inspected again.
    """

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.provider = provider
        if provider:
            self.details["provider"] = provider


class InvalidApiKeyError(ModelProviderError):
    """The provider rejected the configured API key."""

    def __init__(self, message: str = "The API key is invalid", **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)


class MissingApiKeyError(ModelProviderError):
    """No API key is configured for the provider."""

    def __init__(self, message: str = "The API key is missing", **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)


class ModelUnavailableError(ModelProviderError):
    """The provider is overloaded, rate limited or unreachable."""

    def __init__(self, message: str = "The AI service is unavailable", **kwargs):
        super().__init__(message, **kwargs)


class ModelTimeoutError(ModelProviderError):
    """The request to the provider timed out."""

    def __init__(self, message: str = "The AI service request timed out", **kwargs):
        super().__init__(message, **kwargs)


class InvalidModelRequestError(ModelProviderError):
    """The provider rejected the request arguments (image, language, ...)."""

    def __init__(self, message: str = "The AI service rejected the request", **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)


class ModelResponseSchemaError(ModelProviderError):
    """The provider answered with output that does not match the schema."""

    def __init__(
        self,
        message: str = "The AI service returned a malformed response",
        raw_output: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if raw_output:
            self.details["raw_output_preview"] = raw_output[:200]


class UnexpectedModelError(ModelProviderError):
    """Any other provider failure."""

    def __init__(self, message: str = "Unexpected AI service error", status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code


# =============================================================================
# Flow Exceptions
# =============================================================================

class FlowError(DomainException):
    """
    Categorized failure of an identification or translation flow.

    Attributes:
        flow: Name of the flow that failed
        category: Error category ("invalid_credential" or "unexpected")
    """

    INVALID_CREDENTIAL = "invalid_credential"
    UNEXPECTED = "unexpected"

    def __init__(self, message: str, flow: str, category: str = UNEXPECTED, **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)
        self.flow = flow
        self.category = category
        self.details["flow"] = flow

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["category"] = self.category
        return data


# =============================================================================
# Speech Exceptions
# =============================================================================

class SpeechError(DomainException):
    """Base exception for platform speech errors."""
    pass


class SpeechEngineUnavailableError(SpeechError):
    """No platform speech engine could be initialized."""

    def __init__(self, message: str = "Text-to-speech is not supported on this platform", **kwargs):
        super().__init__(message, is_recoverable=False, **kwargs)
