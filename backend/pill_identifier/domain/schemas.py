"""
Request/Response Schemas

Schema-validated contracts exchanged with the generative model and the
HTTP clients. Wire names are camelCase, Python attributes snake_case.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Frozen model with camelCase aliases, accepting either naming on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# =============================================================================
# Identification
# =============================================================================

class IdentifyMedicineInput(ContractModel):
    photo_data_uri: str = Field(
        description=(
            "A photo of a tablet sheet, as a data URI that must include a MIME type "
            "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )
    language: str = Field(
        min_length=1,
        description="The language in which to provide the medicine uses.",
    )


class IdentifyMedicineOutput(ContractModel):
    is_identified: bool = Field(
        description="True if a medicine was successfully identified from the image, false otherwise.",
    )
    medicine_name: str = Field(
        description=(
            "The name of the identified medicine. If not identified, this will contain an "
            "explanatory message like \"No medicine identified\" or "
            "\"Image does not appear to be a medicine.\""
        ),
    )
    uses: str = Field(
        description=(
            "The uses of the identified medicine in the specified language. This will be "
            "empty if no medicine is identified or if the image is invalid."
        ),
    )

    def normalized(self) -> "IdentifyMedicineOutput":
        """Return a copy where a not-identified result carries no uses."""
        if not self.is_identified and self.uses != "":
            return self.model_copy(update={"uses": ""})
        return self

    @property
    def is_successfully_identified(self) -> bool:
        """Identified and with non-blank usage text."""
        return self.is_identified and bool(self.uses and self.uses.strip())


# =============================================================================
# Translation
# =============================================================================

class TranslateMedicineInfoInput(ContractModel):
    medicine_name: str = Field(description="The name of the medicine.")
    uses: str = Field(description="The uses of the medicine.")
    language: str = Field(
        min_length=1,
        description="The language to translate the medicine information to.",
    )


class TranslateMedicineInfoOutput(ContractModel):
    translated_medicine_name: str = Field(description="The translated name of the medicine.")
    translated_uses: str = Field(description="The translated uses of the medicine.")


# =============================================================================
# Speech
# =============================================================================

class SpeechRequest(ContractModel):
    text: str = Field(min_length=1, description="Text to synthesize.")
    language: str = Field(min_length=1, description="Two-letter language code or locale tag.")


class SpeechErrorCategory(str, Enum):
    """Closed set of cloud speech failure categories."""

    INITIALIZATION_FAILED = "initialization_failed"
    PERMISSION_DENIED = "permission_denied"
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INVALID_ARGUMENT = "invalid_argument"
    UNEXPECTED_AUDIO_FORMAT = "unexpected_audio_format"
    API_ERROR = "api_error"


class SpeechErrorEnvelope(ContractModel):
    """Structured error returned (never raised) by the cloud speech path."""

    error: str
    category: SpeechErrorCategory
    message: str
    details: Optional[str] = None
