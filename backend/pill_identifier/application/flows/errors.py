"""
Flow Error Categorization

Credential failures are turned into FlowError with a human-readable
message. Every other provider error passes through unchanged.
"""

from typing import Optional

from ...domain.exceptions import (
    FlowError,
    InvalidApiKeyError,
    MissingApiKeyError,
    ModelProviderError,
)


PROVIDER_KEY_VARIABLES = {
    "Groq": "GROQ_API_KEY",
    "OpenAI": "OPENAI_API_KEY",
}


def _key_variable(error: ModelProviderError) -> str:
    return PROVIDER_KEY_VARIABLES.get(error.provider or "", "PILL_IDENTIFIER_LLM_API_KEY")


def credential_flow_error(error: ModelProviderError, flow: str) -> Optional[FlowError]:
    """
    Build the FlowError for a credential failure.

    Returns:
        FlowError with category "invalid_credential", or None if `error`
        is not a credential failure
    """
    variable = _key_variable(error)

    if isinstance(error, InvalidApiKeyError):
        message = (
            f"AI service error: The API key is invalid. Please check your {variable} "
            f"environment variable and your {error.provider or 'provider'} account settings."
        )
    elif isinstance(error, MissingApiKeyError):
        message = (
            "AI service error: API key is missing or not configured correctly. "
            f"Please set the {variable} environment variable."
        )
    else:
        return None

    flow_error = FlowError(message, flow=flow, category=FlowError.INVALID_CREDENTIAL)
    flow_error.details["provider"] = error.provider
    return flow_error
