"""
Google Cloud Text-to-Speech

Cloud speech synthesis returning base64 MP3 audio. The client is created
once; if that fails the failure is remembered and every call returns the
initialization error envelope.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union
import base64
import logging

from google.api_core import exceptions as gapi_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import texttospeech

from ...domain.ports.speech import SpeechSynthesizerPort
from ...domain.schemas import SpeechErrorCategory, SpeechErrorEnvelope


logger = logging.getLogger(__name__)


# Two-letter codes to BCP-47 locales; unknown codes are passed through
LANGUAGE_CODE_MAP: Dict[str, str] = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "hi": "hi-IN",
    "ja": "ja-JP",
    "ar": "ar-XA",  # Modern Standard Arabic
    "pt": "pt-BR",
    "ru": "ru-RU",
    "zh": "cmn-CN",  # Mandarin, simplified
    "te": "te-IN",
}

# Specific voices per locale; other locales use the provider default
VOICE_NAME_MAP: Dict[str, str] = {
    "te-IN": "te-IN-Standard-A",
    "en-US": "en-US-Standard-C",
}

DEFAULT_SPEAKING_RATE = 0.95
DEFAULT_PITCH = 0.0

INIT_FAILED_ERROR = "TTS Client Initialization Failed"
API_ERROR = "Google TTS API Error"
SYNTHESIS_ERROR = "TTS Synthesis Error"

INIT_FAILED_MESSAGE = (
    "The Text-to-Speech client could not be initialized. This usually means the Google "
    "Cloud credentials are not set up correctly or are inaccessible in this environment."
)
INIT_FAILED_DETAILS = (
    "Ensure the GOOGLE_APPLICATION_CREDENTIALS environment variable is correctly set to "
    "your service account key file path, and the file is valid and readable by the "
    "application. Also, check server logs for more specific error messages during "
    "client initialization."
)

TOKEN_REFRESH_MARKER = "Could not refresh access token"


# =============================================================================
# Client handle
# =============================================================================

@dataclass(frozen=True)
class ReadyClient:
    """A constructed TextToSpeechClient."""

    client: Any


@dataclass(frozen=True)
class FailedClient:
    """Client construction failed; `reason` is kept for logs only."""

    reason: str


ClientHandle = Union[ReadyClient, FailedClient]


def create_client_handle(
    credentials_path: Optional[str] = None,
    factory: Optional[Callable[[], Any]] = None,
) -> ClientHandle:
    """
    Construct the TTS client once.

    Args:
        credentials_path: Service account key file. When omitted, Application
            Default Credentials (GOOGLE_APPLICATION_CREDENTIALS) are used.
        factory: Zero-argument client constructor, for tests

    Returns:
        ReadyClient on success, FailedClient otherwise
    """
    try:
        if factory is not None:
            client = factory()
        elif credentials_path:
            client = texttospeech.TextToSpeechClient.from_service_account_file(credentials_path)
        else:
            client = texttospeech.TextToSpeechClient()
    except Exception as e:
        logger.error(f"Failed to initialize TextToSpeechClient: {e!r}")
        return FailedClient(reason=str(e))

    logger.info("Google Cloud TTS client initialized")
    return ReadyClient(client=client)


# =============================================================================
# Error categorization
# =============================================================================

def initialization_failed_envelope() -> SpeechErrorEnvelope:
    return SpeechErrorEnvelope(
        error=INIT_FAILED_ERROR,
        category=SpeechErrorCategory.INITIALIZATION_FAILED,
        message=INIT_FAILED_MESSAGE,
        details=INIT_FAILED_DETAILS,
    )


def categorize_api_error(exc: Exception, locale: str) -> SpeechErrorEnvelope:
    """
    Map a provider failure to an error envelope.

    Args:
        exc: Exception raised by the synthesize call
        locale: Locale that was requested, quoted in invalid-argument details

    Returns:
        SpeechErrorEnvelope with a category and actionable details
    """
    raw = str(exc)

    if isinstance(exc, gapi_exceptions.PermissionDenied):
        category = SpeechErrorCategory.PERMISSION_DENIED
        message = "Permission Denied for Text-to-Speech API."
        details = (
            "The service account may not have the 'Cloud Text-to-Speech API User' role, "
            "or the API is not enabled in your Google Cloud project. Please check IAM "
            "permissions and API enablement status. Billing might also need to be "
            "enabled for the project."
        )
    elif isinstance(exc, gapi_exceptions.Unauthenticated):
        category = SpeechErrorCategory.UNAUTHENTICATED
        message = "Authentication Failed for Text-to-Speech API."
        details = (
            "The request was not authenticated. This is likely due to missing or invalid "
            "credentials. Ensure GOOGLE_APPLICATION_CREDENTIALS environment variable is set "
            "correctly and points to a valid service account key file."
        )
    elif isinstance(exc, auth_exceptions.RefreshError) or (
        isinstance(exc, gapi_exceptions.Unknown) and TOKEN_REFRESH_MARKER in raw
    ):
        category = SpeechErrorCategory.TOKEN_REFRESH_FAILED
        message = "Authentication or API Configuration Error with Text-to-Speech API."
        details = (
            "The API call failed, often due to issues refreshing an access token. "
            "Please verify your Google Cloud project configuration: "
            "1. Ensure the Text-to-Speech API is enabled. "
            "2. If using a service account, confirm the GOOGLE_APPLICATION_CREDENTIALS "
            "environment variable is correctly set to the path of your JSON key file, and "
            "the key file is valid and accessible. "
            "3. Ensure the service account or API key has the necessary permissions "
            "(e.g., 'Cloud Text-to-Speech API User' role). "
            "4. Check for any recent changes in your project's IAM policies or credentials, "
            f"or billing status. Original error: {raw}"
        )
    elif isinstance(exc, gapi_exceptions.NotFound):
        category = SpeechErrorCategory.RESOURCE_NOT_FOUND
        message = "Resource Not Found for Text-to-Speech API."
        details = (
            "A specified resource (e.g., custom voice) was not found. If you are not using "
            "custom voices, this might indicate an internal API issue or misconfiguration."
        )
    elif isinstance(exc, gapi_exceptions.InvalidArgument):
        category = SpeechErrorCategory.INVALID_ARGUMENT
        message = "Invalid Input for Text-to-Speech API."
        details = (
            "The API received an invalid argument, such as an unsupported language code "
            f"('{locale}') or voice. Please check the input parameters. Original error: {raw}"
        )
    else:
        category = SpeechErrorCategory.API_ERROR
        message = "Failed to synthesize speech using Google Cloud Text-to-Speech API."
        details = raw or "Unknown error during API call."

    return SpeechErrorEnvelope(
        error=API_ERROR,
        category=category,
        message=message,
        details=details,
    )


# =============================================================================
# Synthesizer
# =============================================================================

def resolve_locale(language: str) -> str:
    """Map a two-letter code to its locale (case-insensitive); pass others through."""
    return LANGUAGE_CODE_MAP.get(language.strip().lower(), language)


def select_voice_name(locale: str) -> Optional[str]:
    return VOICE_NAME_MAP.get(locale)


class GoogleCloudSpeechSynthesizer(SpeechSynthesizerPort):
    """
    SpeechSynthesizerPort implementation over Google Cloud Text-to-Speech.

    Usage:
        synthesizer = GoogleCloudSpeechSynthesizer(create_client_handle())
        result = synthesizer.synthesize("Paracetamol relieves pain", "te")
        if isinstance(result, SpeechErrorEnvelope):
            ...
    """

    def __init__(
        self,
        handle: ClientHandle,
        speaking_rate: float = DEFAULT_SPEAKING_RATE,
        pitch: float = DEFAULT_PITCH,
    ):
        self._handle = handle
        self._speaking_rate = speaking_rate
        self._pitch = pitch

    @property
    def is_available(self) -> bool:
        return isinstance(self._handle, ReadyClient)

    def build_request(self, text: str, language: str) -> Dict[str, Any]:
        """Build the synthesize_speech keyword arguments."""
        locale = resolve_locale(language)
        voice_name = select_voice_name(locale)

        if voice_name:
            voice = texttospeech.VoiceSelectionParams(language_code=locale, name=voice_name)
        else:
            voice = texttospeech.VoiceSelectionParams(language_code=locale)

        return {
            "input": texttospeech.SynthesisInput(text=text),
            "voice": voice,
            "audio_config": texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3,
                speaking_rate=self._speaking_rate,
                pitch=self._pitch,
            ),
        }

    def synthesize(self, text: str, language: str) -> Union[str, SpeechErrorEnvelope]:
        if not isinstance(self._handle, ReadyClient):
            return initialization_failed_envelope()

        locale = resolve_locale(language)
        request = self.build_request(text, language)
        logger.info(
            f"Synthesizing speech for text: \"{text[:30]}...\" in language: {locale} "
            f"with voice: {select_voice_name(locale) or 'default'}"
        )

        try:
            response = self._handle.client.synthesize_speech(**request)
        except (gapi_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as e:
            logger.error(f"Google TTS API error: {e!r}")
            return categorize_api_error(e, locale)
        except Exception as e:
            logger.exception("Unexpected error during speech synthesis")
            return categorize_api_error(e, locale)

        audio = getattr(response, "audio_content", None)
        if isinstance(audio, (bytes, bytearray)) and audio:
            return base64.b64encode(bytes(audio)).decode("ascii")
        if isinstance(audio, str) and audio:
            # Already base64
            return audio

        return SpeechErrorEnvelope(
            error=SYNTHESIS_ERROR,
            category=SpeechErrorCategory.UNEXPECTED_AUDIO_FORMAT,
            message="Audio content received in an unexpected format.",
        )

    def close(self) -> None:
        if isinstance(self._handle, ReadyClient):
            transport = getattr(self._handle.client, "transport", None)
            if transport is not None:
                transport.close()
            logger.info("Google Cloud TTS client closed")
