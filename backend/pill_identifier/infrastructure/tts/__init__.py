"""
Speech Adapters

Cloud (Google Cloud Text-to-Speech) and platform (pyttsx3) speech.
"""

from .google_cloud_tts import (
    GoogleCloudSpeechSynthesizer,
    ReadyClient,
    FailedClient,
    ClientHandle,
    create_client_handle,
    resolve_locale,
    LANGUAGE_CODE_MAP,
    VOICE_NAME_MAP,
)

__all__ = [
    "GoogleCloudSpeechSynthesizer",
    "ReadyClient",
    "FailedClient",
    "ClientHandle",
    "create_client_handle",
    "resolve_locale",
    "LANGUAGE_CODE_MAP",
    "VOICE_NAME_MAP",
]
