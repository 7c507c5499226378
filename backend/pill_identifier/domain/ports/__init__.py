"""
Ports (Interfaces)

Abstract interfaces implemented by the infrastructure adapters.
"""

from .generative_model import GenerativeModelPort
from .speech import (
    Voice,
    Utterance,
    SpeechSynthesizerPort,
    SpeechEnginePort,
)

__all__ = [
    "GenerativeModelPort",
    "Voice",
    "Utterance",
    "SpeechSynthesizerPort",
    "SpeechEnginePort",
]
