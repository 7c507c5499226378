"""
Application Layer

Flows, services, speech playback and presentation state.
"""

from .services import MedicineIdentificationService
from .speech_player import SpeechPlayer, SpeechState, Notice, select_voice
from .presentation import (
    ResultView,
    ResultViewState,
    IdentifierPageState,
    select_result_view,
    describe_identification_error,
)

__all__ = [
    "MedicineIdentificationService",
    "SpeechPlayer",
    "SpeechState",
    "Notice",
    "select_voice",
    "ResultView",
    "ResultViewState",
    "IdentifierPageState",
    "select_result_view",
    "describe_identification_error",
]
