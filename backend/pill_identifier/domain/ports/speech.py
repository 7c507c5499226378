"""
Speech Ports

Abstract interfaces for the two speech paths:
- SpeechSynthesizerPort: cloud synthesis returning base64 audio
- SpeechEnginePort: platform engine speaking utterances with lifecycle callbacks
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from ..schemas import SpeechErrorEnvelope


@dataclass(frozen=True)
class Voice:
    """A voice exposed by the platform speech engine."""

    id: str
    name: str
    lang: str


@dataclass
class Utterance:
    """
    A single speech request submitted to the platform engine.

    The engine calls `on_start` once speech begins, then exactly one of
    `on_end` or `on_error(code)`. Callbacks are detached by setting them
    to None.
    """

    text: str
    lang: str
    rate: float = 0.9
    pitch: float = 1.0
    voice: Optional[Voice] = None
    on_start: Optional[Callable[[], None]] = None
    on_end: Optional[Callable[[], None]] = None
    on_error: Optional[Callable[[str], None]] = None

    def detach(self) -> None:
        self.on_start = None
        self.on_end = None
        self.on_error = None


class SpeechSynthesizerPort(ABC):
    """Port for cloud text-to-speech. Never raises past its boundary."""

    @abstractmethod
    def synthesize(self, text: str, language: str) -> Union[str, SpeechErrorEnvelope]:
        """
        Synthesize speech.

        Args:
            text: Text to speak
            language: Two-letter language code (or locale tag)

        Returns:
            Base64 encoded audio, or an error envelope
        """
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying client initialized successfully."""
        pass

    def close(self) -> None:
        return None


class SpeechEnginePort(ABC):
    """Port for the platform speech engine."""

    @abstractmethod
    def get_voices(self) -> List[Voice]:
        """List currently available voices. May change over time."""
        pass

    @abstractmethod
    def speak(self, utterance: Utterance) -> None:
        """Start speaking. Returns immediately; progress is reported via callbacks."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop the in-flight utterance, if any."""
        pass

    @property
    @abstractmethod
    def speaking(self) -> bool:
        pass

    @abstractmethod
    def add_voices_changed_listener(self, listener: Callable[[], None]) -> None:
        pass

    @abstractmethod
    def remove_voices_changed_listener(self, listener: Callable[[], None]) -> None:
        pass
