"""
Speech Player

"Speak Uses" control over the platform speech engine. An explicit
IDLE / SPEAKING state machine is driven by the utterance callbacks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging
import threading

from ..domain.ports.speech import SpeechEnginePort, Utterance, Voice
from ..domain.value_objects.language import split_language_tag


logger = logging.getLogger(__name__)


# Errors reported when speech is stopped on purpose
BENIGN_SPEECH_ERRORS = frozenset({"interrupted", "canceled"})

UTTERANCE_RATE = 0.9
UTTERANCE_PITCH = 1.0


class SpeechState(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"


@dataclass(frozen=True)
class Notice:
    """A user-facing notification (a toast in a UI, a line on the CLI)."""

    level: str  # "info" or "error"
    title: str
    message: str


def _normalize_tag(tag: str) -> str:
    return tag.strip().replace("_", "-").lower()


def select_voice(voices: List[Voice], tag: str) -> Optional[Voice]:
    """
    Pick a voice for a language tag.

    Order: exact tag match, then a regional variant of the tag ("te" finds
    "te-IN"), then the base language of a regional tag ("en-US" finds "en").
    Matching is case-insensitive.

    Returns:
        The first matching voice, or None
    """
    if not tag or not tag.strip():
        return None
    wanted = _normalize_tag(tag)

    for voice in voices:
        if _normalize_tag(voice.lang) == wanted:
            return voice

    for voice in voices:
        if _normalize_tag(voice.lang).startswith(wanted + "-"):
            return voice

    base, region = split_language_tag(wanted)
    if region:
        for voice in voices:
            if _normalize_tag(voice.lang) == base:
                return voice

    return None


class SpeechPlayer:
    """
    Speaks identification results through a SpeechEnginePort.

    Usage:
        player = SpeechPlayer(engine, on_notice=print)
        player.toggle(result.uses, "te")   # start
        player.toggle(result.uses, "te")   # stop
        player.teardown()
    """

    def __init__(
        self,
        engine: Optional[SpeechEnginePort],
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self._engine = engine
        self._on_notice = on_notice
        self._state = SpeechState.IDLE
        self._current: Optional[Utterance] = None
        self._voices: List[Voice] = []
        self._lock = threading.RLock()

        if engine is None:
            self._notify("error", "Speech Unsupported", "Text-to-speech is not supported on this platform.")
            return

        self._load_voices()
        engine.add_voices_changed_listener(self._load_voices)

    @property
    def state(self) -> SpeechState:
        return self._state

    @property
    def is_speaking(self) -> bool:
        return self._state is SpeechState.SPEAKING

    @property
    def voices(self) -> List[Voice]:
        return list(self._voices)

    def _load_voices(self) -> None:
        if self._engine is None:
            return
        self._voices = self._engine.get_voices()
        logger.debug(f"Loaded {len(self._voices)} voices")

    def _notify(self, level: str, title: str, message: str) -> None:
        if level == "error":
            logger.error(f"{title}: {message}")
        else:
            logger.info(f"{title}: {message}")
        if self._on_notice is not None:
            self._on_notice(Notice(level=level, title=title, message=message))

    def toggle(self, text: Optional[str], language: str) -> None:
        """
        Start speaking `text`, or stop if an utterance is in flight.

        Stopping never starts a new utterance.
        """
        if not text or not text.strip():
            self._notify("error", "Speech Error", "No text available to speak.")
            return

        if self._engine is None:
            self._notify("error", "Speech Error", "Text-to-speech is not supported on this platform.")
            return

        with self._lock:
            if self._current is not None or self._state is SpeechState.SPEAKING:
                self._engine.cancel()
                return

            voice = select_voice(self._voices, language)
            if voice is None:
                if self._voices:
                    logger.warning(f"No specific voice found for lang '{language}'. Using default voice.")
                    self._notify(
                        "info",
                        "Voice Information",
                        "A specific voice for the selected language was not found. "
                        "Using the default voice.",
                    )
                else:
                    logger.warning(
                        f"Voices not yet loaded or none available. "
                        f"Attempting speech with lang '{language}'."
                    )

            utterance = Utterance(
                text=text,
                lang=language,
                rate=UTTERANCE_RATE,
                pitch=UTTERANCE_PITCH,
                voice=voice,
            )
            utterance.on_start = lambda: self._handle_start(utterance)
            utterance.on_end = lambda: self._handle_end(utterance)
            utterance.on_error = lambda code: self._handle_error(utterance, code)
            self._current = utterance

        self._engine.speak(utterance)

    def _handle_start(self, utterance: Utterance) -> None:
        with self._lock:
            if self._current is utterance:
                self._state = SpeechState.SPEAKING

    def _handle_end(self, utterance: Utterance) -> None:
        with self._lock:
            if self._current is not utterance:
                return
            self._current = None
            self._state = SpeechState.IDLE

    def _handle_error(self, utterance: Utterance, code: Optional[str]) -> None:
        with self._lock:
            if self._current is not utterance:
                return
            self._current = None
            self._state = SpeechState.IDLE

        if code in BENIGN_SPEECH_ERRORS:
            logger.info(f"Speech synthesis event: {code}. This is expected when speech is stopped.")
        else:
            self._notify(
                "error",
                "Speech Error",
                f"An error occurred during speech: {code or 'Unknown speech error.'}",
            )

    def reset(self) -> None:
        """Stop playback; called when the displayed result or language changes."""
        with self._lock:
            utterance = self._current
            self._current = None
            self._state = SpeechState.IDLE

        if utterance is not None:
            utterance.detach()
            if self._engine is not None:
                self._engine.cancel()

    def teardown(self) -> None:
        """Stop playback, detach callbacks and stop listening for voice changes."""
        if self._engine is not None:
            self._engine.remove_voices_changed_listener(self._load_voices)
        self.reset()
