"""
pyttsx3 Speech Engine

Platform speech (SAPI5, NSSpeechSynthesizer, eSpeak) through pyttsx3.
Each utterance runs the engine loop in a daemon thread and reports its
lifecycle through the utterance callbacks.
"""

from typing import Any, Callable, List, Optional
import logging
import threading

import pyttsx3

from ...domain.ports.speech import SpeechEnginePort, Utterance, Voice
from ...domain.exceptions import SpeechEngineUnavailableError
from ...cross_cutting.error_handling import ErrorHandler


logger = logging.getLogger(__name__)

# pyttsx3 rates are words per minute
DEFAULT_BASE_RATE = 200
MIN_RATE = 50
MAX_RATE = 300


def normalize_voice_language(raw_voice: Any) -> str:
    """
    Extract a BCP-47 style tag from a pyttsx3 voice.

    eSpeak reports languages as bytes with a leading length byte
    (b"\\x05en-us"), NSSS as "en_US", SAPI5 often not at all.
    """
    languages = getattr(raw_voice, "languages", None) or []
    for language in languages:
        if isinstance(language, bytes):
            language = language.decode("utf-8", errors="ignore")
        tag = str(language).lstrip("\x00\x01\x02\x03\x04\x05\x06\x07\x08").strip()
        if tag:
            return tag.replace("_", "-")
    return ""


class Pyttsx3SpeechEngine(SpeechEnginePort):
    """
    SpeechEnginePort implementation over pyttsx3.

    pyttsx3 has no voices-changed event: `get_voices()` re-reads the voice
    list and notifies listeners when it differs from the last read.
    """

    def __init__(self, engine: Optional[Any] = None):
        if engine is None:
            try:
                engine = pyttsx3.init()
            except (RuntimeError, OSError, ImportError, KeyError) as e:
                raise SpeechEngineUnavailableError(details={"reason": str(e)}) from e

        self._engine = engine
        self._lock = threading.Lock()
        self._current: Optional[Utterance] = None
        self._cancel_requested = False
        self._worker: Optional[threading.Thread] = None
        self._listeners: List[Callable[[], None]] = []
        self._voices: Optional[List[Voice]] = None

        self._base_rate = engine.getProperty("rate") or DEFAULT_BASE_RATE

        engine.connect("started-utterance", self._on_started)
        engine.connect("finished-utterance", self._on_finished)
        engine.connect("error", self._on_error)

    # -------------------------------------------------------------------------
    # Voices
    # -------------------------------------------------------------------------

    def get_voices(self) -> List[Voice]:
        raw_voices = self._engine.getProperty("voices") or []
        voices = [
            Voice(id=str(v.id), name=str(getattr(v, "name", v.id)), lang=normalize_voice_language(v))
            for v in raw_voices
        ]

        changed = self._voices is not None and voices != self._voices
        self._voices = voices
        if changed:
            for listener in list(self._listeners):
                listener()
        return voices

    def add_voices_changed_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def remove_voices_changed_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    @property
    def speaking(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def speak(self, utterance: Utterance) -> None:
        rate = int(max(MIN_RATE, min(MAX_RATE, float(self._base_rate) * utterance.rate)))
        self._engine.setProperty("rate", rate)
        if utterance.voice is not None:
            self._engine.setProperty("voice", utterance.voice.id)

        with self._lock:
            self._current = utterance
            self._cancel_requested = False

        self._worker = threading.Thread(
            target=self._run,
            args=(utterance,),
            name="pyttsx3-utterance",
            daemon=True,
        )
        self._worker.start()

    def _run(self, utterance: Utterance) -> None:
        with ErrorHandler(logger, context="speech-engine", suppress=True) as handler:
            self._engine.say(utterance.text)
            self._engine.runAndWait()

        if handler.has_error:
            self._finish(utterance, error="synthesis-failed")
        else:
            # Some drivers return from runAndWait without a finished-utterance event
            self._finish(utterance, error="interrupted" if self._cancel_requested else None)

    def cancel(self) -> None:
        with self._lock:
            if self._current is None:
                return
            self._cancel_requested = True
        self._engine.stop()

    def join(self, timeout: Optional[float] = None) -> None:
        """Block until the current utterance finishes."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    # -------------------------------------------------------------------------
    # Engine callbacks (called from the worker thread)
    # -------------------------------------------------------------------------

    def _on_started(self, name: Optional[str] = None) -> None:
        utterance = self._current
        if utterance is not None and utterance.on_start is not None:
            utterance.on_start()

    def _on_finished(self, name: Optional[str] = None, completed: bool = True) -> None:
        utterance = self._current
        if utterance is None:
            return
        if completed:
            self._finish(utterance)
        else:
            self._finish(utterance, error="interrupted" if self._cancel_requested else "canceled")

    def _on_error(self, name: Optional[str] = None, exception: Optional[Exception] = None) -> None:
        logger.error(f"Speech engine error: {exception!r}")
        utterance = self._current
        if utterance is not None:
            self._finish(utterance, error="synthesis-failed")

    def _finish(self, utterance: Utterance, error: Optional[str] = None) -> None:
        with self._lock:
            if self._current is not utterance:
                return
            self._current = None

        if error is None:
            if utterance.on_end is not None:
                utterance.on_end()
        elif utterance.on_error is not None:
            utterance.on_error(error)
