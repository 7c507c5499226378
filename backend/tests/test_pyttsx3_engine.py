"""
Tests for the pyttsx3 engine adapter, using a scripted stand-in for the
pyttsx3 engine object
"""

from types import SimpleNamespace
import threading

import pytest

from pill_identifier.domain.exceptions import SpeechEngineUnavailableError
from pill_identifier.domain.ports.speech import Utterance, Voice
from pill_identifier.infrastructure.tts import pyttsx3_engine
from pill_identifier.infrastructure.tts.pyttsx3_engine import (
    Pyttsx3SpeechEngine,
    normalize_voice_language,
)


class ScriptedEngine:
    """Behaves like the object returned by pyttsx3.init()."""

    def __init__(self, voices=(), block=False, fail=False):
        self.properties = {"rate": 200, "voices": list(voices)}
        self.callbacks = {}
        self.said = []
        self.block = block
        self.fail = fail
        self.stopped = threading.Event()

    def getProperty(self, name):
        return self.properties.get(name)

    def setProperty(self, name, value):
        self.properties[name] = value

    def connect(self, topic, callback):
        self.callbacks[topic] = callback

    def say(self, text, name=None):
        self.said.append(text)

    def runAndWait(self):
        if self.fail:
            raise RuntimeError("run loop already started")
        self.callbacks["started-utterance"](name=None)
        if self.block:
            self.stopped.wait(timeout=5)
            self.callbacks["finished-utterance"](name=None, completed=False)
        else:
            self.callbacks["finished-utterance"](name=None, completed=True)

    def stop(self):
        self.stopped.set()


def _recording_utterance(events, text="Relieves pain", **kwargs):
    started = threading.Event()

    def on_start():
        events.append("start")
        started.set()

    utterance = Utterance(
        text=text,
        lang="en",
        on_start=on_start,
        on_end=lambda: events.append("end"),
        on_error=lambda code: events.append(f"error:{code}"),
        **kwargs,
    )
    return utterance, started


@pytest.mark.parametrize("languages,expected", [
    ([b"\x05en-us"], "en-us"),
    (["en_US"], "en-US"),
    ([], ""),
    (None, ""),
])
def test_normalize_voice_language(languages, expected):
    raw = SimpleNamespace(id="voice", name="Voice", languages=languages)
    assert normalize_voice_language(raw) == expected


def test_speak_runs_to_completion():
    scripted = ScriptedEngine()
    engine = Pyttsx3SpeechEngine(engine=scripted)
    events = []
    voice = Voice(id="english-us", name="English (America)", lang="en-us")
    utterance, _ = _recording_utterance(events, voice=voice)

    engine.speak(utterance)
    engine.join(timeout=5)

    assert events == ["start", "end"]
    assert scripted.said == ["Relieves pain"]
    assert scripted.properties["rate"] == 180
    assert scripted.properties["voice"] == "english-us"
    assert not engine.speaking


def test_cancel_reports_interrupted():
    scripted = ScriptedEngine(block=True)
    engine = Pyttsx3SpeechEngine(engine=scripted)
    events = []
    utterance, started = _recording_utterance(events)

    engine.speak(utterance)
    assert started.wait(timeout=5)
    engine.cancel()
    engine.join(timeout=5)

    assert events == ["start", "error:interrupted"]


def test_cancel_when_idle_is_a_no_op():
    scripted = ScriptedEngine()
    engine = Pyttsx3SpeechEngine(engine=scripted)

    engine.cancel()

    assert not scripted.stopped.is_set()


def test_engine_failure_reports_error():
    engine = Pyttsx3SpeechEngine(engine=ScriptedEngine(fail=True))
    events = []
    utterance, _ = _recording_utterance(events)

    engine.speak(utterance)
    engine.join(timeout=5)

    assert events == ["error:synthesis-failed"]


def test_voices_and_change_notification():
    raw = [SimpleNamespace(id="te", name="Telugu", languages=[b"\x05te"])]
    scripted = ScriptedEngine(voices=raw)
    engine = Pyttsx3SpeechEngine(engine=scripted)
    notified = []
    engine.add_voices_changed_listener(lambda: notified.append(True))

    assert engine.get_voices() == [Voice(id="te", name="Telugu", lang="te")]
    assert notified == []

    scripted.properties["voices"] = raw + [SimpleNamespace(id="hi", name="Hindi", languages=["hi_IN"])]
    voices = engine.get_voices()

    assert [voice.lang for voice in voices] == ["te", "hi-IN"]
    assert notified == [True]


def test_init_failure(monkeypatch):
    def broken_init(*args, **kwargs):
        raise RuntimeError("eSpeak not installed")

    monkeypatch.setattr(pyttsx3_engine.pyttsx3, "init", broken_init)

    with pytest.raises(SpeechEngineUnavailableError):
        Pyttsx3SpeechEngine()
