"""
Tests for configuration loading and logging setup
"""

import logging
import os

import pytest

from pill_identifier.config import settings
from pill_identifier.config.settings import AppConfig
from pill_identifier.cross_cutting.logging import FlowLogger, get_logger, setup_logging


ENV_VARS = [
    "PILL_IDENTIFIER_LLM_TYPE",
    "PILL_IDENTIFIER_LLM_MODEL",
    "PILL_IDENTIFIER_LLM_API_KEY",
    "PILL_IDENTIFIER_TTS_ENABLED",
    "PILL_IDENTIFIER_DEFAULT_LANGUAGE",
    "PILL_IDENTIFIER_HOST",
    "PILL_IDENTIFIER_PORT",
    "PILL_IDENTIFIER_CORS_ORIGINS",
    "PILL_IDENTIFIER_LOG_LEVEL",
    "PILL_IDENTIFIER_LOG_FILE",
    "GROQ_API_KEY",
    "OPENAI_API_KEY",
    "GOOGLE_APPLICATION_CREDENTIALS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep developer .env files out of the tests
    monkeypatch.setattr(settings, "_BACKEND_ENV", tmp_path / "missing.env")
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env):
    config = AppConfig.from_env()

    assert config.llm.type == "groq"
    assert config.llm.model == "meta-llama/llama-4-scout-17b-16e-instruct"
    assert config.llm.api_key is None
    assert config.speech.enabled is True
    assert config.speech.speaking_rate == pytest.approx(0.95)
    assert config.upload.max_bytes == 5 * 1024 * 1024
    assert config.upload.default_language == "te"


def test_groq_key_fallback(clean_env):
    clean_env.setenv("GROQ_API_KEY", "gsk_env")

    assert AppConfig.from_env().llm.api_key == "gsk_env"


def test_openai_selection(clean_env):
    clean_env.setenv("PILL_IDENTIFIER_LLM_TYPE", "OpenAI")
    clean_env.setenv("OPENAI_API_KEY", "sk-env")
    clean_env.setenv("GROQ_API_KEY", "gsk_env")

    config = AppConfig.from_env()

    assert config.llm.type == "openai"
    assert config.llm.model == "gpt-4o-mini"
    assert config.llm.api_key == "sk-env"


def test_explicit_key_wins(clean_env):
    clean_env.setenv("PILL_IDENTIFIER_LLM_API_KEY", "explicit")
    clean_env.setenv("GROQ_API_KEY", "gsk_env")

    assert AppConfig.from_env().llm.api_key == "explicit"


def test_server_speech_and_logging(clean_env):
    clean_env.setenv("PILL_IDENTIFIER_TTS_ENABLED", "false")
    clean_env.setenv("PILL_IDENTIFIER_DEFAULT_LANGUAGE", " HI ")
    clean_env.setenv("PILL_IDENTIFIER_PORT", "9001")
    clean_env.setenv("PILL_IDENTIFIER_CORS_ORIGINS", "http://localhost:3000, https://pills.example")
    clean_env.setenv("PILL_IDENTIFIER_LOG_LEVEL", "debug")

    config = AppConfig.from_env()

    assert config.speech.enabled is False
    assert config.upload.default_language == "hi"
    assert config.server.port == 9001
    assert config.server.cors_allow_origins == ["http://localhost:3000", "https://pills.example"]
    assert config.logging.level == "DEBUG"


def test_dotenv_file_is_loaded(clean_env, tmp_path):
    (tmp_path / ".env").write_text("GROQ_API_KEY=gsk_from_file\n")

    try:
        assert AppConfig.from_env().llm.api_key == "gsk_from_file"
    finally:
        os.environ.pop("GROQ_API_KEY", None)


def test_dict_round_trip_hides_secrets():
    config = AppConfig.from_dict({"llm": {"type": "openai", "api_key": "sk-secret"}, "server": {"port": 1}})

    data = config.to_dict()

    assert data["llm"]["type"] == "openai"
    assert data["llm"]["api_key_set"] is True
    assert "sk-secret" not in str(data)
    assert data["server"]["port"] == 1


def test_logging_setup(tmp_path):
    log_file = tmp_path / "app.log"
    setup_logging(level="debug", log_file=str(log_file))

    root = logging.getLogger("pill_identifier")
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert get_logger("tests").name == "pill_identifier.tests"
    assert get_logger("pill_identifier.api").name == "pill_identifier.api"

    flow_logger = FlowLogger("identify_medicine", "abcdef0123456789")
    flow_logger.stage_start("identify")
    assert flow_logger.stage_end("identify") >= 0.0
    assert flow_logger.stage_end("never-started") == 0.0

    for handler in root.handlers:
        handler.close()
    setup_logging(level="INFO")
