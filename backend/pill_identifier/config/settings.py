"""
Application Configuration

Settings and configuration management for the pill identifier.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, FrozenSet
from pathlib import Path
import os

from dotenv import load_dotenv, find_dotenv


# .env is looked up next to the backend directory, then in the working directory
_BACKEND_ENV = Path(__file__).resolve().parents[2] / ".env"


MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ALLOWED_IMAGE_MIME_TYPES: FrozenSet[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/webp",
})


@dataclass
class LLMConfig:
    """Generative model configuration."""

    type: str = "groq"  # groq, openai, dummy
    model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    api_key: Optional[str] = None
    temperature: float = 0.2
    max_tokens: int = 1024


@dataclass
class SpeechConfig:
    """Cloud text-to-speech configuration."""

    enabled: bool = True
    credentials_path: Optional[str] = None  # GOOGLE_APPLICATION_CREDENTIALS
    speaking_rate: float = 0.95
    pitch: float = 0.0


@dataclass
class UploadConfig:
    """Image upload constraints."""

    max_bytes: int = MAX_UPLOAD_BYTES
    allowed_mime_types: FrozenSet[str] = ALLOWED_IMAGE_MIME_TYPES
    verify_content: bool = True
    default_language: str = "te"


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            PILL_IDENTIFIER_LLM_TYPE: Generative model provider (groq/openai/dummy)
            PILL_IDENTIFIER_LLM_MODEL: Model name
            PILL_IDENTIFIER_LLM_API_KEY: API key (falls back to GROQ_API_KEY / OPENAI_API_KEY)
            PILL_IDENTIFIER_TTS_ENABLED: Set to "false" to skip the cloud TTS client
            PILL_IDENTIFIER_DEFAULT_LANGUAGE: Result language when a request names none
            GOOGLE_APPLICATION_CREDENTIALS: Service account key for cloud TTS
            PILL_IDENTIFIER_HOST / PILL_IDENTIFIER_PORT: Server bind address
            PILL_IDENTIFIER_CORS_ORIGINS: Comma separated allowed origins
            PILL_IDENTIFIER_LOG_LEVEL: Logging level
            PILL_IDENTIFIER_LOG_FILE: Optional log file
        """
        load_dotenv(dotenv_path=_BACKEND_ENV)
        load_dotenv(dotenv_path=find_dotenv(usecwd=True))

        config = cls()

        # LLM
        if llm_type := os.getenv("PILL_IDENTIFIER_LLM_TYPE"):
            config.llm.type = llm_type.lower()
        if model := os.getenv("PILL_IDENTIFIER_LLM_MODEL"):
            config.llm.model = model
        elif config.llm.type == "openai":
            config.llm.model = "gpt-4o-mini"

        if api_key := os.getenv("PILL_IDENTIFIER_LLM_API_KEY"):
            config.llm.api_key = api_key
        elif config.llm.type == "groq" and (api_key := os.getenv("GROQ_API_KEY")):
            config.llm.api_key = api_key
        elif config.llm.type == "openai" and (api_key := os.getenv("OPENAI_API_KEY")):
            config.llm.api_key = api_key

        # Speech
        if enabled := os.getenv("PILL_IDENTIFIER_TTS_ENABLED"):
            config.speech.enabled = enabled.strip().lower() not in ("0", "false", "no", "off")
        if credentials := os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
            config.speech.credentials_path = credentials

        # Upload
        if default_language := os.getenv("PILL_IDENTIFIER_DEFAULT_LANGUAGE"):
            config.upload.default_language = default_language.strip().lower()

        # Server
        if host := os.getenv("PILL_IDENTIFIER_HOST"):
            config.server.host = host
        if port := os.getenv("PILL_IDENTIFIER_PORT"):
            config.server.port = int(port)
        if origins := os.getenv("PILL_IDENTIFIER_CORS_ORIGINS"):
            config.server.cors_allow_origins = [o.strip() for o in origins.split(",") if o.strip()]

        # Logging
        if log_level := os.getenv("PILL_IDENTIFIER_LOG_LEVEL"):
            config.logging.level = log_level.upper()
        if log_file := os.getenv("PILL_IDENTIFIER_LOG_FILE"):
            config.logging.log_file = log_file

        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary."""
        config = cls()

        for section in ("llm", "speech", "upload", "server", "logging"):
            if section in data:
                target = getattr(config, section)
                for key, value in data[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary. Secrets are never included."""
        return {
            "llm": {
                "type": self.llm.type,
                "model": self.llm.model,
                "temperature": self.llm.temperature,
                "max_tokens": self.llm.max_tokens,
                "api_key_set": bool(self.llm.api_key),
            },
            "speech": {
                "enabled": self.speech.enabled,
                "speaking_rate": self.speech.speaking_rate,
                "pitch": self.speech.pitch,
            },
            "upload": {
                "max_bytes": self.upload.max_bytes,
                "allowed_mime_types": sorted(self.upload.allowed_mime_types),
                "default_language": self.upload.default_language,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
            },
            "logging": {
                "level": self.logging.level,
            },
        }


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig.from_env()
