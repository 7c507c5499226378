"""
LLM Factory

Factory for creating generative model instances.
"""

from typing import Dict, Any
from enum import Enum

from ...domain.ports.generative_model import GenerativeModelPort
from .chat_model import DummyGenerativeModel


class LLMType(Enum):
    """Available generative model implementations."""

    GROQ = "groq"
    OPENAI = "openai"
    DUMMY = "dummy"


class LLMFactory:
    """
    Factory for creating generative model instances.

    Usage:
        model = LLMFactory.create(LLMType.GROQ, api_key="gsk_...")

        model = LLMFactory.create_from_config({"type": "openai", "api_key": "sk-..."})
    """

    @staticmethod
    def create(llm_type: LLMType, **kwargs) -> GenerativeModelPort:
        """
        Create a generative model instance.

        Args:
            llm_type: Type of model to create
            **kwargs: Configuration options
                - api_key: API key for the provider
                - model: Model name
                - temperature: Sampling temperature
                - max_tokens: Maximum response length

        Returns:
            GenerativeModelPort implementation

        Raises:
            MissingApiKeyError: If a hosted provider is requested without a key
        """
        options = {
            key: kwargs[key]
            for key in ("api_key", "model", "temperature", "max_tokens", "timeout")
            if kwargs.get(key) is not None
        }

        if llm_type == LLMType.GROQ:
            from .groq_model import GroqGenerativeModel
            return GroqGenerativeModel(**options)

        elif llm_type == LLMType.OPENAI:
            from .openai_model import OpenAIGenerativeModel
            return OpenAIGenerativeModel(**options)

        elif llm_type == LLMType.DUMMY:
            return DummyGenerativeModel()

        else:
            raise ValueError(f"Unknown LLM type: {llm_type}")

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> GenerativeModelPort:
        """Create a model from a configuration dictionary."""
        llm_type_str = str(config.get("type", "groq")).lower()

        try:
            llm_type = LLMType(llm_type_str)
        except ValueError:
            if llm_type_str in ("gpt", "gpt4", "gpt-4o"):
                llm_type = LLMType.OPENAI
            else:
                raise ValueError(f"Unknown LLM type: {llm_type_str}")

        return LLMFactory.create(llm_type, **config)
