"""
Generative Model Adapters

Implementations of GenerativeModelPort over hosted chat completion APIs.
"""

from .chat_model import ChatCompletionsModel, DummyGenerativeModel, translate_provider_error
from .groq_model import GroqGenerativeModel
from .openai_model import OpenAIGenerativeModel
from .factory import LLMFactory, LLMType

__all__ = [
    "ChatCompletionsModel",
    "DummyGenerativeModel",
    "translate_provider_error",
    "GroqGenerativeModel",
    "OpenAIGenerativeModel",
    "LLMFactory",
    "LLMType",
]
