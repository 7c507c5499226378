"""
OpenAI Generative Model

GPT-4o family models with image input.
"""

from typing import Optional

import openai

from ...domain.exceptions import MissingApiKeyError
from .chat_model import ChatCompletionsModel


DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIGenerativeModel(ChatCompletionsModel):
    """Generative model backed by the OpenAI chat completions API."""

    provider = "OpenAI"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        timeout: Optional[float] = None,
    ):
        if not api_key:
            raise MissingApiKeyError(
                "OPENAI_API_KEY is not set. Add it to backend/.env or the environment.",
                provider=self.provider,
            )

        # Without a timeout the SDK transport default applies
        client_kwargs = {"api_key": api_key}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        client = openai.OpenAI(**client_kwargs)
        super().__init__(
            client=client,
            sdk=openai,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
