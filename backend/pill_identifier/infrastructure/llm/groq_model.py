"""
Groq Generative Model

Vision-capable Llama models served by Groq.
"""

from typing import Optional

import groq

from ...domain.exceptions import MissingApiKeyError
from .chat_model import ChatCompletionsModel


DEFAULT_GROQ_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"


class GroqGenerativeModel(ChatCompletionsModel):
    """
    Generative model backed by the Groq chat completions API.

    Usage:
        model = GroqGenerativeModel(api_key="gsk_...")
        output = model.generate_structured(prompt, IdentifyMedicineOutput, image=payload)
    """

    provider = "Groq"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GROQ_MODEL,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        timeout: Optional[float] = None,
    ):
        if not api_key:
            raise MissingApiKeyError(
                "GROQ_API_KEY is not set. Add it to backend/.env or the environment.",
                provider=self.provider,
            )

        # Without a timeout the SDK transport default applies
        client_kwargs = {"api_key": api_key}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        client = groq.Groq(**client_kwargs)
        super().__init__(
            client=client,
            sdk=groq,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
