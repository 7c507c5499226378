"""
Chat Completions Model

Structured generation over OpenAI-compatible chat completion APIs
(Groq, OpenAI). Provider exceptions are translated into the
ModelProviderError hierarchy here and nowhere else.
"""

from types import ModuleType
from typing import Optional, Dict, Any, List, Type, TypeVar
import json
import logging
import re
import time

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.value_objects.image_payload import ImagePayload
from ...domain.schemas import IdentifyMedicineOutput, TranslateMedicineInfoOutput
from ...domain.exceptions import (
    ModelProviderError,
    InvalidApiKeyError,
    ModelUnavailableError,
    ModelTimeoutError,
    InvalidModelRequestError,
    ModelResponseSchemaError,
    UnexpectedModelError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


SYSTEM_PROMPT_TEMPLATE = """You are a JSON API. Respond ONLY with a single JSON object, \
without markdown fences or commentary, that validates against this JSON schema:

{schema}
"""

# Provider error codes that mean the key itself was rejected
INVALID_KEY_CODES = {"invalid_api_key", "API_KEY_INVALID"}

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def translate_provider_error(exc: Exception, sdk: ModuleType, provider: str) -> ModelProviderError:
    """
    Map an SDK exception to a tagged provider error.

    Args:
        exc: Exception raised by the provider SDK
        sdk: The SDK module (`groq` or `openai`); both expose the same
            exception classes
        provider: Provider name for error details

    Returns:
        ModelProviderError subclass describing the failure
    """
    raw = str(exc)

    # APITimeoutError subclasses APIConnectionError
    if isinstance(exc, sdk.APITimeoutError):
        return ModelTimeoutError(f"The request to {provider} timed out: {raw}", provider=provider)

    if isinstance(exc, sdk.APIConnectionError):
        return ModelUnavailableError(f"Could not reach {provider}: {raw}", provider=provider)

    if isinstance(exc, sdk.AuthenticationError):
        return InvalidApiKeyError(f"{provider} rejected the API key: {raw}", provider=provider)

    if isinstance(exc, sdk.APIStatusError):
        status_code = exc.status_code
        code = getattr(exc, "code", None)
        if code is None and isinstance(exc.body, dict):
            code = exc.body.get("code")

        if code in INVALID_KEY_CODES or any(marker in raw for marker in INVALID_KEY_CODES):
            return InvalidApiKeyError(f"{provider} rejected the API key: {raw}", provider=provider)

        if isinstance(exc, sdk.RateLimitError) or status_code in (429, 503, 529):
            return ModelUnavailableError(
                f"{provider} is overloaded or temporarily unavailable: {raw}",
                provider=provider,
                details={"status_code": status_code},
            )

        if status_code == 504:
            return ModelTimeoutError(f"{provider} timed out: {raw}", provider=provider)

        if isinstance(exc, (sdk.BadRequestError, sdk.UnprocessableEntityError)) or status_code == 413:
            return InvalidModelRequestError(
                f"{provider} rejected the request: {raw}",
                provider=provider,
                details={"status_code": status_code},
            )

        return UnexpectedModelError(raw, status_code=status_code, provider=provider)

    return UnexpectedModelError(raw, provider=provider)


def extract_json_text(content: str) -> str:
    """Strip markdown code fences some models wrap around JSON output."""
    text = content.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1)
    return text


class ChatCompletionsModel(GenerativeModelPort):
    """
    Generative model implementation over an OpenAI-compatible client.

    Attributes:
        provider: Provider name used in logs and errors
        model: Model identifier
        temperature: Sampling temperature
        max_tokens: Maximum response tokens
    """

    provider = "chat"

    def __init__(
        self,
        client: Any,
        sdk: ModuleType,
        model: str,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ):
        self._client = client
        self._sdk = sdk
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def generate_structured(
        self,
        prompt: str,
        output_schema: Type[T],
        image: Optional[ImagePayload] = None,
    ) -> T:
        start_time = time.time()
        messages = self._build_messages(prompt, output_schema, image)

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except self._sdk.APIError as e:
            self.logger.error(f"{self.provider} API error: {e!r}")
            raise translate_provider_error(e, self._sdk, self.provider) from e

        content = response.choices[0].message.content if response.choices else None
        duration_ms = (time.time() - start_time) * 1000
        self.logger.info(
            f"{self.provider} responded for {output_schema.__name__} in {duration_ms:.0f}ms"
        )

        return self._parse(content, output_schema)

    def _build_messages(
        self,
        prompt: str,
        output_schema: Type[BaseModel],
        image: Optional[ImagePayload],
    ) -> List[Dict[str, Any]]:
        schema = json.dumps(output_schema.model_json_schema(by_alias=True), ensure_ascii=False)
        system = SYSTEM_PROMPT_TEMPLATE.format(schema=schema)

        if image is None:
            user_content: Any = prompt
        else:
            user_content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image.data_uri}},
            ]

        return [
            {"role": "system", "content": system},
            {"role": "user", "content": user_content},
        ]

    def _parse(self, content: Optional[str], output_schema: Type[T]) -> T:
        if not content:
            raise ModelResponseSchemaError(
                f"{self.provider} returned an empty response",
                provider=self.provider,
            )

        try:
            return output_schema.model_validate_json(extract_json_text(content))
        except PydanticValidationError as e:
            self.logger.warning(f"Output failed {output_schema.__name__} validation: {e}")
            raise ModelResponseSchemaError(
                f"{self.provider} output does not match {output_schema.__name__}",
                raw_output=content,
                provider=self.provider,
            ) from e

    @property
    def model_name(self) -> str:
        return self._model

    def close(self) -> None:
        self._client.close()


class DummyGenerativeModel(GenerativeModelPort):
    """
    Canned generative model for local development and testing.

    Returns a fixed instance per output schema. By default it never
    identifies a medicine.
    """

    DEFAULT_RESPONSES: Dict[type, Dict[str, Any]] = {
        IdentifyMedicineOutput: {
            "isIdentified": False,
            "medicineName": "Could not identify medicine (dummy model is configured)",
            "uses": "",
        },
        TranslateMedicineInfoOutput: {
            "translatedMedicineName": "",
            "translatedUses": "",
        },
    }

    def __init__(self, responses: Optional[Dict[type, Any]] = None):
        self._responses = dict(self.DEFAULT_RESPONSES)
        if responses:
            self._responses.update(responses)
        self.calls: List[Dict[str, Any]] = []

    def generate_structured(
        self,
        prompt: str,
        output_schema: Type[T],
        image: Optional[ImagePayload] = None,
    ) -> T:
        self.calls.append({"prompt": prompt, "schema": output_schema, "image": image})

        response = self._responses.get(output_schema)
        if response is None:
            raise ModelResponseSchemaError(
                f"No dummy response configured for {output_schema.__name__}",
                provider="dummy",
            )
        if isinstance(response, output_schema):
            return response
        return output_schema.model_validate(response)

    @property
    def model_name(self) -> str:
        return "DummyLLM"
