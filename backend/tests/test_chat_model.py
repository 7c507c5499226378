"""
Tests for the chat completions adapter, provider error translation and the
model factory
"""

from types import SimpleNamespace

import groq
import httpx
import openai
import pytest

from pill_identifier.domain.exceptions import (
    InvalidApiKeyError,
    InvalidModelRequestError,
    MissingApiKeyError,
    ModelResponseSchemaError,
    ModelTimeoutError,
    ModelUnavailableError,
    UnexpectedModelError,
)
from pill_identifier.domain.schemas import IdentifyMedicineOutput, TranslateMedicineInfoOutput
from pill_identifier.infrastructure.llm import (
    ChatCompletionsModel,
    DummyGenerativeModel,
    GroqGenerativeModel,
    LLMFactory,
    LLMType,
    translate_provider_error,
)


REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def _status_error(cls, status_code, body=None):
    return cls("provider error", response=httpx.Response(status_code, request=REQUEST), body=body)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _model(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions), close=lambda: None)
    model = ChatCompletionsModel(client, groq, "test-model")
    model.provider = "Groq"
    return model, completions


# =============================================================================
# Error translation
# =============================================================================

@pytest.mark.parametrize("exc,expected", [
    (_status_error(groq.AuthenticationError, 401), InvalidApiKeyError),
    (_status_error(groq.BadRequestError, 400, body={"code": "invalid_api_key"}), InvalidApiKeyError),
    (_status_error(groq.RateLimitError, 429), ModelUnavailableError),
    (_status_error(groq.InternalServerError, 503), ModelUnavailableError),
    (_status_error(groq.BadRequestError, 400), InvalidModelRequestError),
    (_status_error(groq.UnprocessableEntityError, 422), InvalidModelRequestError),
    (_status_error(groq.InternalServerError, 500), UnexpectedModelError),
    (groq.APITimeoutError(request=REQUEST), ModelTimeoutError),
    (groq.APIConnectionError(request=REQUEST), ModelUnavailableError),
])
def test_translate_groq_errors(exc, expected):
    translated = translate_provider_error(exc, groq, "Groq")

    assert type(translated) is expected
    assert translated.provider == "Groq"


def test_translate_openai_errors():
    auth = _status_error(openai.AuthenticationError, 401)
    timeout = openai.APITimeoutError(request=REQUEST)

    assert isinstance(translate_provider_error(auth, openai, "OpenAI"), InvalidApiKeyError)
    assert isinstance(translate_provider_error(timeout, openai, "OpenAI"), ModelTimeoutError)


def test_unexpected_error_keeps_status_code():
    translated = translate_provider_error(_status_error(groq.InternalServerError, 500), groq, "Groq")
    assert translated.status_code == 500
    assert translated.details["status_code"] == 500


# =============================================================================
# Structured generation
# =============================================================================

def test_request_carries_image_and_json_mode(png_payload):
    model, completions = _model(content='{"isIdentified": false, "medicineName": "x", "uses": ""}')

    model.generate_structured("identify this", IdentifyMedicineOutput, image=png_payload)

    request = completions.requests[0]
    assert request["model"] == "test-model"
    assert request["response_format"] == {"type": "json_object"}

    system, user = request["messages"]
    assert system["role"] == "system"
    assert "isIdentified" in system["content"]
    assert user["content"][0] == {"type": "text", "text": "identify this"}
    assert user["content"][1]["image_url"]["url"] == png_payload.data_uri


def test_text_only_request():
    model, completions = _model(content='{"translatedMedicineName": "a", "translatedUses": "b"}')

    result = model.generate_structured("translate", TranslateMedicineInfoOutput)

    assert result.translated_uses == "b"
    assert completions.requests[0]["messages"][1]["content"] == "translate"


def test_fenced_json_is_accepted():
    content = '```json\n{"isIdentified": true, "medicineName": "Dolo 650", "uses": "Fever"}\n```'
    model, _ = _model(content=content)

    result = model.generate_structured("p", IdentifyMedicineOutput)

    assert result.medicine_name == "Dolo 650"


@pytest.mark.parametrize("content", [None, "", "not json", '{"isIdentified": "maybe"}'])
def test_schema_mismatch(content):
    model, _ = _model(content=content)

    with pytest.raises(ModelResponseSchemaError):
        model.generate_structured("p", IdentifyMedicineOutput)


def test_sdk_errors_are_translated_at_the_boundary():
    error = _status_error(groq.AuthenticationError, 401)
    model, _ = _model(error=error)

    with pytest.raises(InvalidApiKeyError) as exc_info:
        model.generate_structured("p", IdentifyMedicineOutput)

    assert exc_info.value.__cause__ is error


# =============================================================================
# Factory
# =============================================================================

def test_factory_dummy():
    model = LLMFactory.create(LLMType.DUMMY)

    result = model.generate_structured("p", IdentifyMedicineOutput)

    assert isinstance(model, DummyGenerativeModel)
    assert result.is_identified is False
    assert result.uses == ""


def test_factory_groq_requires_key():
    with pytest.raises(MissingApiKeyError):
        LLMFactory.create_from_config({"type": "groq", "api_key": None})


def test_factory_groq_with_key():
    model = LLMFactory.create_from_config({"type": "groq", "api_key": "gsk_test", "model": None})

    assert isinstance(model, GroqGenerativeModel)
    assert model.model_name == "meta-llama/llama-4-scout-17b-16e-instruct"
    model.close()


def test_factory_unknown_type():
    with pytest.raises(ValueError):
        LLMFactory.create_from_config({"type": "ollama"})
