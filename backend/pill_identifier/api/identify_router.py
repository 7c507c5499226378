"""
Identify Router - Medicine Identification Endpoints

1. Upload (multipart or data URI) is validated: size, type, decodability
2. The generative model identifies the medicine and describes its uses
3. Results can be translated and read aloud through cloud TTS
"""

from typing import List, Optional, Union
import logging
import uuid

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..application.services.identification_service import MedicineIdentificationService
from ..application.presentation import (
    ResultView,
    describe_identification_error,
    select_result_view,
)
from ..domain.ports.speech import SpeechSynthesizerPort
from ..domain.schemas import (
    ContractModel,
    IdentifyMedicineInput,
    IdentifyMedicineOutput,
    TranslateMedicineInfoInput,
    TranslateMedicineInfoOutput,
    SpeechRequest,
    SpeechErrorCategory,
    SpeechErrorEnvelope,
)
from ..domain.value_objects.language import SUPPORTED_LANGUAGES
from ..domain.exceptions import (
    DomainException,
    ValidationError,
    ImageTooLargeError,
    UnsupportedImageTypeError,
    FlowError,
    ModelProviderError,
    InvalidApiKeyError,
    MissingApiKeyError,
    ModelUnavailableError,
    ModelTimeoutError,
    InvalidModelRequestError,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pill Identifier"])


# =============================================================================
# Response models
# =============================================================================

class IdentifyResponse(ContractModel):
    result: IdentifyMedicineOutput
    view: ResultView


class SpeechResponse(ContractModel):
    audio_content: str


class LanguageInfo(ContractModel):
    code: str
    label: str


class LanguagesResponse(ContractModel):
    languages: List[LanguageInfo]
    default: str


# =============================================================================
# Dependencies
# =============================================================================

def get_identification_service(request: Request) -> MedicineIdentificationService:
    return request.app.state.identification_service


def get_speech_synthesizer(request: Request) -> SpeechSynthesizerPort:
    return request.app.state.speech_synthesizer


# =============================================================================
# Error mapping
# =============================================================================

SPEECH_ERROR_STATUS = {
    SpeechErrorCategory.INITIALIZATION_FAILED: 503,
    SpeechErrorCategory.INVALID_ARGUMENT: 400,
}


def status_for_exception(exc: DomainException) -> int:
    """HTTP status code for a domain exception."""
    if isinstance(exc, ImageTooLargeError):
        return 413
    if isinstance(exc, UnsupportedImageTypeError):
        return 415
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, FlowError):
        return 401 if exc.category == FlowError.INVALID_CREDENTIAL else 502
    if isinstance(exc, (InvalidApiKeyError, MissingApiKeyError)):
        return 401
    if isinstance(exc, ModelUnavailableError):
        return 503
    if isinstance(exc, ModelTimeoutError):
        return 504
    if isinstance(exc, InvalidModelRequestError):
        return 400
    if isinstance(exc, ModelProviderError):
        return 502
    return 500


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Serialize a DomainException with the user-facing wording and error view."""
    title, message = describe_identification_error(exc)
    status_code = status_for_exception(exc)

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")

    body = exc.to_dict()
    body["title"] = title
    body["view"] = select_result_view(None, error=message).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status_code, content=body)


# =============================================================================
# Endpoints
# =============================================================================

def _identify_response(result: IdentifyMedicineOutput) -> IdentifyResponse:
    return IdentifyResponse(result=result, view=select_result_view(result))


@router.get("/languages", response_model=LanguagesResponse)
async def list_languages(
    service: MedicineIdentificationService = Depends(get_identification_service),
):
    """Languages offered for results and speech."""
    return LanguagesResponse(
        languages=[LanguageInfo(code=lang.code, label=lang.label) for lang in SUPPORTED_LANGUAGES],
        default=service.upload_config.default_language,
    )


@router.post("/identify", response_model=IdentifyResponse)
async def identify_upload(
    image: UploadFile = File(...),
    language: Optional[str] = Form(None),
    service: MedicineIdentificationService = Depends(get_identification_service),
):
    """
    Identify a medicine from an uploaded photo of a tablet sheet.
    """
    request_id = uuid.uuid4().hex

    language = language or service.upload_config.default_language

    # One byte past the limit is enough to reject the upload
    image_bytes = await image.read(service.upload_config.max_bytes + 1)
    logger.info(
        f"[{request_id[:8]}] Upload {image.filename!r} ({image.content_type}, "
        f"{len(image_bytes)} bytes), language={language}"
    )

    result = await run_in_threadpool(
        service.identify_from_bytes,
        image_bytes,
        image.content_type,
        language,
        image.filename,
        request_id,
    )
    return _identify_response(result)


@router.post("/identify/data-uri", response_model=IdentifyResponse)
async def identify_data_uri(
    body: IdentifyMedicineInput,
    service: MedicineIdentificationService = Depends(get_identification_service),
):
    """Identify a medicine from a `data:<mime>;base64,...` photo."""
    result = await run_in_threadpool(
        service.identify_from_data_uri,
        body.photo_data_uri,
        body.language,
        uuid.uuid4().hex,
    )
    return _identify_response(result)


@router.post("/translate", response_model=TranslateMedicineInfoOutput)
async def translate(
    body: TranslateMedicineInfoInput,
    service: MedicineIdentificationService = Depends(get_identification_service),
):
    """Translate a medicine name and its uses."""
    return await run_in_threadpool(
        service.translate,
        body.medicine_name,
        body.uses,
        body.language,
        uuid.uuid4().hex,
    )


@router.post(
    "/speech",
    response_model=Union[SpeechResponse, SpeechErrorEnvelope],
    responses={
        400: {"model": SpeechErrorEnvelope},
        502: {"model": SpeechErrorEnvelope},
        503: {"model": SpeechErrorEnvelope},
    },
)
async def synthesize_speech(
    body: SpeechRequest,
    synthesizer: SpeechSynthesizerPort = Depends(get_speech_synthesizer),
):
    """
    Synthesize speech with cloud TTS.

    Returns base64 MP3 audio, or an error envelope describing why synthesis
    failed.
    """
    outcome = await run_in_threadpool(synthesizer.synthesize, body.text, body.language)

    if isinstance(outcome, SpeechErrorEnvelope):
        status_code = SPEECH_ERROR_STATUS.get(outcome.category, 502)
        return JSONResponse(
            status_code=status_code,
            content=outcome.model_dump(mode="json", by_alias=True),
        )

    return SpeechResponse(audio_content=outcome)
