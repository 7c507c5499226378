"""
Pill Identifier - FastAPI Backend

Photo of a tablet sheet -> generative model -> medicine name and uses,
with translation and cloud text-to-speech.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config.settings import AppConfig, get_default_config
from .cross_cutting.logging import setup_logging
from .domain.exceptions import DomainException
from .domain.ports.generative_model import GenerativeModelPort
from .domain.ports.speech import SpeechSynthesizerPort
from .application.services.identification_service import MedicineIdentificationService
from .infrastructure.llm.factory import LLMFactory
from .infrastructure.tts.google_cloud_tts import (
    GoogleCloudSpeechSynthesizer,
    FailedClient,
    create_client_handle,
)
from .api.identify_router import router as identify_router, domain_exception_handler


logger = logging.getLogger(__name__)


def build_generative_model(config: AppConfig) -> GenerativeModelPort:
    """
    Create the generative model client.

    Raises:
        MissingApiKeyError: If the provider has no API key; startup aborts
    """
    return LLMFactory.create_from_config({
        "type": config.llm.type,
        "model": config.llm.model,
        "api_key": config.llm.api_key,
        "temperature": config.llm.temperature,
        "max_tokens": config.llm.max_tokens,
    })


def build_speech_synthesizer(config: AppConfig) -> SpeechSynthesizerPort:
    """Create the cloud TTS synthesizer. Never fails; failures are remembered."""
    if config.speech.enabled:
        handle = create_client_handle(credentials_path=config.speech.credentials_path)
    else:
        logger.info("Cloud TTS disabled by configuration")
        handle = FailedClient(reason="disabled")

    return GoogleCloudSpeechSynthesizer(
        handle,
        speaking_rate=config.speech.speaking_rate,
        pitch=config.speech.pitch,
    )


def create_app(
    config: Optional[AppConfig] = None,
    generative_model: Optional[GenerativeModelPort] = None,
    speech_synthesizer: Optional[SpeechSynthesizerPort] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Process-wide handles are created in the lifespan, stored on
    `app.state` and closed on shutdown. Pre-built handles can be passed in
    (tests); the app then does not close them.
    """
    config = config or get_default_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            level=config.logging.level,
            log_file=config.logging.log_file,
            format_string=config.logging.format,
        )

        model = generative_model or build_generative_model(config)
        synthesizer = speech_synthesizer or build_speech_synthesizer(config)

        app.state.config = config
        app.state.generative_model = model
        app.state.speech_synthesizer = synthesizer
        app.state.identification_service = MedicineIdentificationService(model, config.upload)

        logger.info(
            f"Pill Identifier started: model={model.model_name}, "
            f"tts_available={synthesizer.is_available}"
        )
        try:
            yield
        finally:
            if speech_synthesizer is None:
                synthesizer.close()
            if generative_model is None:
                model.close()
            logger.info("Pill Identifier stopped")

    app = FastAPI(
        title="Pill Identifier API",
        description="Identify medicines from photos of tablet sheets - Groq + Cloud TTS",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_allow_origins,
        allow_credentials=False,  # must be False with "*"
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.include_router(identify_router)

    @app.get("/")
    async def root():
        return {"message": "Pill Identifier API", "status": "active", "version": __version__}

    @app.get("/health")
    async def health_check():
        model = app.state.generative_model
        synthesizer = app.state.speech_synthesizer
        return {
            "status": "healthy" if synthesizer.is_available else "degraded",
            "model": model.model_name,
            "tts_available": synthesizer.is_available,
        }

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    config = get_default_config()
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
