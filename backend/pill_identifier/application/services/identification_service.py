"""
Medicine Identification Service

High-level application service for identifying medicines from photos.
"""

from typing import Optional
import logging

from ..flows.identify_medicine import identify_medicine
from ..flows.translate_medicine_info import translate_medicine_info
from ...config.settings import UploadConfig
from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.value_objects.image_payload import ImagePayload
from ...domain.schemas import (
    IdentifyMedicineInput,
    IdentifyMedicineOutput,
    TranslateMedicineInfoInput,
    TranslateMedicineInfoOutput,
)
from ...domain.exceptions import InvalidImageError, InvalidInputError
from ...cross_cutting.validation import ensure_valid_image, ensure_language_tag, validate_text


logger = logging.getLogger(__name__)


class MedicineIdentificationService:
    """
    Application service for identifying medicines.

    This is the main entry point for the API and the CLI. It handles:
    - Image loading from bytes, files and data URIs
    - Upload validation (size, type, decodability)
    - Calling the identification and translation flows

    Usage:
        service = MedicineIdentificationService(model)

        # From file path
        result = service.identify_from_file("path/to/tablets.jpg", language="te")

        # From upload bytes
        result = service.identify_from_bytes(image_bytes, "image/png", language="en")

        # From a data URI
        result = service.identify_from_data_uri("data:image/png;base64,...", language="hi")
    """

    def __init__(
        self,
        model: GenerativeModelPort,
        upload_config: Optional[UploadConfig] = None,
    ):
        """
        Initialize the service.

        Args:
            model: Generative model used by the flows
            upload_config: Upload constraints (defaults: 5MB, jpeg/png/webp)
        """
        self.model = model
        self.upload_config = upload_config or UploadConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def identify(
        self,
        image: ImagePayload,
        language: str,
        request_id: Optional[str] = None,
    ) -> IdentifyMedicineOutput:
        """
        Validate the image and identify the medicine in it.

        Args:
            image: Uploaded image
            language: Language for the uses text
            request_id: Optional id used to tag log lines

        Returns:
            IdentifyMedicineOutput

        Raises:
            InvalidImageError: If the image fails validation
            InvalidInputError: If the language is empty
        """
        language = ensure_language_tag(language)
        image = ensure_valid_image(
            image,
            max_bytes=self.upload_config.max_bytes,
            allowed_mime_types=self.upload_config.allowed_mime_types,
            verify_content=self.upload_config.verify_content,
        )

        self.logger.info(f"Identifying medicine from {image} ({image.source or 'upload'})")
        return identify_medicine(
            self.model,
            IdentifyMedicineInput(photo_data_uri=image.data_uri, language=language),
            request_id=request_id,
        )

    def identify_from_bytes(
        self,
        image_bytes: bytes,
        mime_type: Optional[str],
        language: str,
        source: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> IdentifyMedicineOutput:
        """Identify a medicine from raw upload bytes and their declared MIME type."""
        if not image_bytes:
            raise InvalidImageError("Image is required.")

        image = ImagePayload.from_bytes(
            image_bytes,
            mime_type=(mime_type or "application/octet-stream").split(";")[0].strip().lower(),
            source=source,
        )
        return self.identify(image, language, request_id=request_id)

    def identify_from_file(
        self,
        file_path: str,
        language: str,
        request_id: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> IdentifyMedicineOutput:
        """
        Identify a medicine from an image file.

        Args:
            mime_type: Type of the file; taken from the extension when omitted

        Raises:
            InvalidImageError: If the file doesn't exist, can't be read or is invalid
        """
        try:
            image = ImagePayload.from_file(file_path, mime_type=mime_type)
        except FileNotFoundError as e:
            raise InvalidImageError(str(e)) from e
        except OSError as e:
            raise InvalidImageError(f"Failed to read image file: {e}") from e
        except ValueError as e:
            raise InvalidImageError(f"Failed to load image: {e}") from e

        return self.identify(image, language, request_id=request_id)

    def identify_from_data_uri(
        self,
        data_uri: str,
        language: str,
        request_id: Optional[str] = None,
    ) -> IdentifyMedicineOutput:
        try:
            image = ImagePayload.from_data_uri(data_uri)
        except ValueError as e:
            raise InvalidImageError(str(e)) from e

        return self.identify(image, language, request_id=request_id)

    def translate(
        self,
        medicine_name: str,
        uses: str,
        language: str,
        request_id: Optional[str] = None,
    ) -> TranslateMedicineInfoOutput:
        """
        Translate an identification result.

        Raises:
            InvalidInputError: If the medicine name or language is empty,
                or the uses text is too long
        """
        language = ensure_language_tag(language)
        if not medicine_name or not medicine_name.strip():
            raise InvalidInputError("medicine_name", "Medicine name is required.")
        if uses and uses.strip():
            ok, message = validate_text(uses)
            if not ok:
                raise InvalidInputError("uses", message)

        return translate_medicine_info(
            self.model,
            TranslateMedicineInfoInput(medicine_name=medicine_name, uses=uses, language=language),
            request_id=request_id,
        )
